from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from forum.schemas.category import CategoryResponse

class PostBase(BaseModel):
    """文章基础模型"""
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)

class PostCreate(PostBase):
    """创建文章请求模型"""
    category_ids: List[int] = Field(default_factory=list, description="分类ID列表")

class PostResponse(PostBase):
    """文章响应模型"""
    id: int
    user_id: int
    author: str
    created_at: datetime
    likes_count: int = 0
    dislikes_count: int = 0
    my_reaction: Optional[int] = None
    categories: List[CategoryResponse] = []
