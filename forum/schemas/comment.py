from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

class CommentCreate(BaseModel):
    """创建评论请求模型"""
    body: str = Field(..., min_length=1, description="评论内容")

class CommentResponse(CommentCreate):
    """评论响应模型"""
    id: int = Field(..., description="评论ID")
    post_id: int = Field(..., description="文章ID")
    user_id: int = Field(..., description="作者ID")
    author: str = Field(..., description="作者用户名")
    created_at: datetime = Field(..., description="创建时间")
    likes_count: int = Field(default=0, description="点赞数")
    dislikes_count: int = Field(default=0, description="点踩数")
    my_reaction: Optional[int] = Field(default=None, description="当前用户的反应")
