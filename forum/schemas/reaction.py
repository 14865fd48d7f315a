from pydantic import BaseModel, Field, StrictInt
from typing import Optional

from forum.services.reactions import ToggleResult

class ReactionCreate(BaseModel):
    """反应请求模型"""
    value: StrictInt = Field(..., description="1 = like, -1 = dislike")

class ReactionSummary(BaseModel):
    """反应统计响应模型"""
    likes_count: int = Field(..., description="点赞数")
    dislikes_count: int = Field(..., description="点踩数")
    my_reaction: Optional[int] = Field(default=None, description="当前用户的反应")

class ReactionToggleResponse(ReactionSummary):
    """反应切换响应模型"""
    result: ToggleResult = Field(..., description="created / updated / removed")
