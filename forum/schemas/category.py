from pydantic import BaseModel, ConfigDict, Field

class CategoryResponse(BaseModel):
    """分类响应模型"""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="分类ID")
    name: str = Field(..., description="分类名称")
    slug: str = Field(..., description="分类标识")
