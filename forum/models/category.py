from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from forum.db.database import Base

DEFAULT_CATEGORIES = [
    ("general", "general"),
    ("help", "help"),
    ("random", "random"),
    ("announcements", "announcements"),
    ("show-and-tell", "show-and-tell"),
]

class Category(Base):
    """Category model"""
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True)
    slug: Mapped[str] = mapped_column(String(50), unique=True, index=True)

class PostCategory(Base):
    """文章分类关联模型"""
    __tablename__ = "post_categories"

    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)
