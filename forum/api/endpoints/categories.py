from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session
from forum.db.database import get_session
from forum.models.category import Category, DEFAULT_CATEGORIES
from forum.schemas.category import CategoryResponse

router = APIRouter()

def seed_default_categories(session: Session) -> int:
    """Insert the default categories when the table is empty"""
    if session.execute(select(Category.id).limit(1)).first() is not None:
        return 0
    session.add_all(Category(name=name, slug=slug) for name, slug in DEFAULT_CATEGORIES)
    session.commit()
    return len(DEFAULT_CATEGORIES)

@router.get("", response_model=List[CategoryResponse], summary="List all categories")
def list_categories(
    session: Session = Depends(get_session)
):
    """List all categories"""
    return session.execute(select(Category).order_by(Category.name)).scalars().all()
