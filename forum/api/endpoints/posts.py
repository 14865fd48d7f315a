from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session
from forum.db.database import get_session
from forum.models.post import Post
from forum.models.category import Category, PostCategory
from forum.models.reaction import Reaction, ReactionValue, TargetType
from forum.schemas.post import PostCreate, PostResponse
from forum.core.security import get_current_identity, get_optional_identity
from forum.services import reactions
from forum.services.sessions import Identity
from typing import List, Optional

router = APIRouter()

DEFAULT_LIMIT = 50

def serialize_posts(session: Session, posts: List[Post], identity: Optional[Identity]) -> List[dict]:
    """Attach live reaction counts and the caller's own reaction"""
    post_ids = [post.id for post in posts]
    counts = reactions.counts_for(session, TargetType.POST, post_ids)
    mine = {}
    if identity:
        mine = reactions.current_reactions_for(session, identity.id, TargetType.POST, post_ids)

    return [{
        "id": post.id,
        "user_id": post.user_id,
        "author": post.author.username,
        "title": post.title,
        "content": post.content,
        "created_at": post.created_at,
        "likes_count": counts[post.id].likes,
        "dislikes_count": counts[post.id].dislikes,
        "my_reaction": mine.get(post.id),
        "categories": [{"id": c.id, "name": c.name, "slug": c.slug} for c in post.categories],
    } for post in posts]

def get_post_or_404(session: Session, post_id: int) -> Post:
    post = session.get(Post, post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return post

@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED, summary="Create a new post")
def create_post(
    post: PostCreate,
    current_user: Identity = Depends(get_current_identity),
    session: Session = Depends(get_session)
):
    """Create a new post"""
    category_ids = list(dict.fromkeys(post.category_ids))
    categories = []
    if category_ids:
        categories = session.execute(
            select(Category).where(Category.id.in_(category_ids))
        ).scalars().all()
        if len(categories) != len(category_ids):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Some categories not found"
            )

    new_post = Post(
        title=post.title,
        content=post.content,
        user_id=current_user.id,
    )
    session.add(new_post)
    session.flush()  # Flush to get the post ID
    for category_id in category_ids:
        session.add(PostCategory(post_id=new_post.id, category_id=category_id))
    session.commit()
    session.refresh(new_post)

    return serialize_posts(session, [new_post], current_user)[0]

@router.get("", response_model=List[PostResponse], summary="List posts, newest first")
def list_posts(
    category: Optional[str] = None,
    mine: bool = False,
    liked: bool = False,
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_session),
    current_user: Optional[Identity] = Depends(get_optional_identity)
):
    """List posts.

    ``mine`` and ``liked`` only apply to a logged-in caller; anonymous
    callers get the unfiltered listing.
    """
    query = select(Post)

    if category:
        query = query.where(Post.id.in_(
            select(PostCategory.post_id)
            .join(Category, Category.id == PostCategory.category_id)
            .where(Category.slug == category)
        ))

    if current_user and mine:
        query = query.where(Post.user_id == current_user.id)

    if current_user and liked:
        query = query.where(Post.id.in_(
            select(Reaction.target_id).where(
                Reaction.user_id == current_user.id,
                Reaction.target_type == TargetType.POST.value,
                Reaction.value == ReactionValue.LIKE,
            )
        ))

    query = query.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit).offset(offset)
    posts = session.execute(query).scalars().all()
    return serialize_posts(session, posts, current_user)

@router.get("/{post_id}", response_model=PostResponse, summary="Get a specific post")
def get_post(
    post_id: int,
    session: Session = Depends(get_session),
    current_user: Optional[Identity] = Depends(get_optional_identity)
):
    """Get a specific post"""
    post = get_post_or_404(session, post_id)
    return serialize_posts(session, [post], current_user)[0]
