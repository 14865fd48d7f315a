from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session
from forum.api.endpoints.posts import get_post_or_404
from forum.db.database import get_session
from forum.models.comment import Comment
from forum.models.reaction import TargetType
from forum.schemas.comment import CommentCreate, CommentResponse
from forum.core.security import get_current_identity, get_optional_identity
from forum.services import reactions
from forum.services.sessions import Identity
from typing import List, Optional

router = APIRouter()

def serialize_comments(session: Session, comments: List[Comment], identity: Optional[Identity]) -> List[dict]:
    comment_ids = [comment.id for comment in comments]
    counts = reactions.counts_for(session, TargetType.COMMENT, comment_ids)
    mine = {}
    if identity:
        mine = reactions.current_reactions_for(session, identity.id, TargetType.COMMENT, comment_ids)

    return [{
        "id": comment.id,
        "post_id": comment.post_id,
        "user_id": comment.user_id,
        "author": comment.author.username,
        "body": comment.body,
        "created_at": comment.created_at,
        "likes_count": counts[comment.id].likes,
        "dislikes_count": counts[comment.id].dislikes,
        "my_reaction": mine.get(comment.id),
    } for comment in comments]

@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED, summary="Create a comment on a post")
def create_comment(
    post_id: int,
    comment: CommentCreate,
    current_user: Identity = Depends(get_current_identity),
    session: Session = Depends(get_session)
):
    """Create a comment on a post"""
    get_post_or_404(session, post_id)

    db_comment = Comment(
        post_id=post_id,
        user_id=current_user.id,
        body=comment.body,
    )
    session.add(db_comment)
    session.commit()
    session.refresh(db_comment)
    return serialize_comments(session, [db_comment], current_user)[0]

@router.get("", response_model=List[CommentResponse], summary="List all comments on a post")
def list_comments(
    post_id: int,
    session: Session = Depends(get_session),
    current_user: Optional[Identity] = Depends(get_optional_identity)
):
    """List all comments on a post, oldest first"""
    get_post_or_404(session, post_id)

    comments = session.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    ).scalars().all()
    return serialize_comments(session, comments, current_user)
