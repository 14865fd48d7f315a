from typing import Annotated, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from forum.core.security import get_current_identity, get_optional_identity
from forum.db.database import get_session
from forum.models.reaction import TargetType
from forum.schemas.reaction import ReactionCreate, ReactionSummary, ReactionToggleResponse
from forum.services import reactions
from forum.services.sessions import Identity

router = APIRouter()

@router.post("/{target_type}/{target_id}", response_model=ReactionToggleResponse, status_code=status.HTTP_200_OK, summary="Like or dislike a post or comment")
def toggle_reaction(
    target_type: TargetType,
    target_id: int,
    reaction_in: ReactionCreate,
    current_user: Annotated[Identity, Depends(get_current_identity)],
    session: Annotated[Session, Depends(get_session)]
):
    """Cast a reaction; casting the same one again removes it"""
    result = reactions.toggle(session, current_user.id, target_type, target_id, reaction_in.value)
    counts = reactions.counts(session, target_type, target_id)
    return {
        "result": result,
        "likes_count": counts.likes,
        "dislikes_count": counts.dislikes,
        "my_reaction": reactions.current_reaction(session, current_user.id, target_type, target_id),
    }

@router.get("/{target_type}/{target_id}", response_model=ReactionSummary, summary="Reaction counts of a post or comment")
def get_reactions(
    target_type: TargetType,
    target_id: int,
    current_user: Annotated[Optional[Identity], Depends(get_optional_identity)],
    session: Annotated[Session, Depends(get_session)]
):
    """Get reaction counts, plus the caller's reaction when logged in"""
    counts = reactions.counts(session, target_type, target_id)
    my_reaction = None
    if current_user:
        my_reaction = reactions.current_reaction(session, current_user.id, target_type, target_id)
    return {
        "likes_count": counts.likes,
        "dislikes_count": counts.dislikes,
        "my_reaction": my_reaction,
    }
