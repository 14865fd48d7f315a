"""Like/dislike toggling for posts and comments.

A user holds at most one reaction per target (enforced by the
``uq_reaction_user_target`` constraint). Casting a reaction:

* no reaction yet            -> insert, ``CREATED``
* same value already stored  -> delete, ``REMOVED``
* opposite value stored      -> flip it, ``UPDATED``

Counts are always computed from the reaction rows.
"""
import enum
import logging
from typing import Iterable

from pydantic import BaseModel
from sqlalchemy import and_, case, delete, func, select, update
from sqlalchemy.orm import Session

from forum.core.errors import InvalidValue, NotFound, storage_operation
from forum.db.database import dialect_insert
from forum.models.comment import Comment
from forum.models.post import Post
from forum.models.reaction import Reaction, ReactionValue, TargetType

logger = logging.getLogger(__name__)


class ToggleResult(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"


class ReactionCounts(BaseModel):
    likes: int = 0
    dislikes: int = 0


TARGET_MODELS = {
    TargetType.POST: Post,
    TargetType.COMMENT: Comment,
}


def _check_value(value: object) -> ReactionValue:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValue(f"invalid reaction value: {value!r}")
    try:
        return ReactionValue(value)
    except ValueError:
        raise InvalidValue(f"invalid reaction value: {value!r}")


def _target_filter(user_id: int, target_type: TargetType, target_id: int):
    return and_(
        Reaction.user_id == user_id,
        Reaction.target_type == TargetType(target_type).value,
        Reaction.target_id == target_id,
    )


def _ensure_target(session: Session, target_type: TargetType, target_id: int) -> None:
    try:
        model = TARGET_MODELS[TargetType(target_type)]
    except ValueError:
        raise InvalidValue(f"invalid target type: {target_type!r}")
    exists = session.execute(select(model.id).where(model.id == target_id)).first()
    if exists is None:
        raise NotFound(f"{TargetType(target_type).value.capitalize()} not found")


def _insert(session: Session, user_id: int, target_type: TargetType, target_id: int, value: int) -> bool:
    """Insert a reaction; False if another request already inserted one"""
    values = {
        "user_id": user_id,
        "target_type": TargetType(target_type).value,
        "target_id": target_id,
        "value": value,
    }
    stmt = dialect_insert(session, Reaction.__table__)
    if stmt is None:
        session.add(Reaction(**values))
        session.flush()
        return True
    stmt = stmt.values(**values).on_conflict_do_nothing(
        index_elements=["user_id", "target_type", "target_id"]
    )
    return session.execute(stmt).rowcount == 1


@storage_operation
def toggle(
    session: Session,
    user_id: int,
    target_type: TargetType,
    target_id: int,
    value: int,
) -> ToggleResult:
    """Cast ``value`` (+1 like, -1 dislike) on a target for ``user_id``"""
    value = _check_value(value)
    _ensure_target(session, target_type, target_id)
    where = _target_filter(user_id, target_type, target_id)

    current = session.execute(select(Reaction.value).where(where)).scalar_one_or_none()
    if current is None:
        if _insert(session, user_id, target_type, target_id, value):
            session.commit()
            logger.debug(f"User {user_id} reacted {int(value):+d} on {TargetType(target_type).value} {target_id}")
            return ToggleResult.CREATED
        # lost the insert race; apply the rules to the row that won
        current = session.execute(select(Reaction.value).where(where)).scalar_one_or_none()
        if current is None:
            # the winning row was removed again before we could read it
            session.commit()
            return ToggleResult.REMOVED

    if current == value:
        session.execute(delete(Reaction).where(where))
        session.commit()
        return ToggleResult.REMOVED

    session.execute(update(Reaction).where(where).values(value=value))
    session.commit()
    return ToggleResult.UPDATED


@storage_operation
def counts(session: Session, target_type: TargetType, target_id: int) -> ReactionCounts:
    """Live like/dislike counts for one target"""
    return counts_for(session, target_type, [target_id]).get(target_id, ReactionCounts())


@storage_operation
def counts_for(session: Session, target_type: TargetType, target_ids: Iterable[int]) -> dict[int, ReactionCounts]:
    """Live counts for many targets of one kind; missing ids count 0/0"""
    target_ids = list(target_ids)
    if not target_ids:
        return {}
    rows = session.execute(
        select(
            Reaction.target_id,
            func.sum(case((Reaction.value == ReactionValue.LIKE, 1), else_=0)),
            func.sum(case((Reaction.value == ReactionValue.DISLIKE, 1), else_=0)),
        )
        .where(
            Reaction.target_type == TargetType(target_type).value,
            Reaction.target_id.in_(target_ids),
        )
        .group_by(Reaction.target_id)
    ).all()
    result = {target_id: ReactionCounts() for target_id in target_ids}
    for target_id, likes, dislikes in rows:
        result[target_id] = ReactionCounts(likes=likes or 0, dislikes=dislikes or 0)
    return result


@storage_operation
def current_reaction(session: Session, user_id: int, target_type: TargetType, target_id: int) -> int | None:
    """The value ``user_id`` currently holds on the target, if any"""
    return session.execute(
        select(Reaction.value).where(_target_filter(user_id, target_type, target_id))
    ).scalar_one_or_none()


@storage_operation
def current_reactions_for(
    session: Session, user_id: int, target_type: TargetType, target_ids: Iterable[int]
) -> dict[int, int]:
    target_ids = list(target_ids)
    if not target_ids:
        return {}
    rows = session.execute(
        select(Reaction.target_id, Reaction.value).where(
            Reaction.user_id == user_id,
            Reaction.target_type == TargetType(target_type).value,
            Reaction.target_id.in_(target_ids),
        )
    ).all()
    return {target_id: value for target_id, value in rows}
