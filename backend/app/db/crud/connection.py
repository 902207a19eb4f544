# app/db/crud/connection.py
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy import select, and_, or_
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.config.constants import ConnectionStatus
from app.db.models.connection import ConnectionModel
from app.db.models.user import UserModel

logger = logging.getLogger(__name__)


def _involves(user_id: int):
    return or_(
        ConnectionModel.user_id == user_id,
        ConnectionModel.connected_user_id == user_id,
    )


def _between(a: int, b: int):
    return or_(
        and_(ConnectionModel.user_id == a, ConnectionModel.connected_user_id == b),
        and_(ConnectionModel.user_id == b, ConnectionModel.connected_user_id == a),
    )


async def get_connection(db: AsyncSession, connection_id: int) -> Optional[ConnectionModel]:
    return await db.get(ConnectionModel, connection_id)


async def find_open_connection(db: AsyncSession, a: int, b: int) -> Optional[ConnectionModel]:
    """A pending or accepted row between ``a`` and ``b``, in either direction."""
    return await db.scalar(
        select(ConnectionModel)
        .where(
            _between(a, b),
            ConnectionModel.status.in_(
                [ConnectionStatus.PENDING.value, ConnectionStatus.ACCEPTED.value]
            ),
        )
        .limit(1)
    )


async def create_connection(
    db: AsyncSession, initiator_id: int, recipient_id: int
) -> ConnectionModel:
    """
    Record a pending connection request from initiator to recipient.

    Args:
        db: Database session
        initiator_id: The requesting user
        recipient_id: The user being asked

    Returns:
        The new pending ConnectionModel

    Raises:
        HTTPException: 400 for a self-request, 404 for an unknown recipient,
        409 when the pair already has a pending or accepted row.
    """
    logger.debug(f"CRUD: connection request {initiator_id} -> {recipient_id}")
    if initiator_id == recipient_id:
        raise HTTPException(status_code=400, detail="Cannot connect with yourself")

    if not await db.get(UserModel, recipient_id):
        raise HTTPException(status_code=404, detail="User not found")

    existing = await find_open_connection(db, initiator_id, recipient_id)
    if existing:
        logger.warning(
            f"CRUD: duplicate connection request {initiator_id} -> {recipient_id}, "
            f"existing connection_id={existing.id} status={existing.status}"
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Connection already {existing.status}",
        )

    connection = ConnectionModel(
        user_id=initiator_id,
        connected_user_id=recipient_id,
        status=ConnectionStatus.PENDING.value,
    )
    db.add(connection)
    await db.commit()
    await db.refresh(connection)
    logger.info(f"CRUD: created connection_id={connection.id} ({initiator_id} -> {recipient_id})")
    return connection


async def _set_status(
    db: AsyncSession, connection: ConnectionModel, new_status: ConnectionStatus
) -> ConnectionModel:
    connection.status = new_status.value
    await db.commit()
    await db.refresh(connection)
    logger.info(f"CRUD: connection_id={connection.id} is now {connection.status}")
    return connection


async def accept_connection(
    db: AsyncSession, connection_id: int, acting_user_id: int
) -> ConnectionModel:
    """Only the recipient may accept, and only while the request is pending."""
    connection = await get_connection(db, connection_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")

    if connection.connected_user_id != acting_user_id:
        raise HTTPException(
            status_code=403, detail="You cannot accept this connection request"
        )
    if connection.status != ConnectionStatus.PENDING.value:
        raise HTTPException(status_code=400, detail=f"Connection is already {connection.status}")

    return await _set_status(db, connection, ConnectionStatus.ACCEPTED)


async def reject_connection(
    db: AsyncSession, connection_id: int, acting_user_id: int
) -> ConnectionModel:
    """The recipient may reject; the initiator may withdraw a pending request."""
    connection = await get_connection(db, connection_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")

    is_recipient = connection.connected_user_id == acting_user_id
    is_pending = connection.status == ConnectionStatus.PENDING.value
    is_self_cancel = connection.user_id == acting_user_id and is_pending
    if not (is_recipient or is_self_cancel):
        raise HTTPException(
            status_code=403, detail="You cannot reject this connection request"
        )
    if not is_pending:
        raise HTTPException(status_code=400, detail=f"Connection is already {connection.status}")

    return await _set_status(db, connection, ConnectionStatus.REJECTED)


async def get_connections_for_user(
    db: AsyncSession, user_id: int, status_filter: Optional[ConnectionStatus] = None
) -> List[ConnectionModel]:
    """Rows where the user is either endpoint, with both users loaded."""
    query = (
        select(ConnectionModel)
        .options(
            selectinload(ConnectionModel.user),
            selectinload(ConnectionModel.connected_user),
        )
        .where(_involves(user_id))
        .order_by(ConnectionModel.created_at.desc(), ConnectionModel.id.desc())
    )
    if status_filter:
        query = query.where(ConnectionModel.status == status_filter.value)

    result = await db.execute(query)
    return result.scalars().all()


async def get_connection_requests(db: AsyncSession, user_id: int) -> List[UserModel]:
    """Initiators of pending requests addressed to the user."""
    result = await db.execute(
        select(UserModel)
        .join(ConnectionModel, ConnectionModel.user_id == UserModel.id)
        .where(
            ConnectionModel.connected_user_id == user_id,
            ConnectionModel.status == ConnectionStatus.PENDING.value,
        )
        .order_by(ConnectionModel.created_at, ConnectionModel.id)
    )
    return result.scalars().all()


async def get_student_connection_requests(
    db: AsyncSession, doctor_id: int
) -> List[ConnectionModel]:
    """Pending requests addressed to the doctor and sent by students."""
    result = await db.execute(
        select(ConnectionModel)
        .join(UserModel, ConnectionModel.user_id == UserModel.id)
        .options(
            selectinload(ConnectionModel.user),
            selectinload(ConnectionModel.connected_user),
        )
        .where(
            ConnectionModel.connected_user_id == doctor_id,
            ConnectionModel.status == ConnectionStatus.PENDING.value,
            UserModel.role == "Student",
        )
        .order_by(ConnectionModel.created_at, ConnectionModel.id)
    )
    return result.scalars().all()


async def get_colleague_ids(db: AsyncSession, user_id: int) -> Set[int]:
    result = await db.execute(
        select(ConnectionModel.user_id, ConnectionModel.connected_user_id).where(
            _involves(user_id),
            ConnectionModel.status == ConnectionStatus.ACCEPTED.value,
        )
    )
    ids = {b if a == user_id else a for a, b in result.all()}
    ids.discard(user_id)
    return ids


async def _users_by_ids(db: AsyncSession, user_ids) -> List[UserModel]:
    if not user_ids:
        return []
    result = await db.execute(
        select(UserModel).where(UserModel.id.in_(list(user_ids))).order_by(UserModel.id)
    )
    return result.scalars().all()


async def get_colleagues(db: AsyncSession, user_id: int) -> List[UserModel]:
    return await _users_by_ids(db, await get_colleague_ids(db, user_id))


async def get_mutual_connections(db: AsyncSession, user_a: int, user_b: int) -> List[UserModel]:
    """Users accepted-connected to both ``user_a`` and ``user_b``. Order-independent."""
    mutual = (await get_colleague_ids(db, user_a)) & (await get_colleague_ids(db, user_b))
    logger.debug(f"CRUD: {len(mutual)} mutual connections between {user_a} and {user_b}")
    return await _users_by_ids(db, mutual)


async def _mutual_counts(db: AsyncSession, colleague_ids: Set[int]) -> Dict[int, int]:
    """For every user, how many of ``colleague_ids`` they are accepted-connected to."""
    if not colleague_ids:
        return {}
    result = await db.execute(
        select(ConnectionModel.user_id, ConnectionModel.connected_user_id).where(
            ConnectionModel.status == ConnectionStatus.ACCEPTED.value,
            or_(
                ConnectionModel.user_id.in_(colleague_ids),
                ConnectionModel.connected_user_id.in_(colleague_ids),
            ),
        )
    )
    shared = defaultdict(set)
    for a, b in result.all():
        if a in colleague_ids:
            shared[b].add(a)
        if b in colleague_ids:
            shared[a].add(b)
    return {user_id: len(ids) for user_id, ids in shared.items()}


async def get_suggestions(db: AsyncSession, user_id: int) -> List[Tuple[UserModel, int]]:
    """
    Users the viewer has no connection row with at all, paired with their
    mutual-connection count. Rejected and pending rows also exclude.
    """
    related = await db.execute(
        select(ConnectionModel.user_id, ConnectionModel.connected_user_id).where(
            _involves(user_id)
        )
    )
    excluded = {user_id}
    for a, b in related.all():
        excluded.update((a, b))

    result = await db.execute(
        select(UserModel).where(UserModel.id.not_in(excluded)).order_by(UserModel.id)
    )
    candidates = result.scalars().all()

    counts = await _mutual_counts(db, await get_colleague_ids(db, user_id))
    return [(candidate, counts.get(candidate.id, 0)) for candidate in candidates]
