# app/db/models/connection.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class ConnectionModel(Base):
    """
    A directed connection request.

    Stored once as (initiator, recipient); the relationship it describes is
    symmetric, so readers must look at both columns.
    """

    __tablename__ = "connections"

    id = Column(Integer, primary_key=True)
    user_id = Column(  # initiator
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    connected_user_id = Column(  # recipient
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')", name="ck_connections_status"
        ),
    )

    # Relationships
    user = relationship("UserModel", foreign_keys=[user_id])
    connected_user = relationship("UserModel", foreign_keys=[connected_user_id])

    def __repr__(self):
        return (
            f"<ConnectionModel(id={self.id}, {self.user_id}->{self.connected_user_id}, "
            f"status={self.status})>"
        )
