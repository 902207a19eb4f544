# app/db/models/user.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.db.base import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    title = Column(String, nullable=False, default="")
    organization = Column(String, nullable=False, default="")
    specialty = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")
    initials = Column(String(4), nullable=False, default="")
    role = Column(String, nullable=False, default="Patient")  # 'Doctor', 'Student', 'Patient'
    profile_picture_url = Column(String, nullable=True)
    education = Column(Text, nullable=True)  # students
    medical_history = Column(Text, nullable=True)  # patients
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # one-to-one link
    profile = relationship(
        "ProfileModel",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<UserModel(id={self.id}, username={self.username!r}, role={self.role})>"


class ProfileModel(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    profile_completion = Column(Integer, nullable=False, default=0)
    remaining_items = Column(Integer, nullable=False, default=0)
    network_growth = Column(Integer, nullable=False, default=0)
    network_growth_days = Column(Integer, nullable=False, default=30)

    user = relationship("UserModel", back_populates="profile")


class StatModel(Base):
    __tablename__ = "stats"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String, nullable=False)
    value = Column(Integer, nullable=False)
    icon = Column(String, nullable=False)
    icon_color = Column(String, nullable=False)
    change = Column(Integer, nullable=False)
    timeframe = Column(String, nullable=False)
