# tvlocker/models.py
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

ALLOWED_TERM_DURATIONS = (7, 15, 30)


def _new_id() -> str:
    return str(uuid.uuid4())


class Device(Base):
    __tablename__ = "devices"
    __table_args__ = (
        CheckConstraint("term_duration IN (7, 15, 30)", name="ck_devices_term_duration"),
    )
    id = Column(String(36), primary_key=True, default=_new_id)
    serial_number = Column(String(255), unique=True, nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=False)
    emi_term = Column(Integer, nullable=False)
    emi_start_date = Column(Date, nullable=False)
    term_duration = Column(Integer, nullable=False)  # days: 7, 15 or 30
    is_active = Column(Boolean, nullable=False, default=False)
    is_locked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ActivationCode(Base):
    __tablename__ = "activation_codes"
    __table_args__ = (UniqueConstraint("device_id", "term_number"),)
    id = Column(String(36), primary_key=True, default=_new_id)
    device_id = Column(String(36), ForeignKey("devices.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)
    term_number = Column(Integer, nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    used_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class LockDate(Base):
    __tablename__ = "lock_dates"
    __table_args__ = (UniqueConstraint("device_id", "term_number"),)
    id = Column(String(36), primary_key=True, default=_new_id)
    device_id = Column(String(36), ForeignKey("devices.id", ondelete="CASCADE"), nullable=False, index=True)
    term_number = Column(Integer, nullable=False)  # join key with ActivationCode.term_number
    lock_date = Column(Date, nullable=False)
    is_locked = Column(Boolean, nullable=False, default=False)  # never updated after insert
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RemoteLock(Base):
    __tablename__ = "remote_locks"
    id = Column(String(36), primary_key=True, default=_new_id)
    device_id = Column(String(36), ForeignKey("devices.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    is_locked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
