# tvlocker/store.py
"""
SQLAlchemy-backed persistence for devices, activation codes, lock dates and
remote locks.

The lifecycle layer only talks to a ``DeviceStore``; it never builds queries
itself.  A store wraps one ``Session`` and nothing is written until
``commit()`` is called, so every lifecycle operation commits exactly once.
"""

from datetime import date
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from tvlocker.models import ActivationCode, Device, LockDate, RemoteLock


class DeviceStore:
    def __init__(self, db: Session):
        self.db = db

    # devices
    def find_device_by_serial(self, serial_number: str) -> Optional[Device]:
        return self.db.query(Device).filter(Device.serial_number == serial_number).first()

    def get_device(self, device_id: str) -> Optional[Device]:
        return self.db.get(Device, device_id)

    def create_device(self, **fields) -> Device:
        device = Device(is_active=False, is_locked=False, **fields)
        self.db.add(device)
        self.db.flush()
        return device

    def set_device_flags(self, device: Device, is_active: Optional[bool] = None, is_locked: Optional[bool] = None) -> None:
        if is_active is not None:
            device.is_active = is_active
        if is_locked is not None:
            device.is_locked = is_locked
        self.db.add(device)

    # activation codes
    def code_exists(self, code: str) -> bool:
        return self.db.query(ActivationCode.id).filter(ActivationCode.code == code).first() is not None

    def add_activation_codes(self, device_id: str, codes: Iterable[Tuple[int, str]]) -> None:
        self.db.add_all(
            ActivationCode(device_id=device_id, term_number=term, code=code, is_used=False)
            for term, code in codes
        )

    def find_unused_code(self, code: str) -> Optional[ActivationCode]:
        return (
            self.db.query(ActivationCode)
            .filter(ActivationCode.code == code, ActivationCode.is_used.is_(False))
            .first()
        )

    def mark_code_used(self, code_id: str) -> bool:
        """Flip ``is_used`` false -> true; returns False if another request got there first."""
        result = self.db.execute(
            update(ActivationCode)
            .where(ActivationCode.id == code_id, ActivationCode.is_used.is_(False))
            .values(is_used=True, used_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list_codes(self, device_id: str) -> List[ActivationCode]:
        return (
            self.db.query(ActivationCode)
            .filter(ActivationCode.device_id == device_id)
            .order_by(ActivationCode.term_number)
            .all()
        )

    # lock dates
    def add_lock_dates(self, device_id: str, dates: Iterable[Tuple[int, date]]) -> None:
        self.db.add_all(
            LockDate(device_id=device_id, term_number=term, lock_date=lock_date, is_locked=False)
            for term, lock_date in dates
        )

    def list_lock_dates(self, device_id: str) -> List[LockDate]:
        return (
            self.db.query(LockDate)
            .filter(LockDate.device_id == device_id)
            .order_by(LockDate.term_number)
            .all()
        )

    # remote locks
    def create_remote_lock(self, device_id: str, is_locked: bool = False) -> RemoteLock:
        lock = RemoteLock(device_id=device_id, is_locked=is_locked)
        self.db.add(lock)
        return lock

    def find_remote_lock(self, device_id: str) -> Optional[RemoteLock]:
        return self.db.query(RemoteLock).filter(RemoteLock.device_id == device_id).first()

    def set_remote_lock(self, device_id: str, is_locked: bool) -> RemoteLock:
        lock = self.find_remote_lock(device_id)
        if lock is None:
            return self.create_remote_lock(device_id, is_locked)
        lock.is_locked = is_locked
        # onupdate does not fire when the value is unchanged
        lock.updated_at = func.now()
        self.db.add(lock)
        return lock

    # transactions
    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
