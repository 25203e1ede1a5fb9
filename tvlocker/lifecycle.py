# tvlocker/lifecycle.py
"""
Device lifecycle: registration against an EMI schedule, activation by code or
by first contact, remote locking and uninstall.

    registered (inactive, unlocked)
        -> active            activate() / check()
        <-> locked/unlocked  set_remote_lock()
        -> deactivated       unlock(); check() or an unused code re-activates

Every mutating operation commits once through the store, so a failure part
way through leaves nothing behind.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from tvlocker.errors import Conflict, Internal, InvalidArgument, NotFound
from tvlocker.models import ALLOWED_TERM_DURATIONS, Device
from tvlocker.store import DeviceStore
from tvlocker.utils.codes import (
    calculate_lock_dates,
    format_date,
    generate_unique_codes,
    parse_date,
)

logger = logging.getLogger(__name__)


def health() -> dict:
    return {"status": "ok"}


class DeviceLifecycle:
    def __init__(self, store: DeviceStore):
        self.store = store

    def register(
        self,
        serial_number: str,
        customer_name: str,
        phone_number: str,
        emi_term: int,
        emi_start_date: str,
        term_duration: int,
    ) -> Tuple[str, List[dict]]:
        """Create the device with its codes, lock dates and remote lock.

        Returns ``(device_id, terms)``.
        """
        if term_duration not in ALLOWED_TERM_DURATIONS:
            raise InvalidArgument("Term duration must be 7, 15, or 30 days")
        try:
            start_date = parse_date(emi_start_date)
        except (TypeError, ValueError):
            raise InvalidArgument("Invalid date format. Use YYYY-MM-DD")
        if emi_term < 1:
            raise InvalidArgument("emi_term must be at least 1")
        if not serial_number:
            raise InvalidArgument("serial_number is required")
        try:
            lock_dates = calculate_lock_dates(start_date, term_duration, emi_term)
        except OverflowError:
            raise InvalidArgument("Lock dates must fall on or before 9999-12-31")

        if self.store.find_device_by_serial(serial_number):
            raise Conflict("Device with this serial number already exists")

        codes = generate_unique_codes(emi_term, self.store.code_exists)
        try:
            device = self.store.create_device(
                serial_number=serial_number,
                customer_name=customer_name,
                phone_number=phone_number,
                emi_term=emi_term,
                emi_start_date=start_date,
                term_duration=term_duration,
            )
            device_id = device.id
            self.store.add_activation_codes(device_id, enumerate(codes, start=1))
            self.store.add_lock_dates(device_id, enumerate(lock_dates, start=1))
            self.store.create_remote_lock(device_id)
            self.store.commit()
        except IntegrityError:
            self.store.rollback()
            # lost a race with a concurrent registration of the same serial
            if self.store.find_device_by_serial(serial_number):
                raise Conflict("Device with this serial number already exists")
            logger.exception("Failed to register device %s", serial_number)
            raise Internal("Failed to register device")

        logger.info("Registered device %s with %d terms", serial_number, emi_term)
        terms = [
            {"term": term, "lock_date": format_date(lock_date), "activation_code": code}
            for term, (code, lock_date) in enumerate(zip(codes, lock_dates), start=1)
        ]
        return device_id, terms

    def activate(self, activation_code: str) -> List[dict]:
        code = self.store.find_unused_code(activation_code) if activation_code else None
        if code is None or not self.store.mark_code_used(code.id):
            raise InvalidArgument("Invalid or already used activation code")

        device = self.store.get_device(code.device_id)
        self.store.set_device_flags(device, is_active=True)
        self.store.commit()
        logger.info("Device %s activated with code for term %d", device.serial_number, code.term_number)
        return self.terms_for(device.id)

    def check(self, serial_number: Optional[str]) -> List[dict]:
        """Return the device's terms, activating it on first contact."""
        device = self._require_device(serial_number)
        if not device.is_active:
            self.store.set_device_flags(device, is_active=True)
            self.store.commit()
            logger.info("Device %s activated via /api/check", serial_number)
        return self.terms_for(device.id)

    def set_remote_lock(self, serial_number: str, is_locked: bool) -> bool:
        device = self._require_device(serial_number)
        self.store.set_remote_lock(device.id, is_locked)
        self.store.set_device_flags(device, is_locked=is_locked)
        self.store.commit()
        logger.info("Remote lock for %s set to %s", serial_number, is_locked)
        return is_locked

    def check_lock(self, serial_number: Optional[str]) -> bool:
        device = self._require_device(serial_number)
        lock = self.store.find_remote_lock(device.id)
        if lock is None:
            raise NotFound("Remote lock not found")
        return lock.is_locked

    def unlock(self, serial_number: str) -> None:
        device = self._require_device(serial_number)
        self.store.set_device_flags(device, is_active=False, is_locked=False)
        self.store.set_remote_lock(device.id, False)
        self.store.commit()
        logger.info("Device %s unlocked and deactivated", serial_number)

    def describe(self, serial_number: str) -> dict:
        device = self._require_device(serial_number)
        lock = self.store.find_remote_lock(device.id)
        return {
            "device_id": device.id,
            "serial_number": device.serial_number,
            "customer_name": device.customer_name,
            "phone_number": device.phone_number,
            "emi_term": device.emi_term,
            "emi_start_date": format_date(device.emi_start_date),
            "term_duration": device.term_duration,
            "is_active": device.is_active,
            "is_locked": device.is_locked,
            "remote_locked": lock.is_locked if lock else None,
            "terms": self.terms_for(device.id),
        }

    def terms_for(self, device_id: str) -> List[dict]:
        """Pair each activation code with the lock date of the same term number."""
        dates = {row.term_number: row.lock_date for row in self.store.list_lock_dates(device_id)}
        return [
            {
                "term": code.term_number,
                "lock_date": format_date(dates[code.term_number]),
                "activation_code": code.code,
            }
            for code in self.store.list_codes(device_id)
            if code.term_number in dates
        ]

    def _require_device(self, serial_number: Optional[str]) -> Device:
        if not serial_number:
            raise InvalidArgument("serial_number parameter is required")
        device = self.store.find_device_by_serial(serial_number)
        if device is None:
            raise NotFound("Device not found")
        return device
