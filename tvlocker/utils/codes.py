# tvlocker/utils/codes.py
import re
import secrets
import string
from datetime import date, datetime, timedelta
from typing import Callable, List

CODE_LENGTH = 8
CODE_ALPHABET = string.ascii_uppercase + string.digits
DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def generate_activation_code() -> str:
    # 36**8 possible values
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def generate_unique_codes(count: int, exists: Callable[[str], bool]) -> List[str]:
    """Draw *count* codes, redrawing any that *exists* reports or that repeat in the batch."""
    codes: List[str] = []
    seen = set()
    while len(codes) < count:
        code = generate_activation_code()
        if code in seen or exists(code):
            continue
        seen.add(code)
        codes.append(code)
    return codes


def calculate_lock_dates(start_date: date, term_duration: int, emi_term: int) -> List[date]:
    # term k locks on start + k * duration
    return [start_date + timedelta(days=term_duration * k) for k in range(1, emi_term + 1)]


def parse_date(value: str) -> date:
    """Parse a zero-padded YYYY-MM-DD date; raises ValueError otherwise."""
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise ValueError(f"date {value!r} does not match YYYY-MM-DD")
    return datetime.strptime(value, DATE_FORMAT).date()


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)
