import base64, hashlib, os
from datetime import datetime, timedelta, timezone
from typing import Union

from codesigning.common.config import SERIAL_NUMBER_BYTES


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode()

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(dt: datetime) -> datetime:
    # naive datetimes are taken to be UTC, the way x509 stores them
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def add_years(dt: datetime, years: int) -> datetime:
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        # Feb 29 -> Feb 28
        return dt.replace(year=dt.year + years, day=28)

def days(n: int) -> timedelta:
    return timedelta(days=n)

def sha1_hex(data: Union[bytes, str]) -> str:
    if isinstance(data, str): data = data.encode()
    return hashlib.sha1(data).hexdigest()


def to_positive_hex(hex_string: str) -> str:
    """Clear the sign bit of a big-endian hex string.

    A leading nibble >= 8 reads as negative under two's-complement parsing,
    so it is reduced by 8. Serial numbers must be positive.
    """
    if not hex_string:
        return hex_string
    first = int(hex_string[0], 16)
    if first < 8:
        return hex_string
    return format(first - 8, "x") + hex_string[1:]

def random_serial_hex(num_bytes: int = SERIAL_NUMBER_BYTES) -> str:
    return to_positive_hex(os.urandom(num_bytes).hex())

def random_serial_number(num_bytes: int = SERIAL_NUMBER_BYTES) -> int:
    return int(random_serial_hex(num_bytes), 16)

def to_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, str): data = data.encode()
    return data
