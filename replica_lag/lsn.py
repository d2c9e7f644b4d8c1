"""
WAL log sequence number (LSN) parsing and arithmetic

An LSN is written as two hex groups, e.g. "7/A25801C8", and maps to the
unsigned 64-bit value (high << 32) | low.
"""
import re
from typing import Optional

from replica_lag.errors import ReplicationCheckError

LSN_MAX = 0xFFFFFFFFFFFFFFFF
_HALF_MAX = 0xFFFFFFFF

_LSN_PATTERN = re.compile(r'([0-9A-Fa-f]+)/([0-9A-Fa-f]+)')


class InvalidLsnFormat(ReplicationCheckError, ValueError):
    """Raised when a string is not a valid LSN"""

    def __init__(self, text: Optional[str], host: Optional[str] = None, field: Optional[str] = None):
        self.text = text
        self.host = host
        self.field = field
        super().__init__(self._describe())

    def _describe(self) -> str:
        message = f"invalid LSN {self.text!r}"
        if self.field:
            message = f"{self.field}: {message}"
        if self.host:
            message = f"{self.host}: {message}"
        return message


def parse_lsn(text: Optional[str]) -> int:
    """
    Convert an LSN string to its numeric position

    Args:
        text: LSN in "H/L" form; empty or None means 0/0

    Returns:
        Position as an unsigned 64-bit integer
    """
    if text is None or text == "":
        return 0

    match = _LSN_PATTERN.fullmatch(text)
    if not match:
        raise InvalidLsnFormat(text)

    high = int(match.group(1), 16)
    low = int(match.group(2), 16)
    if high > _HALF_MAX or low > _HALF_MAX:
        raise InvalidLsnFormat(text)

    return (high << 32) | low


def format_lsn(value: int) -> str:
    """Render a numeric position in canonical "H/L" form"""
    if not 0 <= value <= LSN_MAX:
        raise ValueError(f"LSN value out of range: {value}")
    return f"{value >> 32:X}/{value & _HALF_MAX:X}"


def lsn_diff(ahead: int, behind: int) -> int:
    """Bytes that `behind` trails `ahead` by, clamped at zero"""
    if ahead > behind:
        return ahead - behind
    return 0
