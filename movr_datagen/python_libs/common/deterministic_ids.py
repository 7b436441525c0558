"""
Deterministic, evenly spaced version 4 UUIDs.

Row ``i`` of ``n`` gets the UUID whose high bits hold ``i * (2**64 // n)`` and whose
low bits hold ``i`` itself. Ids therefore spread over the whole UUID space, sort in
row order (byte-wise and as strings) and never collide inside a table.
"""

from __future__ import annotations

import uuid

from movr_datagen.python_libs.common.exceptions import RowIndexError

_UINT64_SPAN = 1 << 64
_VERSION_4 = 0x4
_VARIANT_RFC4122 = 0b10
_MAX_ROWS = 1 << 62


def deterministic_uuid(row_idx: int, total_rows: int) -> uuid.UUID:
    """Return the UUID of row ``row_idx`` in a table of ``total_rows`` rows."""
    if total_rows <= 0 or total_rows > _MAX_ROWS:
        raise RowIndexError(f"total rows must be in (0, 2**62], got {total_rows}")
    if not 0 <= row_idx < total_rows:
        raise RowIndexError(f"row index {row_idx} out of range [0, {total_rows})")

    spread = row_idx * (_UINT64_SPAN // total_rows)
    # bytes 0-5: top 48 bits of the spread value
    # bytes 6-7: version nibble + next 12 bits of the spread value
    # bytes 8-15: variant bits + the row index
    high = ((spread >> 16) << 16) | (_VERSION_4 << 12) | ((spread >> 4) & 0x0FFF)
    low = (_VARIANT_RFC4122 << 62) | row_idx
    return uuid.UUID(int=(high << 64) | low)


def deterministic_id(row_idx: int, total_rows: int) -> str:
    """String form of :func:`deterministic_uuid`, as stored in id columns."""
    return str(deterministic_uuid(row_idx, total_rows))
