from __future__ import annotations

from typing import List, Optional, Sequence

OMH_PREFIX = "omh"
OHMAGE_DOMAIN = "ohmage"
DEFAULT_SEPARATOR = ":"


def split_payload_id(payload_id: str, separator: str = DEFAULT_SEPARATOR) -> List[str]:
    """Split a payload ID string into its ordered parts. Empty parts are kept."""
    return payload_id.split(separator)


def is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def join_remainder(
    parts: Sequence[str], start: int, separator: str = DEFAULT_SEPARATOR
) -> Optional[str]:
    """Re-join everything from ``start`` onward, or None when nothing is there."""
    if len(parts) <= start:
        return None
    return separator.join(parts[start:])
