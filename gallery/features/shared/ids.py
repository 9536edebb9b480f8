from __future__ import annotations

MAX_ENTRY_ID = 2**63 - 1


def parse_entry_id(value: object) -> int:
    """Parse a gallery entry id from its wire form.

    Ids travel as decimal strings; integers are accepted from older clients.
    Raises ``ValueError`` for anything that is not a positive integer that fits
    the BIGINT id column.
    """
    if isinstance(value, bool):
        raise ValueError("Entry ids must be integers.")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        cleaned = value.strip()
        if not (cleaned.isascii() and cleaned.isdigit()):
            raise ValueError(f"Malformed entry id: {value!r}.")
        parsed = int(cleaned)
    else:
        raise ValueError(f"Malformed entry id: {value!r}.")
    if parsed <= 0 or parsed > MAX_ENTRY_ID:
        raise ValueError(f"Malformed entry id: {value!r}.")
    return parsed
