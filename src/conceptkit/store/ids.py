"""Document identifiers.

Identifiers are opaque, store-issued 24-character lowercase hex strings
(12 random bytes), distinct from application data.
"""

import re
import secrets

from conceptkit.store.errors import InvalidIdError

ID_LENGTH = 24

_ID_RE = re.compile(r"^[0-9a-f]{24}$")

# A document identifier as stored and returned
type DocumentId = str


def new_id() -> DocumentId:
    """Issue a fresh identifier."""
    return secrets.token_hex(ID_LENGTH // 2)


def is_valid_id(value: object) -> bool:
    return isinstance(value, str) and _ID_RE.match(value) is not None


def parse_id(value: object) -> DocumentId:
    """Validate *value* as an identifier and return it normalized.

    Uppercase hex is accepted and lowered. Raises ``InvalidIdError``
    for anything else.
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        if _ID_RE.match(lowered):
            return lowered
    msg = f"{value!r} is not a valid document id (expected {ID_LENGTH} hex characters)"
    raise InvalidIdError(msg)
