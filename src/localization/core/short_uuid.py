"""22-character URL-safe identifiers backed by UUID4.

A short id is the unpadded base64url encoding of the 16 UUID bytes, so it
converts losslessly to and from the canonical UUID form.
"""

import base64
import binascii
import uuid

SHORT_ID_LENGTH = 22


def generate_short_id() -> str:
    """Generate a new random short id."""
    return from_uuid(uuid.uuid4())


def from_uuid(value: uuid.UUID | str) -> str:
    """Encode a UUID (object or canonical string) as a short id."""
    if not isinstance(value, uuid.UUID):
        value = uuid.UUID(value)
    return base64.urlsafe_b64encode(value.bytes).rstrip(b"=").decode("ascii")


def to_uuid(short_id: str) -> uuid.UUID:
    """Decode a short id back to its UUID.

    Raises:
        ValueError: If the value is not a 22-character base64url string
    """
    if len(short_id) != SHORT_ID_LENGTH:
        raise ValueError(f"Short id must be {SHORT_ID_LENGTH} characters: {short_id!r}")
    try:
        raw = base64.urlsafe_b64decode(short_id + "==")
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid short id: {short_id!r}") from e
    # 22 base64 chars carry 132 bits; the trailing 4 must be zero to round-trip.
    if len(raw) != 16 or from_uuid(uuid.UUID(bytes=raw)) != short_id:
        raise ValueError(f"Invalid short id: {short_id!r}")
    return uuid.UUID(bytes=raw)
