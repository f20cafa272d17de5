from typing import Optional

from .errors import ValidationError

# Literal termination message understood by the authority.
CLOSE_SENTINEL = "close"


def validate_endpoint(host: str, port: int) -> None:
    if not host or not isinstance(host, str):
        raise ValidationError("Authority host must be a non-empty string")
    if isinstance(port, bool) or not isinstance(port, int):
        raise ValidationError("Authority port must be an integer")
    if not 0 < port < 65536:
        raise ValidationError(f"Authority port out of range: {port}")


def validate_root(root: str, digest_width: Optional[int] = None) -> None:
    if not root or not isinstance(root, str):
        raise ValidationError("Merkle root must be a non-empty string")
    if digest_width is not None:
        width = len(root.encode("utf-8"))
        if width != digest_width:
            raise ValidationError(
                f"Merkle root is {width} bytes, expected digest width {digest_width}"
            )


def validate_identifier(identifier: str) -> None:
    if not identifier or not isinstance(identifier, str):
        raise ValidationError("Transaction identifier must be a non-empty string")
    if identifier == CLOSE_SENTINEL:
        raise ValidationError(
            f"Transaction identifier {identifier!r} collides with the session "
            "termination message"
        )
