"""URL-safe encoding helpers."""

from base64 import urlsafe_b64decode, urlsafe_b64encode


def base64url_encode(value: str) -> str:
    """Encode UTF-8 text as unpadded base64url."""
    return urlsafe_b64encode(value.encode("utf-8")).rstrip(b"=").decode("ascii")


def base64url_decode(value: str) -> str:
    """Decode unpadded base64url into UTF-8 text.

    Raises:
        ValueError: If ``value`` is not valid base64url or not UTF-8
    """
    padded = value + "=" * (-len(value) % 4)
    return urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
