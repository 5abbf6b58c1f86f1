import hashlib


def hash_text(text: str) -> str:
    """Return the SHA-256 hex digest of *text* after uppercasing it.

    Uppercasing first makes the digest case-insensitive on input, so
    ``hash_text("abc") == hash_text("ABC")``.
    """
    return hashlib.sha256(text.upper().encode("utf-8")).hexdigest()
