class HexDecodeError(Exception):
    """Raised when envelope text is not valid marker-prefixed hex."""
