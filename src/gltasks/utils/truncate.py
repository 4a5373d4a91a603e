"""Text truncation for short notification titles."""

DEFAULT_MAX_LENGTH = 20
OMISSION = "..."


def truncate(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Shorten text to ``max_length`` characters plus an omission marker."""
    if len(text) > max_length:
        return text[: max_length - 1] + OMISSION
    return text
