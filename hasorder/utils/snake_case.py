"""Convert class names to the snake_case used for default column names."""

import re

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """``BlogAuthor`` -> ``blog_author``, ``HTTPRequest`` -> ``http_request``."""
    return _WORD_BOUNDARY.sub("_", name).lower()
