"""Defaults loaded from environment variables."""

import os


class Settings:
    """Default settings for query generation."""

    # Spaces per indentation level of generated patterns
    INDENT_WIDTH = int(os.getenv("RDFPATTERN_INDENT", "4"))

    # LIMIT appended to generated queries (0 = no limit)
    LIMIT = int(os.getenv("RDFPATTERN_LIMIT", "0"))
