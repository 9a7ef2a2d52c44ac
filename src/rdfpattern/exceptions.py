"""Exceptions raised while loading and validating RDF-config models."""

from typing import List, Optional


class RDFPatternError(Exception):
    """Base exception for rdfpattern errors."""

    pass


class InvalidConfigError(RDFPatternError):
    """Raised when a model fails validation.

    All problems found are collected in :attr:`errors`; the message joins
    them one per line in detection order.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class ConfigFileError(RDFPatternError):
    """Raised when a configuration file is missing or unreadable."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)
