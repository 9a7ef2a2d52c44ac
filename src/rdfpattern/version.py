"""Version information for :mod:`rdfpattern`."""

__all__ = [
    "VERSION",
]

VERSION = "0.3.0"
