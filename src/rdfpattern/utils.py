"""
Common utility functions for RDF-config processing.

This module contains shared helpers used by the configuration loader, the
validator and the SPARQL generators.
"""

import re
from typing import Any, Optional, Tuple

from .models import Cardinality

BLANK_NODE_KEY = "[]"

PREFIX_PATTERN = re.compile(r"(\w+):")
BRACKETED_URI_PATTERN = re.compile(r"<.+>")
CURIE_PATTERN = re.compile(r"[A-Za-z_][\w.-]*:[^\s/][^\s]*|:[^\s/][^\s]*")
CARDINALITY_PATTERN = re.compile(r"\{\s*(\d*)\s*(?:(,)\s*(\d*)\s*)?\}$")
LANG_LITERAL_PATTERN = re.compile(r'"(.*)"@([A-Za-z]+(?:-[A-Za-z0-9]+)*)', re.DOTALL)
TYPED_LITERAL_PATTERN = re.compile(r'"(.*)"\^\^(\S+)', re.DOTALL)
QUOTED_LITERAL_PATTERN = re.compile(r'"(.*)"', re.DOTALL)


def parse_predicate(predicate: str) -> Tuple[str, Optional[Cardinality]]:
    """
    Split a predicate key into its URI and cardinality.

    Args:
        predicate: Predicate string potentially with a cardinality marker
            (``?``, ``*``, ``+``, ``{n}``, ``{n,m}``, ``{,m}`` or ``{n,}``)

    Returns:
        Tuple of the cleaned predicate and its cardinality, or ``None`` when
        no marker is present
    """
    predicate = str(predicate).strip()

    match = CARDINALITY_PATTERN.search(predicate)
    if match and match.start() > 0:
        low, comma, high = match.groups()
        min_value = int(low) if low else None
        if comma:
            max_value = int(high) if high else None
        else:
            max_value = min_value
        return predicate[: match.start()].strip(), Cardinality(min=min_value, max=max_value)

    if len(predicate) > 1:
        marker = predicate[-1]
        if marker == "?":
            return predicate[:-1].strip(), Cardinality(min=0, max=1)
        if marker == "*":
            return predicate[:-1].strip(), Cardinality(min=0, max=None)
        if marker == "+":
            return predicate[:-1].strip(), Cardinality(min=1, max=None)

    return predicate, None


def is_blank_node(value: Any) -> bool:
    """
    Check if value represents a blank node.

    Args:
        value: Value to check for blank node representation

    Returns:
        True if value represents a blank node
    """
    if isinstance(value, dict):
        keys = list(value.keys())
        return len(keys) == 1 and keys[0] == BLANK_NODE_KEY
    return value == BLANK_NODE_KEY


def is_bracketed_uri(value: Any) -> bool:
    """Check whether *value* is a full IRI in angle brackets."""
    return BRACKETED_URI_PATTERN.fullmatch(str(value)) is not None


def is_uri_value(value: Any) -> bool:
    """Check whether a model value denotes a URI rather than a literal."""
    if not isinstance(value, str):
        return False
    value = value.strip()
    return is_bracketed_uri(value) or CURIE_PATTERN.fullmatch(value) is not None


def prefix_of(uri: Any) -> Optional[str]:
    """
    Return the prefix used by a CURIE.

    Bracketed IRIs and values without a ``prefix:`` part have no prefix.

    Examples::

        >>> prefix_of("foaf:name")
        'foaf'
        >>> prefix_of("<http://xmlns.com/foaf/0.1/name>") is None
        True
    """
    if uri is None or is_bracketed_uri(uri):
        return None
    match = PREFIX_PATTERN.match(str(uri))
    return match.group(1) if match else None


def parse_literal(value: Any) -> Tuple[Any, Optional[str], Optional[str]]:
    """
    Split a literal example into value, language tag and datatype.

    Args:
        value: Example value as read from ``model.yaml``

    Returns:
        Tuple ``(value, lang, datatype)``
    """
    if not isinstance(value, str):
        return value, None, None

    text = value.strip()
    match = LANG_LITERAL_PATTERN.fullmatch(text)
    if match:
        return match.group(1), match.group(2), None
    match = TYPED_LITERAL_PATTERN.fullmatch(text)
    if match:
        return match.group(1), None, match.group(2)
    match = QUOTED_LITERAL_PATTERN.fullmatch(text)
    if match:
        return match.group(1), None, None
    return value, None, None


def namespace_iri(namespace: str) -> str:
    """Strip angle brackets from a prefix namespace."""
    return str(namespace).strip().strip("<>")

