"""Whole-query assembly: PREFIX lines, SELECT, WHERE and LIMIT.

Only the prefixes that the generated lines actually use are declared, in
prefix map order.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from ..model import RDFModel
from ..models import GenerationOptions
from ..utils import namespace_iri
from .select import SelectGenerator
from .where import WhereGenerator

logger = logging.getLogger(__name__)

__all__ = [
    "generate_query",
    "prefix_lines",
    "used_prefixes",
]


def used_prefixes(lines: Iterable[str], prefixes: Dict[str, str]) -> List[str]:
    """Return the prefixes of *prefixes* referenced in *lines*."""
    text = "\n".join(lines)
    return [
        prefix
        for prefix in prefixes
        if re.search(rf"(?<![\w?$.:/#<-]){re.escape(prefix)}:", text)
    ]


def prefix_lines(lines: Iterable[str], prefixes: Dict[str, str]) -> List[str]:
    """``PREFIX`` declarations for the prefixes used in *lines*."""
    return [
        f"PREFIX {prefix}: <{namespace_iri(prefixes[prefix])}>"
        for prefix in used_prefixes(lines, prefixes)
    ]


def generate_query(
    model: RDFModel,
    variables: Optional[Iterable[str]] = None,
    parameters: Optional[Dict[str, Any]] = None,
    options: Optional[GenerationOptions] = None,
    limit: Optional[int] = None,
) -> List[str]:
    """Generate a complete SELECT query.

    Args:
        model: Validated model
        variables: Requested variable names; all object names if ``None``
        parameters: Bound parameter values
        options: WHERE generation options
        limit: Optional ``LIMIT`` value; ``None`` or ``0`` means no limit

    Returns:
        Query lines
    """
    where = WhereGenerator(model, variables, parameters, options)
    where_lines = where.generate()
    select_lines = SelectGenerator(model, where.variables).generate()

    declarations = prefix_lines(where_lines, model.prefixes)
    lines: List[str] = list(declarations)
    if declarations:
        lines.append("")
    lines += select_lines
    lines += where_lines
    if limit:
        lines.append(f"LIMIT {limit}")

    logger.debug("Generated query with %s lines", len(lines))
    return lines
