"""SPARQL generation from RDF-config models.

- where: WHERE-pattern compiler
- select: SELECT line generator
- query: whole-query assembly
"""

from .query import generate_query, prefix_lines, used_prefixes
from .select import SelectGenerator
from .where import (
    PatternBlankNode,
    PatternTriple,
    PatternVariable,
    WhereGenerator,
    compile_where,
)

__all__ = [
    "PatternBlankNode",
    "PatternTriple",
    "PatternVariable",
    "SelectGenerator",
    "WhereGenerator",
    "compile_where",
    "generate_query",
    "prefix_lines",
    "used_prefixes",
]
