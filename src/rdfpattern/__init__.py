"""RDFPattern: SPARQL pattern generation from RDF-config models.

Main modules:
- models: pydantic models for subjects, predicates and objects
- model: RDFModel, the flattened and validated model
- sparql: WHERE-pattern compiler and query assembly
- config: RDF-config YAML loading (separate module)
- utils: Common utility functions for RDF-config processing
"""

from . import utils
from .exceptions import ConfigFileError, InvalidConfigError, RDFPatternError
from .flattener import TripleFlattener
from .model import RDFModel
from .models import (
    BlankNode,
    Cardinality,
    GenerationOptions,
    LiteralObject,
    Predicate,
    Subject,
    SubjectRef,
    Triple,
    URIObject,
    ValueList,
    VariableObject,
)
from .resolver import PathResolver
from .sparql import SelectGenerator, WhereGenerator, compile_where, generate_query
from .validator import Validator

# Import version information
from .version import VERSION

__all__ = [
    "VERSION",
    "BlankNode",
    "Cardinality",
    "ConfigFileError",
    "GenerationOptions",
    "InvalidConfigError",
    "LiteralObject",
    "PathResolver",
    "Predicate",
    "RDFModel",
    "RDFPatternError",
    "SelectGenerator",
    "Subject",
    "SubjectRef",
    "Triple",
    "TripleFlattener",
    "URIObject",
    "ValueList",
    "Validator",
    "VariableObject",
    "WhereGenerator",
    "compile_where",
    "generate_query",
    "utils",
]
