"""RDF Configuration Module.

This module loads RDF-config directories (``prefix.yaml``, ``model.yaml``,
``sparql.yaml``) following the Ruby RDFConfig library conventions and builds
validated :class:`~rdfpattern.model.RDFModel` objects from them.
"""

from .rdf_config import (
    GraphBuilder,
    QuerySpec,
    RDFConfig,
    load_model,
)

__all__ = [
    "GraphBuilder",
    "QuerySpec",
    "RDFConfig",
    "load_model",
]
