"""
RDF Configuration Loader

This module reads RDF-config directories (``prefix.yaml``, ``model.yaml``
and ``sparql.yaml``) following the Ruby RDFConfig conventions and builds the
subject graph used by :class:`~rdfpattern.model.RDFModel`. Blank nodes are
written as ``[]`` keys in ``model.yaml``.

"""

import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field

from ..exceptions import ConfigFileError
from ..model import RDFModel
from ..models import (
    RDF_TYPE_PREDICATES,
    BlankNode,
    LiteralObject,
    Predicate,
    Subject,
    SubjectRef,
    URIObject,
    ValueList,
    VariableObject,
)
from ..utils import BLANK_NODE_KEY, is_blank_node, is_uri_value, parse_literal, parse_predicate

logger = logging.getLogger(__name__)

PREFIX_FILE = "prefix.yaml"
MODEL_FILE = "model.yaml"
SPARQL_FILE = "sparql.yaml"

BLANK_NODE_MARKER = "__BLANK_NODE__"


class QuerySpec(BaseModel):
    """A named query from ``sparql.yaml``."""

    name: str = Field(..., description="Query name")
    description: Optional[str] = Field(None, description="Query description")
    variables: List[str] = Field(default_factory=list, description="Requested variables")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Bound parameters")


class GraphBuilder:
    """Build :class:`Subject` objects from parsed ``model.yaml`` data."""

    def __init__(self, model_data: List[Dict]):
        self.model_data = model_data
        self.subject_names = set()
        for subject_hash in model_data:
            if isinstance(subject_hash, dict) and subject_hash:
                self.subject_names.add(self.split_subject_key(next(iter(subject_hash)))[0])

    @staticmethod
    def split_subject_key(subject_spec: Any) -> Tuple[str, Optional[str]]:
        """Split ``"Name example_uri ..."`` into the name and first example."""
        parts = str(subject_spec).split()
        if not parts:
            raise ConfigFileError(f"Empty subject name in {MODEL_FILE}")
        return parts[0], parts[1] if len(parts) > 1 else None

    def build(self) -> List[Subject]:
        """Build root subjects in declaration order."""
        subjects = []
        for subject_hash in self.model_data:
            if not isinstance(subject_hash, dict):
                continue
            for subject_spec, properties_list in subject_hash.items():
                name, value = self.split_subject_key(subject_spec)
                subjects.append(
                    Subject(
                        name=name,
                        value=value,
                        predicates=self.build_predicates(properties_list),
                    )
                )
        return subjects

    def build_predicates(self, properties_list: Any) -> List[Predicate]:
        """Process the property list of a subject or blank node."""
        if properties_list is None:
            return []
        if not isinstance(properties_list, list):
            properties_list = [properties_list]

        predicates = []
        for prop_dict in properties_list:
            if not isinstance(prop_dict, dict):
                continue
            for predicate, object_list in prop_dict.items():
                predicates.append(self.build_predicate(predicate, object_list))
        return predicates

    def build_predicate(self, predicate: str, object_list: Any) -> Predicate:
        uri, cardinality = parse_predicate(predicate)

        if not isinstance(object_list, list):
            object_list = [object_list]

        if uri in RDF_TYPE_PREDICATES:
            objects = [
                URIObject(name=str(obj), value=str(obj))
                for obj in object_list
                if obj is not None
            ]
        else:
            objects = [self.build_object(obj) for obj in object_list if obj is not None]

        return Predicate(uri=uri, cardinality=cardinality, objects=objects)

    def build_object(self, obj: Any):
        """Process an object entry of a predicate."""
        if is_blank_node(obj):
            nested = obj[BLANK_NODE_KEY] if isinstance(obj, dict) else []
            return BlankNode(
                subject=Subject(
                    name=BLANK_NODE_KEY,
                    blank_node=True,
                    predicates=self.build_predicates(nested),
                )
            )

        if isinstance(obj, dict):
            if len(obj) != 1:
                raise ConfigFileError(
                    f"Object must be a single 'name: value' pair, got {sorted(map(str, obj))}"
                )
            obj_name, obj_value = next(iter(obj.items()))
            return self.classify(str(obj_name), obj_value)

        # A bare scalar names a variable, or a subject when one is declared
        name = str(obj).strip()
        if name in self.subject_names:
            return SubjectRef(name=name, subject=name)
        return VariableObject(name=name)

    def classify(self, name: str, value: Any):
        """Decide the object kind of an example value."""
        if value is None:
            return VariableObject(name=name)
        if isinstance(value, list):
            return ValueList(name=name, values=[self.classify(name, v) for v in value])
        if isinstance(value, str):
            stripped = value.strip()
            if stripped in self.subject_names:
                return SubjectRef(name=name, subject=stripped)
            if is_uri_value(stripped):
                return URIObject(name=name, value=stripped)

        literal, lang, datatype = parse_literal(value)
        return LiteralObject(name=name, value=literal, lang=lang, datatype=datatype)


class RDFConfig:
    """Reader for one RDF-config directory following Ruby RDFConfig logic"""

    def __init__(self, config_dir: str):
        self.config_dir = config_dir
        self._prefixes: Optional[Dict[str, str]] = None
        self._model_data: Optional[List[Dict]] = None
        self._queries: Optional[Dict[str, QuerySpec]] = None

    @property
    def prefixes(self) -> Dict[str, str]:
        if self._prefixes is None:
            self._prefixes = self.load_prefixes()
        return self._prefixes

    @property
    def queries(self) -> Dict[str, QuerySpec]:
        if self._queries is None:
            self._queries = self.load_queries()
        return self._queries

    def load_prefixes(self) -> Dict[str, str]:
        """Load prefix mappings from prefix.yaml"""
        data = self._load_yaml(PREFIX_FILE, required=False)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigFileError(f"{PREFIX_FILE} must be a mapping", self._path(PREFIX_FILE))
        return {str(prefix): str(namespace) for prefix, namespace in data.items()}

    def load_model(self) -> List[Dict]:
        """Load model from model.yaml, handling blank node keys"""
        if self._model_data is not None:
            return self._model_data

        model_path = self._path(MODEL_FILE)
        if not os.path.exists(model_path):
            raise ConfigFileError(f"{MODEL_FILE} not found in {self.config_dir}", model_path)

        with open(model_path, "r", encoding="utf-8") as f:
            raw_content = f.read()

        # Pre-process: Replace [] keys with special marker before YAML parsing
        processed_content = self._preprocess_blank_node_keys(raw_content)

        try:
            model_data = yaml.safe_load(processed_content) or []
        except yaml.YAMLError as e:
            logger.error("YAML Error loading %s: %s", model_path, e)
            raise ConfigFileError(f"Invalid YAML in {model_path}: {e}", model_path) from e

        # Post-process: Convert marker back to blank node identifier
        model_data = self._postprocess_blank_nodes(model_data)

        self._model_data = model_data if isinstance(model_data, list) else [model_data]
        return self._model_data

    def load_queries(self) -> Dict[str, QuerySpec]:
        """Load named queries from sparql.yaml"""
        data = self._load_yaml(SPARQL_FILE, required=False) or {}
        if not isinstance(data, dict):
            raise ConfigFileError(f"{SPARQL_FILE} must be a mapping", self._path(SPARQL_FILE))

        queries = {}
        for name, query_data in data.items():
            query_data = query_data or {}
            variables = query_data.get("variables") or []
            if isinstance(variables, str):
                variables = variables.split()
            queries[str(name)] = QuerySpec(
                name=str(name),
                description=query_data.get("description"),
                variables=[str(v) for v in variables],
                parameters=query_data.get("parameters") or {},
            )
        return queries

    def query(self, name: Optional[str] = None) -> QuerySpec:
        """Return a named query, or the first one when *name* is omitted."""
        queries = self.queries
        if name is None:
            if not queries:
                raise ConfigFileError(f"No queries defined in {SPARQL_FILE}")
            return next(iter(queries.values()))
        if name not in queries:
            raise ConfigFileError(f"Query '{name}' not found in {SPARQL_FILE}")
        return queries[name]

    def build_subjects(self) -> List[Subject]:
        """Build the subject graph from model.yaml"""
        return GraphBuilder(self.load_model()).build()

    def model(self) -> RDFModel:
        """Build and validate the model."""
        subjects = self.build_subjects()
        logger.debug("Loaded %s subjects from %s", len(subjects), self.config_dir)
        return RDFModel(subjects, self.prefixes)

    def _path(self, filename: str) -> str:
        return os.path.join(self.config_dir, filename)

    def _load_yaml(self, filename: str, required: bool = True) -> Any:
        path = self._path(filename)
        if not os.path.exists(path):
            if required:
                raise ConfigFileError(f"{filename} not found in {self.config_dir}", path)
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("YAML Error loading %s: %s", path, e)
            raise ConfigFileError(f"Invalid YAML in {path}: {e}", path) from e

    def _preprocess_blank_node_keys(self, content: str) -> str:
        """Replace [] keys with __BLANK_NODE__ marker for YAML parsing"""
        # Match patterns like "- []:" or "  []:" (blank node as key)
        content = re.sub(
            r"^(\s*)- \[\]:(\s*)$", rf"\1- {BLANK_NODE_MARKER}:\2", content, flags=re.MULTILINE
        )
        content = re.sub(
            r"^(\s*)\[\]:(\s*)$", rf"\1{BLANK_NODE_MARKER}:\2", content, flags=re.MULTILINE
        )
        return content

    def _postprocess_blank_nodes(self, data: Any) -> Any:
        """Recursively convert __BLANK_NODE__ markers back to '[]' identifier"""
        if isinstance(data, dict):
            new_dict = {}
            for key, value in data.items():
                new_key = BLANK_NODE_KEY if key == BLANK_NODE_MARKER else key
                new_dict[new_key] = self._postprocess_blank_nodes(value)
            return new_dict
        elif isinstance(data, list):
            return [self._postprocess_blank_nodes(item) for item in data]
        else:
            return data


def load_model(config_dir: str) -> RDFModel:
    """Load and validate the model of an RDF-config directory."""
    return RDFConfig(config_dir).model()
