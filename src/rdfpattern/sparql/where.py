"""WHERE-pattern compilation from an RDF-config model.

For each requested variable the generator finds the triple that produces
it and chooses between two renderings:

* **Property path.** The variable is anchored to the nearest requested
  ancestor subject (or the model root) and reached through one
  ``/``-joined path, e.g. ``?entry ex:gene / rdfs:label ?gene_label``.
* **Explicit blank nodes.** When the route crosses blank nodes and another
  requested variable shares the same path, every hop at which some sibling
  blank node asserts an rdf:type is materialized as ``_:bN``, with an ``a``
  assertion when the hop has types of its own.

rdf:type assertions are then synthesized for every pattern subject, and the
result is serialized as::

    WHERE {
        VALUES ?entryClass { ex:A ex:B }
        ?entry a ?entryClass ;
            ex:gene ?gene .
        OPTIONAL { ?entry ex:note ?note . }
    }

All bookkeeping (triple buffers, instance caches, blank-node ids) is
rebuilt on every :meth:`WhereGenerator.generate` call, so blank-node ids
always start at 1 and output is deterministic.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from rdflib import Literal as RDFLiteral

from ..model import RDFModel
from ..models import (
    RDF_TYPE_PREDICATES,
    GenerationOptions,
    LiteralObject,
    Subject,
    SubjectRef,
    Triple,
    ValueList,
)

logger = logging.getLogger(__name__)

__all__ = [
    "PROPERTY_PATH_SEP",
    "PatternBlankNode",
    "PatternTriple",
    "PatternVariable",
    "WhereGenerator",
    "compile_where",
]

PROPERTY_PATH_SEP = " / "


class _RDFTyped:
    """rdf:type bookkeeping shared by pattern variables and blank nodes."""

    rdf_types: List[str]

    @property
    def has_rdf_type(self) -> bool:
        return bool(self.rdf_types)

    @property
    def has_one_rdf_type(self) -> bool:
        return len(self.rdf_types) == 1

    @property
    def has_multiple_rdf_types(self) -> bool:
        return len(self.rdf_types) > 1

    def set_rdf_types(self, rdf_types: Iterable[str]) -> None:
        self.rdf_types = list(dict.fromkeys(rdf_types))


@dataclass(eq=False)
class PatternVariable(_RDFTyped):
    """A ``?name`` variable in the generated pattern."""

    name: str
    rdf_types: List[str] = field(default_factory=list)

    def to_sparql(self) -> str:
        return f"?{self.name}"

    @property
    def rdf_type_varname(self) -> str:
        return f"?{self.name}Class"


@dataclass(eq=False)
class PatternBlankNode(_RDFTyped):
    """A materialized ``_:bN`` blank node."""

    bnode_id: int
    predicate_route: Tuple[str, ...]
    rdf_types: List[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return f"_b{self.bnode_id}"

    def to_sparql(self) -> str:
        return f"_:b{self.bnode_id}"

    @property
    def rdf_type_varname(self) -> str:
        return f"?{self.name}Class"


PatternNode = Union[PatternVariable, PatternBlankNode]


@dataclass(eq=False)
class PatternTriple:
    """One ``subject predicate object`` line of the generated pattern.

    rdf:type triples use the subject itself as object; the class comes from
    the subject's ``rdf_types``.
    """

    subject: PatternNode
    predicate: str
    object: PatternNode

    @property
    def is_rdf_type(self) -> bool:
        return self.predicate in RDF_TYPE_PREDICATES

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.subject.name, self.predicate, self.object.name)

    def to_sparql(self, indent: str = "", is_first: bool = True, is_last: bool = True) -> str:
        if is_first:
            line = f"{indent}{self.subject.to_sparql()} "
        else:
            line = indent * 2

        if self.is_rdf_type:
            if self.object.has_one_rdf_type:
                line = f"{line}a {self.object.rdf_types[0]}"
            else:
                line = f"{line}a {self.object.rdf_type_varname}"
        else:
            line = f"{line}{self.predicate} {self.object.to_sparql()}"

        return f"{line} {'.' if is_last else ';'}"


class WhereGenerator:
    """Compile requested variables of a model into a WHERE block.

    Args:
        model: Validated model
        variables: Requested variable names; all object names if ``None``
        parameters: Bound parameter values, emitted as ``VALUES`` lines
        options: Generation options
    """

    def __init__(
        self,
        model: RDFModel,
        variables: Optional[Iterable[str]] = None,
        parameters: Optional[Dict[str, Any]] = None,
        options: Optional[GenerationOptions] = None,
    ):
        self.model = model
        self.options = options or GenerationOptions()
        self.parameters = dict(parameters or {})

        names = model.object_names() if variables is None else list(variables)
        self.variables: List[str] = list(
            dict.fromkeys(model.variable_name_for(name) for name in names)
        )
        self._reset()

    def generate(self) -> List[str]:
        """Compile the WHERE block and return its lines."""
        self._reset()
        self._generate_triples()
        if self.options.emit_values_lines:
            self._add_values_lines()

        lines = ["WHERE {"]
        lines += self._values_lines
        lines += self._required_lines()
        lines += self._optional_lines()
        lines.append("}")

        logger.debug(
            "Generated %s required and %s optional triples for %s variables",
            len(self._required_triples),
            len(self._optional_triples),
            len(self.variables),
        )
        return lines

    @property
    def required_triples(self) -> List[PatternTriple]:
        return list(self._required_triples)

    @property
    def optional_triples(self) -> List[PatternTriple]:
        return list(self._optional_triples)

    # ------------------------------------------------------------------
    # Triple generation
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._values_lines: List[str] = []
        self._required_triples: List[PatternTriple] = []
        self._optional_triples: List[PatternTriple] = []
        self._variable: Dict[str, PatternVariable] = {}
        self._blank_nodes: Dict[Tuple[Tuple[str, ...], Tuple[str, ...]], PatternBlankNode] = {}
        self._bnode_number = 1
        self._target_triple: Optional[Triple] = None

    def _generate_triples(self) -> None:
        for variable_name in self.variables:
            self._generate_triple_by_variable(variable_name)

        self._required_triples = self._rdf_type_triples() + self._required_triples

    def _generate_triple_by_variable(self, variable_name: str) -> None:
        triple = self.model.find_by_object_name(variable_name)
        if triple is None:
            if not self.model.is_subject(variable_name):
                logger.warning("Variable %s not found in model, skipping", variable_name)
            return
        if triple.subject.name == variable_name:
            return

        self._target_triple = triple
        if triple.is_bnode_connecting and self.model.same_property_path_exists(
            triple.object_name, self.variables
        ):
            self._generate_triples_with_bnode(variable_name)
        else:
            self._generate_triple_without_bnode(variable_name)

    def _generate_triple_without_bnode(self, variable_name: str) -> None:
        triple = self._target_triple
        subject = self._subject_by_object_name(triple.object_name)
        property_path = self.model.property_path(triple.object_name, stop_at=subject.name)

        self._add_triple(
            PatternTriple(
                self._subject_instance(subject),
                PROPERTY_PATH_SEP.join(property_path),
                self._variable_instance(variable_name),
            ),
            triple.predicate.is_optional,
        )

    def _generate_triples_with_bnode(self, variable_name: str) -> None:
        triple = self._target_triple
        bnode_rdf_types = self.model.bnode_rdf_types(triple)

        if all(rdf_types is None for rdf_types in bnode_rdf_types):
            logger.debug("No typed blank nodes on path to %s, using property path", variable_name)
            self._add_triple(
                PatternTriple(
                    self._subject_instance(triple.subject),
                    triple.property_path(PROPERTY_PATH_SEP),
                    self._variable_instance(variable_name),
                ),
                triple.predicate.is_optional,
            )
        else:
            self._generate_triples_with_bnode_rdf_types(variable_name, bnode_rdf_types)

    def _generate_triples_with_bnode_rdf_types(
        self, variable_name: str, bnode_rdf_types: List[Optional[List[str]]]
    ) -> None:
        triple = self._target_triple
        predicates = triple.predicates
        subject: PatternNode = self._subject_instance(triple.subject)

        bnode_predicates: List[str] = []
        for i in range(len(predicates) - 1):
            bnode_predicates.append(predicates[i].uri)
            rdf_types = bnode_rdf_types[i]
            if rdf_types is None:
                continue

            route = tuple(predicate.uri for predicate in predicates[: i + 1])
            bnode = self._blank_node(route, rdf_types)
            self._add_triple(
                PatternTriple(subject, PROPERTY_PATH_SEP.join(bnode_predicates), bnode),
                False,
            )
            bnode_predicates = []
            subject = bnode

        bnode_predicates.append(predicates[-1].uri)
        self._add_triple(
            PatternTriple(
                subject,
                PROPERTY_PATH_SEP.join(bnode_predicates),
                self._variable_instance(variable_name),
            ),
            predicates[-1].is_optional,
        )

    def _subject_by_object_name(self, object_name: str) -> Subject:
        """Anchor subject: nearest requested ancestor, else the chain root."""
        object_name_for_subject = None
        for name in reversed(self.model.parent_variables(object_name)):
            object_name_for_subject = name
            if self.model.variable_name_for(name) in self.variables:
                break

            triple = self.model.find_by_object_name(name)
            if triple is not None and triple.object_name in self.variables:
                break

        subject = None
        if object_name_for_subject is not None:
            subject = self.model.find_subject(object_name_for_subject)
        return subject if subject is not None else self._target_triple.subject

    # ------------------------------------------------------------------
    # rdf:type triples
    # ------------------------------------------------------------------

    def _rdf_type_triples(self) -> List[PatternTriple]:
        triples: List[PatternTriple] = []

        subjects = self._pattern_subjects()
        for subject in subjects:
            if subject.has_rdf_type:
                triples.append(PatternTriple(subject, "a", subject))

        subject_names = {subject.name for subject in subjects}
        for variable_name in self.variables:
            if variable_name in subject_names:
                continue
            triple = self._rdf_type_triple_by_variable(variable_name)
            if triple is not None:
                triples.append(triple)

        return triples

    def _rdf_type_triple_by_variable(self, variable_name: str) -> Optional[PatternTriple]:
        triple_in_model = self.model.find_by_object_name(variable_name)
        if triple_in_model is None:
            return None

        obj = triple_in_model.object
        if isinstance(obj, SubjectRef):
            refs = [obj]
        elif isinstance(obj, ValueList):
            refs = [value for value in obj.values if isinstance(value, SubjectRef)]
        else:
            return None

        rdf_types: List[str] = []
        for ref in refs:
            subject = self.model.find_subject(ref.subject)
            if subject is not None:
                rdf_types.extend(subject.types)
        if not rdf_types:
            return None

        variable = self._variable_instance(variable_name)
        variable.set_rdf_types(rdf_types)
        return PatternTriple(variable, "a", variable)

    # ------------------------------------------------------------------
    # VALUES lines
    # ------------------------------------------------------------------

    def _add_values_lines(self) -> None:
        self._add_values_lines_by_parameters()
        self._add_values_lines_for_rdf_type()

    def _add_values_lines_by_parameters(self) -> None:
        for name, value in self.parameters.items():
            obj = self.model.find_object(name)
            if obj is None:
                logger.warning("Parameter %s does not match any model object, skipping", name)
                continue

            if self.options.template_mode:
                value = "{{" + name + "}}"
            if isinstance(obj, LiteralObject) and obj.is_plain:
                value = RDFLiteral(str(value)).n3()

            variable_name = self.model.variable_name_for(name)
            self._add_values_line(self._values_line(f"?{variable_name}", value))

    def _add_values_lines_for_rdf_type(self) -> None:
        for subject in self._pattern_subjects():
            if subject.has_multiple_rdf_types:
                self._add_values_line(
                    self._values_line(subject.rdf_type_varname, " ".join(subject.rdf_types))
                )

    def _values_line(self, variable_name: str, value: Any) -> str:
        return f"{self.options.indent_unit}VALUES {variable_name} {{ {value} }}"

    def _add_values_line(self, line: str) -> None:
        if line not in self._values_lines:
            self._values_lines.append(line)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def _required_lines(self) -> List[str]:
        groups: Dict[str, List[PatternTriple]] = {}
        for triple in self._required_triples:
            groups.setdefault(triple.subject.name, []).append(triple)

        indent = self._indent()
        lines: List[str] = []
        for triples in groups.values():
            last = len(triples) - 1
            for i, triple in enumerate(triples):
                lines.append(triple.to_sparql(indent, i == 0, i == last))
        return lines

    def _optional_lines(self) -> List[str]:
        indent = self._indent()
        return [f"{indent}OPTIONAL {{ {triple.to_sparql()} }}" for triple in self._optional_triples]

    def _indent(self) -> str:
        return self.options.indent_unit

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    def _add_triple(self, triple: PatternTriple, is_optional: bool) -> None:
        triples = self._optional_triples if is_optional else self._required_triples
        if all(t.key != triple.key for t in triples):
            triples.append(triple)

    def _pattern_subjects(self) -> List[PatternNode]:
        subjects: Dict[str, PatternNode] = {}
        for triple in self._required_triples + self._optional_triples:
            subjects.setdefault(triple.subject.name, triple.subject)
        return list(subjects.values())

    def _subject_instance(self, subject: Subject) -> PatternVariable:
        variable = self._variable_instance(self.model.variable_name_for(subject.name))
        if subject.types:
            variable.set_rdf_types(subject.types)
        return variable

    def _variable_instance(self, variable_name: str) -> PatternVariable:
        if variable_name not in self._variable:
            self._variable[variable_name] = PatternVariable(variable_name)
        return self._variable[variable_name]

    def _blank_node(self, predicate_route: Tuple[str, ...], rdf_types: List[str]) -> PatternBlankNode:
        rdf_types = list(dict.fromkeys(rdf_types))
        key = (predicate_route, tuple(rdf_types))
        bnode = self._blank_nodes.get(key)
        if bnode is None:
            bnode = PatternBlankNode(self._bnode_number, predicate_route)
            bnode.set_rdf_types(rdf_types)
            self._blank_nodes[key] = bnode
            self._bnode_number += 1
        return bnode


def compile_where(
    model: RDFModel,
    variables: Optional[Iterable[str]] = None,
    parameters: Optional[Dict[str, Any]] = None,
    options: Optional[GenerationOptions] = None,
) -> List[str]:
    """Compile a WHERE block with a fresh generator."""
    return WhereGenerator(model, variables, parameters, options).generate()
