"""
Pydantic models for the RDF-config entity-relationship graph.

A model is a list of :class:`Subject` objects. Each subject carries
:class:`Predicate` objects, and each predicate carries objects of one of
the kinds below, discriminated by their ``kind`` field:

- :class:`VariableObject`: a variable without an example value
- :class:`LiteralObject`: a literal, optionally language-tagged or typed
- :class:`URIObject`: a URI (CURIE or ``<...>``); rdf:type classes too
- :class:`SubjectRef`: a reference to another subject of the model
- :class:`BlankNode`: an anonymous nested subject
- :class:`ValueList`: ordered alternative objects

All graph models are frozen once built. :class:`Triple` is the flattened
form produced by :class:`~rdfpattern.flattener.TripleFlattener`.
"""

from dataclasses import dataclass
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

RDF_TYPE_PREDICATES = ("a", "rdf:type")


class Cardinality(BaseModel):
    """Minimum and maximum occurrence of a predicate's object."""

    min: Optional[int] = Field(None, ge=0, description="Minimum occurrence")
    max: Optional[int] = Field(None, ge=0, description="Maximum occurrence")

    model_config = ConfigDict(frozen=True)

    @property
    def is_optional(self) -> bool:
        return self.min is None or self.min == 0


class _GraphNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    def subject_names(self) -> List[str]:
        """Names of the model subjects this object refers to."""
        return []


class VariableObject(_GraphNode):
    """An object variable with no example value."""

    kind: Literal["variable"] = "variable"
    name: str = Field(..., description="Variable name")


class LiteralObject(_GraphNode):
    """A literal object with an example value."""

    kind: Literal["literal"] = "literal"
    name: str = Field(..., description="Variable name")
    value: Any = Field(None, description="Example value")
    lang: Optional[str] = Field(None, description="Language tag")
    datatype: Optional[str] = Field(None, description="Datatype CURIE or URI")

    @property
    def is_plain(self) -> bool:
        """True when the literal has neither a language tag nor a datatype."""
        return self.lang is None and self.datatype is None


class URIObject(_GraphNode):
    """A URI object, either a CURIE or a bracketed ``<...>`` IRI."""

    kind: Literal["uri"] = "uri"
    name: str = Field(..., description="Variable name")
    value: str = Field(..., description="CURIE or bracketed IRI")


class SubjectRef(_GraphNode):
    """An object whose value is another subject of the model."""

    kind: Literal["subject"] = "subject"
    name: str = Field(..., description="Variable name")
    subject: str = Field(..., description="Referenced subject name")

    def subject_names(self) -> List[str]:
        return [self.subject]


class BlankNode(_GraphNode):
    """An anonymous intermediate subject nested under a predicate."""

    kind: Literal["bnode"] = "bnode"
    subject: "Subject"

    @property
    def name(self) -> str:
        return self.subject.name


class ValueList(_GraphNode):
    """Ordered alternative objects sharing one variable name."""

    kind: Literal["values"] = "values"
    name: str = Field(..., description="Variable name")
    values: List["ObjectType"] = Field(default_factory=list)

    def subject_names(self) -> List[str]:
        names: List[str] = []
        for value in self.values:
            for subject_name in value.subject_names():
                if subject_name not in names:
                    names.append(subject_name)
        return names


ObjectType = Annotated[
    Union[VariableObject, LiteralObject, URIObject, SubjectRef, BlankNode, ValueList],
    Field(discriminator="kind"),
]


class Predicate(BaseModel):
    """A predicate of a subject with its cardinality and objects."""

    uri: str = Field(..., description="Predicate CURIE, IRI or 'a'")
    cardinality: Optional[Cardinality] = Field(None, description="Occurrence bounds")
    objects: List[ObjectType] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def is_rdf_type(self) -> bool:
        return self.uri in RDF_TYPE_PREDICATES

    @property
    def is_optional(self) -> bool:
        """A predicate is optional only if it declares a cardinality with min 0."""
        return self.cardinality is not None and self.cardinality.is_optional


class Subject(BaseModel):
    """A subject of the model, or the payload of a blank node."""

    name: str = Field(..., description="Subject name")
    value: Optional[str] = Field(None, description="Example subject URI")
    blank_node: bool = Field(False, description="Whether this is a blank node")
    predicates: List[Predicate] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Subject name must not be empty")
        return v

    @property
    def types(self) -> List[str]:
        """rdf:type class names in declaration order."""
        return [
            obj.name
            for predicate in self.predicates
            if predicate.is_rdf_type
            for obj in predicate.objects
        ]

    @property
    def objects(self) -> List[Any]:
        """All objects of all predicates."""
        return [obj for predicate in self.predicates for obj in predicate.objects]


BlankNode.model_rebuild()
ValueList.model_rebuild()
Predicate.model_rebuild()
Subject.model_rebuild()


@dataclass(frozen=True, eq=False)
class Triple:
    """A flattened statement: root subject, predicate route and leaf object.

    Blank-node hops are encoded in ``predicates``; a route longer than one
    predicate crosses at least one blank node.
    """

    subject: Subject
    predicates: List[Predicate]
    object: Any

    @property
    def predicate(self) -> Predicate:
        return self.predicates[-1]

    @property
    def object_name(self) -> str:
        return self.object.name

    @property
    def predicate_uris(self) -> List[str]:
        return [predicate.uri for predicate in self.predicates]

    @property
    def is_bnode_connecting(self) -> bool:
        return len(self.predicates) > 1

    def property_path(self, separator: str = " / ") -> str:
        return separator.join(self.predicate_uris)


class GenerationOptions(BaseModel):
    """Options for one WHERE-pattern compilation."""

    emit_values_lines: bool = Field(True, description="Emit VALUES lines")
    template_mode: bool = Field(False, description="Use {{name}} placeholders for parameters")
    indent_unit: str = Field("    ", description="Indentation unit")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("indent_unit")
    @classmethod
    def validate_indent_unit(cls, v: str) -> str:
        """Indentation may only contain whitespace."""
        if v.strip():
            raise ValueError(f"Invalid indent unit: {v!r}")
        return v
