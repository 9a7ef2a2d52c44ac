"""Tests for model validation."""

import pytest

from rdfpattern import (
    InvalidConfigError,
    Predicate,
    RDFModel,
    Subject,
    SubjectRef,
    URIObject,
    Validator,
    VariableObject,
)
from rdfpattern.models import BlankNode, ValueList

PREFIXES = {"ex": "http://example.org/"}


def _typed(name, *predicates, value=None):
    return Subject(
        name=name,
        value=value,
        predicates=[Predicate(uri="a", objects=[URIObject(name="ex:T", value="ex:T")])]
        + list(predicates),
    )


def _var(uri, name):
    return Predicate(uri=uri, objects=[VariableObject(name=name)])


class TestValidator:
    """Test individual validation rules."""

    def test_valid_model(self, gene_model):
        validator = Validator(gene_model.subjects, gene_model.prefixes)
        assert validator.validate() == []
        assert not validator.error

    def test_missing_rdf_type(self):
        subject = Subject(name="s", predicates=[_var("ex:p", "x")])
        errors = Validator([subject], PREFIXES).validate()
        assert errors == ["Subject (s) has no rdf:type."]

    def test_blank_node_needs_no_rdf_type(self):
        bnode = BlankNode(
            subject=Subject(name="[]", blank_node=True, predicates=[_var("ex:q", "y")])
        )
        subject = _typed("s", Predicate(uri="ex:p", objects=[bnode]))
        assert Validator([subject], PREFIXES).validate() == []

    def test_undefined_prefix_reported_once(self):
        subject = _typed(
            "s",
            _var("foo:a", "x"),
            _var("foo:b", "y"),
            Predicate(uri="ex:c", objects=[URIObject(name="z", value="foo:Thing")]),
            value="foo:s1",
        )
        errors = Validator([subject], PREFIXES).validate()
        assert errors == ["Prefix (foo) used but not defined in prefix.yaml file."]

    def test_undefined_prefix_in_rdf_type(self):
        subject = Subject(
            name="s",
            predicates=[Predicate(uri="a", objects=[URIObject(name="bar:T", value="bar:T")])],
        )
        errors = Validator([subject], PREFIXES).validate()
        assert errors == ["Prefix (bar) used but not defined in prefix.yaml file."]

    def test_undefined_prefix_inside_blank_node_and_value_list(self):
        bnode = BlankNode(
            subject=Subject(name="[]", blank_node=True, predicates=[_var("baz:q", "y")])
        )
        values = ValueList(
            name="status",
            values=[URIObject(name="status", value="qux:Active")],
        )
        subject = _typed(
            "s",
            Predicate(uri="ex:p", objects=[bnode]),
            Predicate(uri="ex:status", objects=[values]),
        )
        errors = Validator([subject], PREFIXES).validate()
        assert errors == [
            "Prefix (baz) used but not defined in prefix.yaml file.",
            "Prefix (qux) used but not defined in prefix.yaml file.",
        ]

    def test_bracketed_iri_exempt(self):
        subject = _typed(
            "s",
            _var("<http://example.org/p>", "x"),
            Predicate(uri="ex:q", objects=[URIObject(name="y", value="<http://other.org/o>")]),
            value="<http://example.org/s1>",
        )
        assert Validator([subject], PREFIXES).validate() == []

    def test_duplicate_subject_name(self):
        subjects = [_typed("s"), _typed("s"), _typed("s")]
        errors = Validator(subjects, PREFIXES).validate()
        assert errors == ["Duplicate subject name (s) in model.yaml file."]

    def test_duplicate_variable(self):
        subjects = [_typed("s", _var("ex:p", "x")), _typed("t", _var("ex:q", "x"))]
        errors = Validator(subjects, PREFIXES).validate()
        assert errors == ["Duplicate variable (x) in model.yaml file."]

    def test_subject_refs_are_not_variables(self):
        subjects = [
            _typed("s", Predicate(uri="ex:p", objects=[SubjectRef(name="t", subject="t")])),
            _typed("u", Predicate(uri="ex:q", objects=[SubjectRef(name="t", subject="t")])),
            _typed("t"),
        ]
        assert Validator(subjects, PREFIXES).validate() == []

    def test_error_order(self):
        subjects = [
            Subject(name="A", predicates=[_var("foo:p", "y")]),
            _typed("A", _var("ex:p", "x")),
            _typed("B", _var("ex:q", "x")),
        ]
        errors = Validator(subjects, PREFIXES).validate()
        assert errors == [
            "Subject (A) has no rdf:type.",
            "Prefix (foo) used but not defined in prefix.yaml file.",
            "Duplicate subject name (A) in model.yaml file.",
            "Duplicate variable (x) in model.yaml file.",
        ]

    def test_validate_resets_errors(self):
        validator = Validator([Subject(name="s")], PREFIXES)
        validator.validate()
        assert validator.validate() == ["Subject (s) has no rdf:type."]


class TestInvalidConfigError:
    """Test error aggregation on model construction."""

    def test_model_raises_with_all_errors(self):
        subjects = [Subject(name="s", predicates=[_var("foo:p", "x")])]
        with pytest.raises(InvalidConfigError) as exc_info:
            RDFModel(subjects, PREFIXES)

        assert exc_info.value.errors == [
            "Subject (s) has no rdf:type.",
            "Prefix (foo) used but not defined in prefix.yaml file.",
        ]
        assert str(exc_info.value) == "\n".join(exc_info.value.errors)

    def test_raise_for_errors_without_errors(self, gene_model):
        validator = Validator(gene_model.subjects, gene_model.prefixes)
        validator.validate()
        validator.raise_for_errors()
