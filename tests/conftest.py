"""Shared fixtures: small RDF-config models built in code."""

import os

import pytest

from rdfpattern import (
    BlankNode,
    Cardinality,
    Predicate,
    RDFModel,
    Subject,
    SubjectRef,
    URIObject,
    VariableObject,
)

TEST_DATA_DIR = os.path.join(os.path.dirname(__file__), "test_data")

EX_PREFIXES = {
    "ex": "http://example.org/",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
}


def rdf_type(*classes):
    return Predicate(uri="a", objects=[URIObject(name=c, value=c) for c in classes])


def variable(uri, name, cardinality=None):
    return Predicate(uri=uri, cardinality=cardinality, objects=[VariableObject(name=name)])


def bnode(*predicates):
    return BlankNode(subject=Subject(name="[]", blank_node=True, predicates=list(predicates)))


@pytest.fixture
def person_subjects():
    """One subject with a required and an optional variable."""
    return [
        Subject(
            name="s",
            predicates=[
                rdf_type(":Person"),
                variable(":name", "name"),
                variable(":email", "email", Cardinality(min=0, max=1)),
            ],
        )
    ]


@pytest.fixture
def person_model(person_subjects):
    return RDFModel(person_subjects, {"": "http://example.org/"})


@pytest.fixture
def multi_type_model():
    """One subject declaring two rdf:type classes."""
    subject = Subject(
        name="s",
        predicates=[rdf_type(":TypeA", ":TypeB"), variable(":name", "name")],
    )
    return RDFModel([subject], {"": "http://example.org/"})


def _entry_with_bnodes(type_a, type_b):
    return Subject(
        name="Entry",
        predicates=[
            rdf_type("ex:Entry"),
            Predicate(
                uri="ex:has",
                objects=[bnode(rdf_type(type_a), variable("ex:value", "value_a"))],
            ),
            Predicate(
                uri="ex:has",
                objects=[bnode(rdf_type(type_b), variable("ex:value", "value_b"))],
            ),
        ],
    )


@pytest.fixture
def bnode_model():
    """Two typed blank nodes reached through the same predicate."""
    return RDFModel([_entry_with_bnodes("ex:A", "ex:B")], EX_PREFIXES)


@pytest.fixture
def same_type_bnode_model():
    """Two blank nodes with identical route and type."""
    return RDFModel([_entry_with_bnodes("ex:A", "ex:A")], EX_PREFIXES)


@pytest.fixture
def untyped_bnode_model():
    """Two untyped blank nodes reached through the same predicate."""
    subject = Subject(
        name="Entry",
        predicates=[
            rdf_type("ex:Entry"),
            Predicate(uri="ex:has", objects=[bnode(variable("ex:value", "v1"))]),
            Predicate(uri="ex:has", objects=[bnode(variable("ex:value", "v2"))]),
        ],
    )
    return RDFModel([subject], EX_PREFIXES)


@pytest.fixture
def gene_model():
    """Entry referencing Gene through the ``gene`` variable."""
    entry = Subject(
        name="Entry",
        predicates=[
            rdf_type("ex:Entry"),
            Predicate(uri="ex:gene", objects=[SubjectRef(name="gene", subject="Gene")]),
        ],
    )
    gene = Subject(
        name="Gene",
        predicates=[rdf_type("ex:Gene"), variable("rdfs:label", "gene_label")],
    )
    return RDFModel([entry, gene], EX_PREFIXES)


@pytest.fixture
def cyclic_model():
    """Two subjects referencing each other."""
    a = Subject(
        name="A",
        predicates=[
            rdf_type("ex:A"),
            Predicate(uri="ex:b", objects=[SubjectRef(name="b", subject="B")]),
        ],
    )
    b = Subject(
        name="B",
        predicates=[
            rdf_type("ex:B"),
            Predicate(uri="ex:a", objects=[SubjectRef(name="a", subject="A")]),
        ],
    )
    return RDFModel([a, b], EX_PREFIXES)


@pytest.fixture
def sample_config_dir():
    return os.path.join(TEST_DATA_DIR, "sample")


@pytest.fixture
def invalid_config_dir():
    return os.path.join(TEST_DATA_DIR, "invalid")


def _self_named_reference_subjects():
    entry = Subject(
        name="Entry",
        predicates=[
            rdf_type("ex:Entry"),
            variable("rdfs:label", "entry_label"),
            Predicate(uri="ex:gene", objects=[SubjectRef(name="Gene", subject="Gene")]),
        ],
    )
    gene = Subject(
        name="Gene",
        predicates=[rdf_type("ex:Gene"), variable("rdfs:label", "gene_label")],
    )
    return entry, gene


@pytest.fixture
def self_named_ref_model():
    """Entry referencing Gene through a variable also named ``Gene``."""
    return RDFModel(list(_self_named_reference_subjects()), EX_PREFIXES)


@pytest.fixture
def self_named_ref_model_gene_first():
    """As ``self_named_ref_model`` with Gene declared before Entry."""
    entry, gene = _self_named_reference_subjects()
    return RDFModel([gene, entry], EX_PREFIXES)


@pytest.fixture
def partly_typed_bnode_model():
    """One predicate with an untyped and a typed blank node."""
    subject = Subject(
        name="Entry",
        predicates=[
            rdf_type("ex:Entry"),
            Predicate(
                uri="ex:has",
                objects=[
                    bnode(variable("ex:value", "v1")),
                    bnode(rdf_type("ex:B"), variable("ex:value", "v2")),
                ],
            ),
        ],
    )
    return RDFModel([subject], EX_PREFIXES)
