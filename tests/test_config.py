"""Tests for RDF-config directory loading."""

import pytest

from rdfpattern import (
    BlankNode,
    Cardinality,
    ConfigFileError,
    InvalidConfigError,
    LiteralObject,
    SubjectRef,
    URIObject,
    ValueList,
    VariableObject,
    compile_where,
)
from rdfpattern.config import RDFConfig, load_model


@pytest.fixture
def config(sample_config_dir):
    return RDFConfig(sample_config_dir)


@pytest.fixture
def entry(config):
    return config.model().find_subject("Entry")


def _objects(subject, uri):
    return next(p for p in subject.predicates if p.uri == uri).objects


class TestLoading:
    """Test building subjects from YAML."""

    def test_prefixes(self, config):
        assert list(config.prefixes) == ["ex", "dct", "rdfs", "xsd"]
        assert config.prefixes["ex"] == "<http://example.org/>"

    def test_subjects(self, config):
        model = config.model()
        assert [s.name for s in model.subjects] == ["Entry", "Gene"]
        assert model.find_subject("Entry").value == "ex:entry1"
        assert model.find_subject("Gene").types == ["ex:Gene", "ex:Sequence"]

    def test_cardinality(self, entry):
        cardinalities = {p.uri: p.cardinality for p in entry.predicates}
        assert cardinalities["dct:identifier"] is None
        assert cardinalities["rdfs:label"] == Cardinality(min=0, max=1)
        assert cardinalities["ex:gene"] == Cardinality(min=0, max=None)

    def test_literals(self, entry):
        (entry_id,) = _objects(entry, "dct:identifier")
        assert isinstance(entry_id, LiteralObject)
        assert entry_id.value == "E001"
        assert entry_id.is_plain

        (label,) = _objects(entry, "rdfs:label")
        assert label.value == "Example entry"
        assert label.lang == "en"

    def test_subject_reference(self, entry):
        (gene,) = _objects(entry, "ex:gene")
        assert isinstance(gene, SubjectRef)
        assert gene.name == "gene"
        assert gene.subject == "Gene"

    def test_blank_node(self, entry):
        (annotation,) = _objects(entry, "ex:annotation")
        assert isinstance(annotation, BlankNode)
        assert annotation.subject.blank_node
        assert annotation.subject.types == ["ex:Annotation"]

        (score,) = _objects(annotation.subject, "ex:score")
        assert score.value == "0.9"
        assert score.datatype == "xsd:decimal"

        (evidence,) = _objects(annotation.subject, "ex:evidence")
        assert isinstance(evidence, VariableObject)
        assert annotation.subject.predicates[2].cardinality == Cardinality(min=0, max=1)

    def test_uris_and_value_lists(self, config):
        gene = config.model().find_subject("Gene")
        (source,) = _objects(gene, "ex:source")
        assert isinstance(source, URIObject)
        assert source.value == "<http://example.org/source>"

        (status,) = _objects(gene, "ex:status")
        assert isinstance(status, ValueList)
        assert [v.value for v in status.values] == ["ex:Active", "ex:Retired"]

    def test_flattened_blank_node_route(self, config):
        model = config.model()
        assert model.find_by_object_name("score").predicate_uris == ["ex:annotation", "ex:score"]
        assert len(model.bnode_subjects) == 1


class TestQueries:
    """Test named queries from sparql.yaml."""

    def test_query_specs(self, config):
        assert list(config.queries) == ["gene_labels", "annotations"]
        query = config.query("gene_labels")
        assert query.variables == ["entry_id", "gene_label"]
        assert query.parameters == {"entry_id": "E001"}

    def test_first_query_by_default(self, config):
        assert config.query().name == "gene_labels"

    def test_unknown_query(self, config):
        with pytest.raises(ConfigFileError, match="missing"):
            config.query("missing")

    def test_gene_labels_pattern(self, config):
        query = config.query("gene_labels")
        lines = compile_where(config.model(), query.variables, query.parameters)
        assert lines == [
            "WHERE {",
            '    VALUES ?entry_id { "E001" }',
            "    ?Entry a ex:Entry ;",
            "        dct:identifier ?entry_id ;",
            "        ex:gene / rdfs:label ?gene_label .",
            "}",
        ]

    def test_annotations_pattern(self, config):
        query = config.query("annotations")
        lines = compile_where(config.model(), query.variables, query.parameters)
        assert lines == [
            "WHERE {",
            "    ?Entry a ex:Entry ;",
            "        dct:identifier ?entry_id ;",
            "        ex:annotation / ex:score ?score .",
            "    OPTIONAL { ?Entry ex:annotation / ex:evidence ?evidence . }",
            "}",
        ]


class TestErrors:
    """Test configuration file errors."""

    def test_missing_model(self, tmp_path):
        (tmp_path / "prefix.yaml").write_text("ex: <http://example.org/>\n")
        with pytest.raises(ConfigFileError, match="model.yaml not found"):
            load_model(str(tmp_path))

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "model.yaml").write_text("- Entry:\n  - a: [ex:Entry\n")
        with pytest.raises(ConfigFileError, match="Invalid YAML"):
            RDFConfig(str(tmp_path)).load_model()

    def test_missing_prefix_file(self, tmp_path):
        (tmp_path / "model.yaml").write_text("- Entry:\n  - a: ex:Entry\n")
        config = RDFConfig(str(tmp_path))
        assert config.prefixes == {}
        with pytest.raises(InvalidConfigError) as exc_info:
            config.model()
        assert exc_info.value.errors == [
            "Prefix (ex) used but not defined in prefix.yaml file."
        ]

    def test_object_with_several_pairs(self, tmp_path):
        (tmp_path / "model.yaml").write_text(
            "- Entry:\n  - a: ex:Entry\n  - ex:p:\n    - x: 1\n      y: 2\n"
        )
        with pytest.raises(ConfigFileError, match="single"):
            RDFConfig(str(tmp_path)).build_subjects()

    def test_invalid_model(self, invalid_config_dir):
        with pytest.raises(InvalidConfigError) as exc_info:
            load_model(invalid_config_dir)
        assert exc_info.value.errors == [
            "Subject (Entry) has no rdf:type.",
            "Prefix (foo) used but not defined in prefix.yaml file.",
            "Duplicate variable (entry_id) in model.yaml file.",
        ]


class TestBlankNodeKeys:
    """Test [] key handling around YAML parsing."""

    def test_preprocess(self):
        config = RDFConfig(".")
        content = "  - []:\n    []:\n  - ex:p: []\n"
        assert config._preprocess_blank_node_keys(content) == (
            "  - __BLANK_NODE__:\n    __BLANK_NODE__:\n  - ex:p: []\n"
        )

    def test_mapping_style_blank_node(self, tmp_path):
        (tmp_path / "prefix.yaml").write_text("ex: <http://example.org/>\n")
        (tmp_path / "model.yaml").write_text(
            "- Entry:\n"
            "  - a: ex:Entry\n"
            "  - ex:has:\n"
            "      []:\n"
            "        - ex:value:\n"
            "          - value:\n"
        )
        model = load_model(str(tmp_path))
        assert model.property_path("value") == ["ex:has", "ex:value"]
