"""The validated, flattened RDF model consumed by the SPARQL generators."""

import logging
from typing import Dict, Iterable, Iterator, Optional

from .flattener import TripleFlattener
from .models import Subject, Triple
from .resolver import PathResolver
from .validator import Validator

logger = logging.getLogger(__name__)

__all__ = [
    "RDFModel",
]


class RDFModel(PathResolver):
    """A model built once from root subjects and a prefix map.

    Construction flattens the subjects, validates them and indexes the
    result. A model that fails validation is never returned: the
    constructor raises :class:`~rdfpattern.exceptions.InvalidConfigError`
    with every problem found.

    Example:
        >>> model = RDFModel(subjects, prefixes={"ex": "http://example.org/"})
        >>> model.property_path("name")
        ['ex:name']
    """

    def __init__(
        self,
        subjects: Iterable[Subject],
        prefixes: Optional[Dict[str, str]] = None,
    ):
        subjects = list(subjects)
        self.prefixes = dict(prefixes or {})

        flattener = TripleFlattener(subjects)
        triples = flattener.flatten()

        validator = Validator(subjects, self.prefixes)
        validator.validate()
        validator.raise_for_errors()

        super().__init__(subjects, triples, flattener.bnode_subjects)
        logger.debug("Built model with %s subjects and %s triples", len(subjects), len(triples))

    def __iter__(self) -> Iterator[Triple]:
        return iter(self.triples)

    def __len__(self) -> int:
        return len(self.triples)

    def __getitem__(self, idx: int) -> Triple:
        return self.triples[idx]
