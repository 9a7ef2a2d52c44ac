"""Flatten a subject graph into triples, unrolling blank nodes.

Blank-node hops do not produce triples of their own. Their predicates are
kept on a stack while the nested subject is walked, so every leaf object
becomes one :class:`~rdfpattern.models.Triple` whose predicate route runs
from the root subject through every blank node to the leaf.
"""

import logging
from typing import Iterable, List, Optional

from .models import BlankNode, Predicate, Subject, Triple

logger = logging.getLogger(__name__)

__all__ = [
    "TripleFlattener",
    "flatten",
]


class TripleFlattener:
    """Walk root subjects depth first and collect flattened triples.

    Attributes:
        subjects: Root subjects in declaration order
        triples: Flattened triples, filled by :meth:`flatten`
        bnode_subjects: Nested blank-node subjects in visiting order
    """

    def __init__(self, subjects: Iterable[Subject]):
        self.subjects = list(subjects)
        self.triples: List[Triple] = []
        self.bnode_subjects: List[Subject] = []
        self._predicates: List[Predicate] = []
        self._subject: Optional[Subject] = None

    def flatten(self) -> List[Triple]:
        """Flatten all root subjects, in declaration order."""
        self.triples = []
        self.bnode_subjects = []

        for subject in self.subjects:
            self._subject = subject
            self._walk_subject(subject)
        self._subject = None

        logger.debug(
            "Flattened %s subjects into %s triples (%s blank nodes)",
            len(self.subjects),
            len(self.triples),
            len(self.bnode_subjects),
        )
        return self.triples

    def _walk_subject(self, subject: Subject) -> None:
        for predicate in subject.predicates:
            self._predicates.append(predicate)
            for obj in predicate.objects:
                self._walk_object(obj)
            self._predicates.pop()

    def _walk_object(self, obj) -> None:
        if isinstance(obj, BlankNode):
            self.bnode_subjects.append(obj.subject)
            self._walk_subject(obj.subject)
        else:
            self.triples.append(Triple(self._subject, list(self._predicates), obj))


def flatten(subjects: Iterable[Subject]) -> List[Triple]:
    """Flatten *subjects* and return the triples only."""
    return TripleFlattener(subjects).flatten()
