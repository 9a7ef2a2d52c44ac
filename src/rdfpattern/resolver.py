"""Ancestor-chain and property-path queries over flattened triples.

:class:`PathResolver` answers, for any named object of a model, which triple
produces it, which subjects lie above it, and which predicate route leads
to it from the root. It also infers which blank-node hops carry explicit
rdf:type assertions, so the WHERE compiler knows which hops it has to
materialize instead of compressing them into a property path.

A subject referenced as the object of another subject's predicate is
"used as an object"; the name of the referencing variable is kept in an
index built once from the triples (first occurrence wins, self references
are ignored).
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .models import BlankNode, Predicate, Subject, Triple

logger = logging.getLogger(__name__)

__all__ = [
    "PathResolver",
]


def _same_route(left: Sequence[Predicate], right: Sequence[Predicate]) -> bool:
    """Compare two predicate routes by predicate identity."""
    return len(left) == len(right) and all(a is b for a, b in zip(left, right))


class PathResolver:
    """Lookup and ancestor queries for one flattened model."""

    def __init__(
        self,
        subjects: Iterable[Subject],
        triples: Iterable[Triple],
        bnode_subjects: Iterable[Subject] = (),
    ):
        self.subjects = list(subjects)
        self.triples = list(triples)
        self.bnode_subjects = list(bnode_subjects)

        self._subjects_by_name: Dict[str, Subject] = {}
        for subject in self.subjects:
            self._subjects_by_name.setdefault(subject.name, subject)

        self._as_object: Dict[str, str] = {}
        for triple in self.triples:
            for subject_name in triple.object.subject_names():
                if subject_name == triple.subject.name:
                    continue
                self._as_object.setdefault(subject_name, triple.object_name)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_subject(self, name: str) -> Optional[Subject]:
        return self._subjects_by_name.get(name)

    def is_subject(self, name: str) -> bool:
        return name in self._subjects_by_name

    def as_object_name(self, subject_name: str) -> Optional[str]:
        """Variable name under which *subject_name* is used as an object."""
        return self._as_object.get(subject_name)

    def variable_name_for(self, name: str) -> str:
        """SPARQL variable name for a subject or object name.

        A subject used as an object is addressed through the variable that
        references it, so both ends of the reference join.
        """
        if self.is_subject(name):
            return self._as_object.get(name, name)
        return name

    def find_object(self, name: str):
        """Return the first object named *name* or referring to subject *name*."""
        for triple in self.triples:
            obj = triple.object
            if obj.name == name or name in obj.subject_names():
                return obj
        return None

    def find_by_object_name(self, name: str) -> Optional[Triple]:
        """Return the first triple producing *name*.

        Subject names match triples whose object refers to the subject;
        any other name matches triples whose object carries that name.
        """
        if self.is_subject(name):
            matches = (t for t in self.triples if name in t.object.subject_names())
        else:
            matches = (t for t in self.triples if t.object_name == name)
        return next(matches, None)

    def object_names(self) -> List[str]:
        """Names of all non rdf:type objects, in flattened order."""
        names: List[str] = []
        for triple in self.triples:
            if triple.predicate.is_rdf_type or triple.object_name in names:
                continue
            names.append(triple.object_name)
        return names

    # ------------------------------------------------------------------
    # Ancestor chains
    # ------------------------------------------------------------------

    def parent_subject_name(self, name: str) -> Optional[str]:
        """One step up the chain.

        For a subject this is the variable that references it; for any other
        name it is the subject of the producing triple. A subject referenced
        under its own name steps straight to the referencing subject.
        """
        if self.is_subject(name):
            variable = self._as_object.get(name)
            if variable != name:
                return variable
            for triple in self.triples:
                if name in triple.object.subject_names() and triple.subject.name != name:
                    return triple.subject.name
            return None

        triple = self.find_by_object_name(name)
        return None if triple is None else triple.subject.name

    def parent_subject_names(self, name: str) -> List[str]:
        """All ancestors of *name*, root first. Never contains *name*."""
        names: List[str] = []
        seen = {name}
        current = self.parent_subject_name(name)
        while current is not None and current not in seen:
            names.append(current)
            seen.add(current)
            current = self.parent_subject_name(current)

        names.reverse()
        return names

    def parent_variables(self, name: str) -> List[str]:
        """Ancestor subjects of *name*, root first."""
        return [n for n in self.parent_subject_names(name) if self.is_subject(n)]

    def property_path(self, name: str, stop_at: Optional[str] = None) -> List[str]:
        """Predicate URIs from the root (or *stop_at*) down to *name*.

        Args:
            name: Object or subject name to reach
            stop_at: Subject name at which the upward walk ends

        Returns:
            Predicate URIs in root-to-leaf order; empty if *name* is unknown
        """
        path: List[str] = []
        visited = set()
        current: Optional[str] = name
        while current is not None and current not in visited:
            visited.add(current)
            triple = self.find_by_object_name(current)
            if triple is None:
                break

            path.extend(reversed(triple.predicate_uris))
            subject_name = triple.subject.name
            if subject_name == stop_at:
                break
            current = self._as_object.get(subject_name)

        path.reverse()
        return path

    def same_property_path_exists(self, name: str, candidates: Iterable[str]) -> bool:
        """True if another candidate name is reached by the same property path."""
        path = self.property_path(name)
        if not path:
            return False
        return any(
            other != name and self.property_path(other) == path for other in candidates
        )

    # ------------------------------------------------------------------
    # Blank nodes
    # ------------------------------------------------------------------

    def bnode_rdf_types(self, triple: Triple) -> List[Optional[List[str]]]:
        """Explicit rdf:type classes for each blank-node hop of *triple*.

        Entry ``i`` covers the blank node reached after ``i + 1`` predicates
        of the route. It is ``None`` when no sibling triple asserts a type at
        that hop, otherwise the list of type names that belong to the hop
        (possibly empty).
        """
        rdf_types: List[Optional[List[str]]] = []

        for i in range(len(triple.predicates) - 1):
            route = triple.predicates[: i + 1]
            type_triples = [
                t
                for t in self.triples
                if len(t.predicates) == i + 2
                and _same_route(t.predicates[: i + 1], route)
                and t.predicate.is_rdf_type
            ]
            if not type_triples:
                rdf_types.append(None)
                continue

            types: List[str] = []
            for type_triple in type_triples:
                for bnode_subject in self.bnode_subjects:
                    if not any(p is type_triple.predicate for p in bnode_subject.predicates):
                        continue
                    objects = bnode_subject.objects
                    nested = any(isinstance(obj, BlankNode) for obj in objects)
                    if nested or any(obj is triple.object for obj in objects):
                        if type_triple.object_name not in types:
                            types.append(type_triple.object_name)
            rdf_types.append(types)

        return rdf_types
