"""Model validation with aggregated error reporting.

Validation is not fail-fast: every problem is collected in detection order
and reported through a single :class:`~rdfpattern.exceptions.InvalidConfigError`.

Checks:
  1. Every non-blank subject declares at least one rdf:type
  2. Every prefix used by subjects, predicates, classes and URI objects is
     defined in the prefix map (bracketed IRIs are exempt)
  3. Subject names are unique
  4. Variable names are unique
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from .exceptions import InvalidConfigError
from .models import BlankNode, Predicate, Subject, SubjectRef, URIObject, ValueList
from .utils import prefix_of

logger = logging.getLogger(__name__)

__all__ = [
    "Validator",
]


class Validator:
    """Collect configuration errors for a list of root subjects."""

    def __init__(self, subjects: Iterable[Subject], prefixes: Optional[Dict[str, str]] = None):
        self.subjects = list(subjects)
        self.prefixes = dict(prefixes or {})
        self.errors: List[str] = []
        self._undefined_prefixes: List[str] = []
        self._num_subject_name: Counter = Counter()
        self._num_variable: Counter = Counter()

    @property
    def error(self) -> bool:
        return bool(self.errors)

    @property
    def error_message(self) -> str:
        return "\n".join(self.errors)

    def validate(self) -> List[str]:
        """Run every check and return the collected error messages."""
        self.errors = []
        self._undefined_prefixes = []
        self._num_subject_name = Counter()
        self._num_variable = Counter()

        for subject in self.subjects:
            self._num_subject_name[subject.name] += 1
            self._validate_subject(subject)

        self._validate_subject_names()
        self._validate_variables()

        if self.errors:
            logger.debug("Validation found %s errors", len(self.errors))
        return self.errors

    def raise_for_errors(self) -> None:
        """Raise :class:`InvalidConfigError` if validation found problems."""
        if self.error:
            raise InvalidConfigError(self.errors)

    def _validate_subject(self, subject: Subject) -> None:
        self._validate_resource_class(subject)
        self._validate_prefix(subject.value)
        for predicate in subject.predicates:
            self._validate_predicate(predicate)

    def _validate_resource_class(self, subject: Subject) -> None:
        if subject.blank_node:
            return
        if not subject.types:
            self._add_error(f"Subject ({subject.name}) has no rdf:type.")

    def _validate_predicate(self, predicate: Predicate) -> None:
        self._validate_prefix(predicate.uri)
        for obj in predicate.objects:
            if predicate.is_rdf_type:
                self._validate_prefix(obj.name)
            else:
                self._validate_object(obj)

    def _validate_object(self, obj) -> None:
        if isinstance(obj, BlankNode):
            self._validate_subject(obj.subject)
            return
        if isinstance(obj, SubjectRef):
            return

        self._num_variable[obj.name] += 1
        if isinstance(obj, URIObject):
            self._validate_prefix(obj.value)
        elif isinstance(obj, ValueList):
            for value in obj.values:
                if isinstance(value, URIObject):
                    self._validate_prefix(value.value)

    def _validate_prefix(self, uri) -> None:
        prefix = prefix_of(uri)
        if prefix is None:
            return
        if prefix in self.prefixes or prefix in self._undefined_prefixes:
            return

        self._undefined_prefixes.append(prefix)
        self._add_error(f"Prefix ({prefix}) used but not defined in prefix.yaml file.")

    def _validate_subject_names(self) -> None:
        for subject_name, count in self._num_subject_name.items():
            if count > 1:
                self._add_error(f"Duplicate subject name ({subject_name}) in model.yaml file.")

    def _validate_variables(self) -> None:
        for variable_name, count in self._num_variable.items():
            if count > 1:
                self._add_error(f"Duplicate variable ({variable_name}) in model.yaml file.")

    def _add_error(self, error_message: str) -> None:
        self.errors.append(error_message)
