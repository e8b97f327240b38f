"""
problem_details.mapping - Rule primitives of the exception classifier.

A rule table is an ordered sequence of ``StatusCodeMapper`` objects plus an
ordered sequence of ``RethrowRule`` objects.  Both are owned by
``ProblemDetailsOptions``; this module only defines the individual rules
and how a single rule evaluates an exception.

Rule contract
-------------
* ``StatusCodeMapper`` applies when the exception is an instance of the
  bound type (subclasses included) **and** its predicate returns true.
* An applying rule always reports ``matched=True``, even when its mapping
  function produced no status code.
* A mapping function that raises is contained here: the failure is logged
  and the rule reports ``matched=False`` as if it did not exist.
* Predicates are **not** contained.  A raising predicate propagates to
  the caller.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Callable, NamedTuple, Optional, Union

from .exceptions import ProblemDetailsConfigurationError

logger = logging.getLogger(__name__)

StatusCode = Union[int, HTTPStatus]
Predicate = Callable[[Any, BaseException], bool]
StatusMapping = Callable[[Any, BaseException], Optional[StatusCode]]


class MappingResult(NamedTuple):
    """Outcome of classifying one exception against a rule table."""

    matched: bool
    status_code: int | None = None


NOT_MATCHED = MappingResult(False, None)


def always_true(request: Any, exc: BaseException) -> bool:
    return True


def ensure_exception_type(exception_type: Any, base: type[BaseException] = Exception) -> type[BaseException]:
    """Validate that ``exception_type`` is a class deriving from ``base``."""
    if exception_type is None:
        raise ProblemDetailsConfigurationError("An exception type is required.")
    if not isinstance(exception_type, type) or not issubclass(exception_type, base):
        raise ProblemDetailsConfigurationError(
            f"{exception_type!r} is not a {base.__name__} subclass."
        )
    return exception_type


def ensure_callable(value: Any, name: str) -> Callable[..., Any]:
    if value is None:
        raise ProblemDetailsConfigurationError(f"A {name} is required.")
    if not callable(value):
        raise ProblemDetailsConfigurationError(f"The {name} must be callable, got {value!r}.")
    return value


def normalize_status_code(status_code: Any) -> int | None:
    """Coerce ``HTTPStatus`` members and ints to a plain ``int``."""
    if status_code is None:
        return None
    return int(status_code)


class StatusCodeMapper:
    """
    One immutable ``(type, predicate, mapping)`` classification rule.

    Instances are created by ``ProblemDetailsOptions.map`` at configuration
    time and are never modified afterwards.
    """

    __slots__ = ("_exception_type", "_predicate", "_mapping")

    def __init__(
        self,
        exception_type: type[Exception],
        predicate: Predicate,
        mapping: StatusMapping,
    ) -> None:
        object.__setattr__(self, "_exception_type", ensure_exception_type(exception_type))
        object.__setattr__(self, "_predicate", ensure_callable(predicate, "predicate"))
        object.__setattr__(self, "_mapping", ensure_callable(mapping, "mapping function"))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable.")

    def __repr__(self) -> str:
        return f"<StatusCodeMapper {self._exception_type.__name__}>"

    @property
    def exception_type(self) -> type[Exception]:
        return self._exception_type

    @property
    def predicate(self) -> Predicate:
        return self._predicate

    @property
    def mapping(self) -> StatusMapping:
        return self._mapping

    def applies(self, request: Any, exc: BaseException) -> bool:
        return isinstance(exc, self._exception_type) and bool(self._predicate(request, exc))

    def try_map(self, request: Any, exc: BaseException) -> MappingResult:
        """
        Evaluate this rule against ``exc``.

        Returns ``NOT_MATCHED`` when the rule does not apply or when its
        mapping function raised.
        """
        if not self.applies(request, exc):
            return NOT_MATCHED

        try:
            status_code = normalize_status_code(self._mapping(request, exc))
        except Exception:
            logger.warning(
                "Status code mapping for %s raised while classifying %s; rule skipped.",
                self._exception_type.__name__,
                type(exc).__name__,
                exc_info=True,
            )
            return NOT_MATCHED

        return MappingResult(True, status_code)


class RethrowRule:
    """
    Decides whether an exception must propagate unconverted.

    The type check is performed before the user predicate runs, so the
    predicate only ever receives instances of ``exception_type``.
    """

    __slots__ = ("_exception_type", "_predicate")

    def __init__(self, exception_type: type[BaseException], predicate: Predicate | None = None) -> None:
        object.__setattr__(self, "_exception_type", ensure_exception_type(exception_type, BaseException))
        object.__setattr__(
            self,
            "_predicate",
            always_true if predicate is None else ensure_callable(predicate, "predicate"),
        )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable.")

    def __repr__(self) -> str:
        return f"<RethrowRule {self._exception_type.__name__}>"

    @property
    def exception_type(self) -> type[BaseException]:
        return self._exception_type

    def __call__(self, request: Any, exc: BaseException) -> bool:
        return isinstance(exc, self._exception_type) and bool(self._predicate(request, exc))
