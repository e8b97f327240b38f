"""
problem_details.options - The exception classifier and its rule tables.

``ProblemDetailsOptions`` is built once at startup, filled by the
project's ``CONFIGURE`` callable, then sealed and shared read-only by every
request.  It owns two ordered tables:

* **status code mappings**: first matching rule wins, evaluated in
  registration order.  Order, not specificity, decides precedence, so
  register specific exception types before their base classes.
* **rethrow rules**: first true rule wins.  Callers check
  ``should_rethrow`` before ``try_map_status_code``; a rethrown exception
  is never converted.

Predicates and mapping functions are called as ``fn(request, exc)``.
``request`` is the DRF ``Request`` inside DRF views and the Django
``HttpRequest`` everywhere else.  Before any rule runs, the status the
response currently carries is set on ``request.problem_status_code``: the
returned response's status for returned exceptions, 500 for raised ones.

Usage::

    from rest_framework import status

    def configure(options):
        options.map_status_code(OrderNotFound, status.HTTP_404_NOT_FOUND)
        options.map(
            PaymentDeclined,
            lambda request, exc: exc.code == "insufficient_funds",
            lambda request, exc: status.HTTP_402_PAYMENT_REQUIRED,
        )
        options.ignore(TimeoutError)
        options.map(
            FulfilmentDeferred,
            lambda request, exc: request.problem_status_code == 503,
            lambda request, exc: status.HTTP_504_GATEWAY_TIMEOUT,
        )
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from django.conf import settings

from .exceptions import OptionsSealedError, ProblemDetailsConfigurationError
from .mapping import (
    NOT_MATCHED,
    MappingResult,
    Predicate,
    RethrowRule,
    StatusCode,
    StatusCodeMapper,
    StatusMapping,
    always_true,
    ensure_callable,
    ensure_exception_type,
    normalize_status_code,
)

logger = logging.getLogger(__name__)

PROBLEM_LINK_TEMPLATE = "https://httpstatuscodes.io/{status_code}"


def _include_exception_details(request: Any, exc: BaseException) -> bool:
    return bool(settings.DEBUG)


def _log_unhandled_exception(request: Any, exc: BaseException, problem: dict) -> bool:
    status_code = problem.get("status")
    return status_code is None or status_code >= 500


def _create_problem_link_uri(status_code: int) -> str:
    return PROBLEM_LINK_TEMPLATE.format(status_code=status_code)


class ProblemDetailsOptions:
    """
    Builder and evaluator for exception to status code classification.

    Every builder method raises ``ProblemDetailsConfigurationError`` on a
    missing argument and ``OptionsSealedError`` once ``seal()`` has been
    called.
    """

    _SETTABLE = frozenset({
        "include_exception_details",
        "log_unhandled_exception",
        "create_problem_link_uri",
        "validation_problem_status_code",
        "exception_details_property_name",
        "trace_id_property_name",
    })

    def __init__(self) -> None:
        self._sealed = False
        self._status_code_mappings: list[StatusCodeMapper] | tuple[StatusCodeMapper, ...] = []
        self._rethrow_mappings: list[RethrowRule] | tuple[RethrowRule, ...] = []
        self._rethrow_all_installed = False

        self.include_exception_details: Callable[[Any, BaseException], bool] = _include_exception_details
        self.log_unhandled_exception: Callable[[Any, BaseException, dict], bool] = _log_unhandled_exception
        self.create_problem_link_uri: Callable[[int], str] = _create_problem_link_uri
        self.validation_problem_status_code: int = 400
        self.exception_details_property_name: str = "exceptionDetails"
        self.trace_id_property_name: str = "traceId"

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_sealed", False):
            raise OptionsSealedError()
        if name in self._SETTABLE and value is None:
            raise ProblemDetailsConfigurationError(f"Option '{name}' cannot be None.")
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return (
            f"<ProblemDetailsOptions mappings={len(self._status_code_mappings)} "
            f"rethrow={len(self._rethrow_mappings)} sealed={self._sealed}>"
        )

    # ── State ────────────────────────────────────────────────────────

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def status_code_mappings(self) -> tuple[StatusCodeMapper, ...]:
        return tuple(self._status_code_mappings)

    @property
    def rethrow_mappings(self) -> tuple[RethrowRule, ...]:
        return tuple(self._rethrow_mappings)

    def seal(self) -> ProblemDetailsOptions:
        """
        Freeze the rule tables.

        After sealing, both tables are tuples and any builder call or
        attribute assignment raises ``OptionsSealedError``.  Idempotent.
        """
        if self._sealed:
            return self
        self._status_code_mappings = tuple(self._status_code_mappings)
        self._rethrow_mappings = tuple(self._rethrow_mappings)
        self._sealed = True
        return self

    def _ensure_writable(self) -> None:
        if self._sealed:
            raise OptionsSealedError()

    # ── Builder API ──────────────────────────────────────────────────

    def map_status_code(self, exception_type: type[Exception], status_code: StatusCode) -> None:
        """Map every instance of ``exception_type`` to ``status_code``."""
        if status_code is None:
            raise ProblemDetailsConfigurationError("A status code is required.")
        fixed = normalize_status_code(status_code)
        self.map(exception_type, always_true, lambda request, exc: fixed)

    def map(
        self,
        exception_type: type[Exception],
        predicate: Predicate,
        mapping: StatusMapping,
    ) -> None:
        """
        Append a conditional rule.

        ``mapping`` may return ``None``: the rule still counts as matched,
        it just leaves the status code to the caller.
        """
        self._ensure_writable()
        self._status_code_mappings.append(StatusCodeMapper(exception_type, predicate, mapping))

    def ignore(self, exception_type: type[Exception]) -> None:
        """Never convert ``exception_type``; alias for ``rethrow``."""
        self.rethrow(exception_type)

    def rethrow(self, exception_type: type[Exception], predicate: Predicate | None = None) -> None:
        """Let instances of ``exception_type`` propagate when ``predicate`` holds."""
        self._ensure_writable()
        rule = RethrowRule(ensure_exception_type(exception_type), predicate)
        if self._rethrow_all_installed:
            logger.warning(
                "Rethrow rule for %s registered after rethrow_all() and will never be reached.",
                exception_type.__name__,
            )
        self._rethrow_mappings.append(rule)

    def rethrow_all(self) -> None:
        """
        Rethrow every exception.

        Discards all rethrow rules registered so far and installs a single
        rule that always matches.
        """
        self._ensure_writable()
        self._rethrow_mappings.clear()
        self._rethrow_mappings.append(RethrowRule(BaseException))
        self._rethrow_all_installed = True

    # ── Evaluation ───────────────────────────────────────────────────

    def try_map_status_code(self, request: Any, exc: BaseException | None) -> MappingResult:
        if exc is None:
            return NOT_MATCHED

        for mapper in self._status_code_mappings:
            result = mapper.try_map(request, exc)
            if result.matched:
                return result

        return NOT_MATCHED

    def should_rethrow(self, request: Any, exc: BaseException) -> bool:
        for rule in self._rethrow_mappings:
            if rule(request, exc):
                return True
        return False


def build_options(configure: Callable[[ProblemDetailsOptions], Any] | None = None) -> ProblemDetailsOptions:
    """Create options, apply ``configure`` and return them sealed."""
    options = ProblemDetailsOptions()
    if configure is not None:
        ensure_callable(configure, "CONFIGURE callable")(options)
    return options.seal()
