"""
problem_details.problem - RFC 7807 payload types.

Both classes are plain ``dict`` subclasses so DRF's ``JSONRenderer`` and
Django's ``JsonResponse`` serialise them unchanged.  The subclass only
marks a payload as already converted, which stops the middleware from
converting it twice.
"""

from __future__ import annotations

from typing import Any


class ProblemDetails(dict):
    """``type``, ``title``, ``status``, ``detail``, ``instance`` plus extensions."""

    @property
    def status(self) -> int | None:
        return self.get("status")

    @property
    def extensions(self) -> dict[str, Any]:
        return {key: value for key, value in self.items() if key not in STANDARD_MEMBERS}


class ValidationProblemDetails(ProblemDetails):
    """Problem details carrying an ``errors`` member: ``{field: [message, ...]}``."""

    @property
    def errors(self) -> dict[str, list[str]]:
        return self.get("errors", {})


STANDARD_MEMBERS = frozenset({"type", "title", "status", "detail", "instance"})
