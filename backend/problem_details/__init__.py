"""
RFC 7807 problem details for Django REST Framework.

Public surface::

    from problem_details import ProblemDetailsOptions, MappingResult

The exception handler and middleware are referenced from settings by
dotted path; see ``problem_details.exception_handler`` and
``problem_details.middleware``.
"""

from .exceptions import OptionsSealedError, ProblemDetailsConfigurationError
from .mapping import MappingResult, RethrowRule, StatusCodeMapper
from .options import ProblemDetailsOptions, build_options
from .problem import ProblemDetails, ValidationProblemDetails

__all__ = [
    "MappingResult",
    "OptionsSealedError",
    "ProblemDetails",
    "ProblemDetailsConfigurationError",
    "ProblemDetailsOptions",
    "RethrowRule",
    "StatusCodeMapper",
    "ValidationProblemDetails",
    "build_options",
]
