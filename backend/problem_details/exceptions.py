"""
problem_details.exceptions - Configuration-time error hierarchy.

Everything here is raised while the application is being configured
(settings import, ``AppConfig.ready``, a ``CONFIGURE`` callable).  None of
these exceptions is ever raised while a request is being handled: rule
failures at request time are contained by the mapping engine instead.
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured


class ProblemDetailsConfigurationError(ImproperlyConfigured):
    """
    A builder call received an invalid or missing argument.

    Raised immediately by ``ProblemDetailsOptions.map`` and friends so a
    broken rule table never reaches request handling.
    """

    def __init__(self, message: str = "Invalid problem details configuration.") -> None:
        self.message = message
        super().__init__(self.message)


class OptionsSealedError(ProblemDetailsConfigurationError):
    """
    A write was attempted on options that have already been sealed.

    Options are sealed once configuration is complete and are shared
    read-only by every request thread from then on.
    """

    def __init__(self, message: str = "Problem details options are sealed and can no longer be modified.") -> None:
        super().__init__(message)
