"""
problem_details.settings - Project-level configuration.

Settings are read from the ``PROBLEM_DETAILS`` dict in the Django settings
module, the same way DRF reads ``REST_FRAMEWORK``::

    PROBLEM_DETAILS = {
        "CONFIGURE": "myproject.problems.configure",
        "FACTORY_CLASS": "problem_details.factory.ProblemDetailsFactory",
        "CONTENT_TYPE": "application/problem+json",
        "TRACE_ID_HEADER": "HTTP_X_REQUEST_ID",
    }

``CONFIGURE`` is a dotted path (or the callable itself) receiving the
unsealed ``ProblemDetailsOptions``.  The options are sealed as soon as it
returns.

Accessing settings and options::

    from problem_details.settings import get_factory, get_options, get_settings

    get_settings().CONTENT_TYPE
    get_options().try_map_status_code(request, exc)
"""

from __future__ import annotations

import functools
import logging

from django.conf import settings
from django.core.signals import setting_changed
from rest_framework.settings import APISettings

from .options import ProblemDetailsOptions, build_options

logger = logging.getLogger(__name__)

SETTINGS_NAME = "PROBLEM_DETAILS"

DEFAULTS = {
    "CONFIGURE": None,
    "FACTORY_CLASS": "problem_details.factory.ProblemDetailsFactory",
    "CONTENT_TYPE": "application/problem+json",
    "TRACE_ID_HEADER": "HTTP_X_REQUEST_ID",
}

IMPORT_STRINGS = (
    "CONFIGURE",
    "FACTORY_CLASS",
)

problem_details_settings = APISettings(getattr(settings, SETTINGS_NAME, None), DEFAULTS, IMPORT_STRINGS)


def get_settings() -> APISettings:
    return problem_details_settings


@functools.lru_cache(maxsize=None)
def get_options() -> ProblemDetailsOptions:
    """Build, seal and cache the process-wide options."""
    options = build_options(get_settings().CONFIGURE)
    logger.debug("Problem details configured: %r", options)
    return options


@functools.lru_cache(maxsize=None)
def get_factory():
    """Return the cached ``FACTORY_CLASS`` instance bound to ``get_options()``."""
    factory_class = get_settings().FACTORY_CLASS
    return factory_class(get_options())


def reload_problem_details_settings(*args, **kwargs) -> None:
    global problem_details_settings

    if kwargs["setting"] != SETTINGS_NAME:
        return

    problem_details_settings = APISettings(kwargs["value"], DEFAULTS, IMPORT_STRINGS)
    get_options.cache_clear()
    get_factory.cache_clear()


setting_changed.connect(reload_problem_details_settings)
