from django.apps import AppConfig


class ProblemDetailsConfig(AppConfig):
    name = "problem_details"
    verbose_name = "Problem Details"

    def ready(self):
        # Build and seal the options now so a broken CONFIGURE fails at startup.
        from .settings import get_options

        get_options()
