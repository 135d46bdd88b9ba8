"""Frontend app configuration."""

from django.apps import AppConfig


class FrontendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "src.frontend"
    verbose_name = "Compression page"
