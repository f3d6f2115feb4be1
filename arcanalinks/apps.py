from django.apps import AppConfig


class ArcanaLinksConfig(AppConfig):
    """Configuration for the arcanalinks Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'arcanalinks'
    verbose_name = 'Internal links'
