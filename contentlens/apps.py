from django.apps import AppConfig


class ContentLensConfig(AppConfig):
    """Configuration for the contentlens Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'contentlens'
