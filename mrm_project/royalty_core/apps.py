from django.apps import AppConfig


class RoyaltyCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "royalty_core"

    # ensure receivers are registered
    def ready(self):
        import royalty_core.signals  # noqa: F401
