from django.apps import AppConfig


class HideSiteAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "HideSite"
    verbose_name = "Hide Site"
