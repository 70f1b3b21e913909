from django.apps import AppConfig


class DjangoHuntingConfig(AppConfig):
    name = "django_hunting"
    verbose_name = "Hunting Ground"
    default_auto_field = "django.db.models.BigAutoField"
