from django.apps import AppConfig


class LibrarianConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "librarian"
    verbose_name = "Библиотека"
