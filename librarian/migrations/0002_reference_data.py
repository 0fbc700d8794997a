from django.db import migrations

ROLES = [
    (1, "Админ"),
    (2, "Библиотекарь"),
    (3, "Читатель"),
]

STATUSES = [
    (1, "Выдана"),
    (2, "Возвращена"),
    (3, "Задержана"),
]


def load_reference_data(apps, schema_editor):
    Role = apps.get_model("librarian", "Role")
    Status = apps.get_model("librarian", "Status")
    for pk, name in ROLES:
        Role.objects.update_or_create(pk=pk, defaults={"name": name})
    for pk, name in STATUSES:
        Status.objects.update_or_create(pk=pk, defaults={"name": name})


def unload_reference_data(apps, schema_editor):
    Role = apps.get_model("librarian", "Role")
    Status = apps.get_model("librarian", "Status")
    Role.objects.filter(pk__in=[pk for pk, _ in ROLES]).delete()
    Status.objects.filter(pk__in=[pk for pk, _ in STATUSES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("librarian", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(load_reference_data, unload_reference_data),
    ]
