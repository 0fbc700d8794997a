import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Author",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(db_index=True, max_length=100)),
            ],
        ),
        migrations.CreateModel(
            name="Book",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(db_index=True, max_length=100)),
                ("isbn", models.CharField(max_length=13, unique=True)),
                ("publish_date", models.DateField(blank=True, null=True)),
                ("admission_date", models.DateTimeField(default=django.utils.timezone.now, editable=False, help_text="Дата поступления, задаётся один раз при создании")),
                ("quantity", models.PositiveIntegerField(default=1, help_text="Количество физических экземпляров")),
                ("rating", models.FloatField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
            ],
        ),
        migrations.CreateModel(
            name="Hall",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("library_name", models.CharField(max_length=100)),
                ("name", models.CharField(max_length=30)),
                ("total_capacity", models.PositiveIntegerField(default=1, help_text="Максимум читателей, закреплённых за залом")),
                ("taken_capacity", models.PositiveIntegerField(default=0, editable=False, help_text="Число закреплённых читателей (вычисляется)")),
                ("specification", models.TextField(blank=True, default="")),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("taken_capacity__lte", models.F("total_capacity"))), name="hall_taken_within_total"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Role",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=16, unique=True)),
            ],
        ),
        migrations.CreateModel(
            name="Status",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=16, unique=True)),
            ],
            options={
                "verbose_name_plural": "statuses",
            },
        ),
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("login", models.CharField(max_length=48, unique=True)),
                ("password", models.CharField(max_length=255)),
                ("role", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="accounts", to="librarian.role")),
            ],
        ),
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=65)),
                ("phone", models.CharField(max_length=20)),
                ("ticket_number", models.CharField(blank=True, default="", max_length=20)),
                ("birthday", models.DateField(blank=True, null=True)),
                ("education", models.CharField(blank=True, default="", max_length=127)),
                ("account", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="profile", to="librarian.account")),
                ("hall", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="profiles", to="librarian.hall")),
            ],
        ),
        migrations.CreateModel(
            name="WrittenBy",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("author", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="written_by", to="librarian.author")),
                ("book", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="written_by", to="librarian.book")),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("book", "author"), name="uniq_book_author"),
                ],
            },
        ),
        migrations.AddField(
            model_name="book",
            name="authors",
            field=models.ManyToManyField(related_name="books", through="librarian.WrittenBy", to="librarian.author"),
        ),
        migrations.CreateModel(
            name="Loan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("issuance_date", models.DateField()),
                ("due_date", models.DateField(db_index=True)),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="loans", to="librarian.account")),
                ("book", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="loans", to="librarian.book")),
                ("status", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="loans", to="librarian.status")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["status", "due_date"], name="loan_status_due_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("book", "account"), name="uniq_loan_book_account"),
                ],
            },
        ),
    ]
