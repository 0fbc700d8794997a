from django.contrib.auth.hashers import check_password, make_password
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Author(models.Model):
    """Автор книги."""

    name = models.CharField(max_length=100, db_index=True)

    def __str__(self) -> str:
        return self.name


class Book(models.Model):
    """Книга каталога (связана с авторами через WrittenBy)."""

    title = models.CharField(max_length=100, db_index=True)
    isbn = models.CharField(max_length=13, unique=True)
    publish_date = models.DateField(null=True, blank=True)
    admission_date = models.DateTimeField(
        default=timezone.now,
        editable=False,
        help_text="Дата поступления, задаётся один раз при создании",
    )
    quantity = models.PositiveIntegerField(
        default=1,
        help_text="Количество физических экземпляров",
    )
    rating = models.FloatField(
        default=0,
        validators=[MinValueValidator(0)],
    )
    authors = models.ManyToManyField(
        Author,
        through="WrittenBy",
        related_name="books",
    )

    def __str__(self) -> str:
        return f"{self.title} ({self.isbn})"


class WrittenBy(models.Model):
    """Связь книги и автора."""

    book = models.ForeignKey(
        Book,
        on_delete=models.CASCADE,
        related_name="written_by",
    )
    author = models.ForeignKey(
        Author,
        on_delete=models.CASCADE,
        related_name="written_by",
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["book", "author"],
                name="uniq_book_author",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.book} — {self.author}"


class Hall(models.Model):
    """Читальный зал с ограниченной вместимостью."""

    library_name = models.CharField(max_length=100)
    name = models.CharField(max_length=30)
    total_capacity = models.PositiveIntegerField(
        default=1,
        help_text="Максимум читателей, закреплённых за залом",
    )
    taken_capacity = models.PositiveIntegerField(
        default=0,
        editable=False,
        help_text="Число закреплённых читателей (вычисляется)",
    )
    specification = models.TextField(blank=True, default="")

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    taken_capacity__lte=models.F("total_capacity")
                ),
                name="hall_taken_within_total",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.library_name}: {self.name}"

    @property
    def free_capacity(self) -> int:
        return max(self.total_capacity - self.taken_capacity, 0)


class Role(models.Model):
    """Роль учётной записи. Коды строк фиксированы."""

    ADMIN = 1
    LIBRARIAN = 2
    READER = 3

    name = models.CharField(max_length=16, unique=True)

    def __str__(self) -> str:
        return self.name


class Account(models.Model):
    """Учётная запись сотрудника или читателя."""

    login = models.CharField(max_length=48, unique=True)
    password = models.CharField(max_length=255)
    role = models.ForeignKey(
        Role,
        on_delete=models.PROTECT,
        related_name="accounts",
    )

    def __str__(self) -> str:
        return self.login

    @property
    def is_admin(self) -> bool:
        return self.role_id == Role.ADMIN

    @property
    def is_reader(self) -> bool:
        return self.role_id == Role.READER

    def set_password(self, raw_password: str) -> None:
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)


class Profile(models.Model):
    """Анкета учётной записи (1:1). Поля читателя пусты у сотрудников."""

    account = models.OneToOneField(
        Account,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    full_name = models.CharField(max_length=65)
    phone = models.CharField(max_length=20)
    ticket_number = models.CharField(max_length=20, blank=True, default="")
    birthday = models.DateField(null=True, blank=True)
    education = models.CharField(max_length=127, blank=True, default="")
    hall = models.ForeignKey(
        Hall,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="profiles",
    )

    def __str__(self) -> str:
        return self.full_name


class Status(models.Model):
    """Статус выдачи. Коды строк используются бизнес-логикой."""

    ISSUED = 1
    RETURNED = 2
    OVERDUE = 3

    name = models.CharField(max_length=16, unique=True)

    class Meta:
        verbose_name_plural = "statuses"

    def __str__(self) -> str:
        return self.name


class Loan(models.Model):
    """Выдача книги читателю. Пара (книга, учётная запись) уникальна."""

    book = models.ForeignKey(
        Book,
        on_delete=models.CASCADE,
        related_name="loans",
    )
    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name="loans",
    )
    issuance_date = models.DateField()
    due_date = models.DateField(db_index=True)
    status = models.ForeignKey(
        Status,
        on_delete=models.PROTECT,
        related_name="loans",
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["book", "account"],
                name="uniq_loan_book_account",
            ),
        ]
        indexes = [
            models.Index(
                fields=["status", "due_date"],
                name="loan_status_due_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.book} → {self.account}: до {self.due_date}"
