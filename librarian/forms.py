"""Проверка тел JSON-запросов. Формы отдают уже типизированные значения."""

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator

phone_validator = RegexValidator(
    regex=r"^\+?[\d\s\-()]{5,20}$",
    message="Некорректный номер телефона",
)


class IdListField(forms.Field):
    """Список целых id (например, author_ids)."""

    default_error_messages = {
        "invalid": "Ожидается список целых чисел",
    }

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValidationError(self.error_messages["invalid"], code="invalid")
        result = []
        for item in value:
            if isinstance(item, bool):
                raise ValidationError(self.error_messages["invalid"], code="invalid")
            try:
                result.append(int(item))
            except (TypeError, ValueError):
                raise ValidationError(
                    self.error_messages["invalid"], code="invalid"
                ) from None
        return result


class AuthorForm(forms.Form):
    name = forms.CharField(max_length=100)


class BookForm(forms.Form):
    title = forms.CharField(max_length=100)
    isbn = forms.CharField(max_length=13)
    publish_date = forms.DateField(required=False)
    quantity = forms.IntegerField(min_value=0, required=False)
    rating = forms.FloatField(min_value=0, required=False)
    author_ids = IdListField(required=False)

    def clean_quantity(self):
        value = self.cleaned_data["quantity"]
        return 1 if value is None else value

    def clean_rating(self):
        value = self.cleaned_data["rating"]
        return 0.0 if value is None else value


class HallForm(forms.Form):
    library_name = forms.CharField(max_length=100)
    name = forms.CharField(max_length=30)
    total_capacity = forms.IntegerField(min_value=0)
    specification = forms.CharField(required=False)


class AccountCreateForm(forms.Form):
    login = forms.CharField(max_length=48)
    password = forms.CharField(strip=False)
    role_id = forms.IntegerField()
    full_name = forms.CharField(max_length=65)
    phone = forms.CharField(max_length=20, validators=[phone_validator])
    ticket_number = forms.CharField(max_length=20, required=False)
    birthday = forms.DateField(required=False)
    education = forms.CharField(max_length=127, required=False)
    hall_id = forms.IntegerField(required=False)


class AccountUpdateForm(forms.Form):
    login = forms.CharField(max_length=48, required=False, empty_value=None)
    password = forms.CharField(strip=False, required=False, empty_value=None)
    full_name = forms.CharField(max_length=65, required=False, empty_value=None)
    phone = forms.CharField(
        max_length=20,
        required=False,
        empty_value=None,
        validators=[phone_validator],
    )
    ticket_number = forms.CharField(
        max_length=20, required=False, empty_value=None
    )
    birthday = forms.DateField(required=False)
    education = forms.CharField(max_length=127, required=False, empty_value=None)
    hall_id = forms.IntegerField(required=False)


class LoanCreateForm(forms.Form):
    book_id = forms.IntegerField()
    account_id = forms.IntegerField()
    issuance_date = forms.DateField(required=False)
    due_date = forms.DateField()
    status_id = forms.IntegerField(required=False)

    def clean(self):
        cleaned = super().clean()
        issued = cleaned.get("issuance_date")
        due = cleaned.get("due_date")
        if issued and due and due < issued:
            raise ValidationError(
                "Срок возврата не может быть раньше даты выдачи",
                code="invalid_loan_dates",
            )
        return cleaned


class LoanUpdateForm(forms.Form):
    due_date = forms.DateField(required=False)
    status_id = forms.IntegerField(required=False)
