from django import forms
from django.contrib import admin, messages

from .models import Account, Author, Book, Hall, Loan, Profile, Role, Status, WrittenBy
from .services.accounts import delete_account
from .services.capacity import occupancy
from .services.errors import LibraryError
from .services.loans import LoanManager


class WrittenByInline(admin.TabularInline):
    model = WrittenBy
    extra = 1


@admin.register(Author)
class AuthorAdmin(admin.ModelAdmin):
    search_fields = ('name',)


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    list_display = ('title', 'isbn', 'quantity', 'rating', 'admission_date')
    search_fields = ('title', 'isbn')
    readonly_fields = ('admission_date',)
    inlines = (WrittenByInline,)


class HallAdminForm(forms.ModelForm):
    class Meta:
        model = Hall
        fields = ('library_name', 'name', 'total_capacity', 'specification')

    def clean_total_capacity(self):
        total = self.cleaned_data['total_capacity']
        if self.instance.pk is not None:
            taken = occupancy(self.instance.pk)
            if total < taken:
                raise forms.ValidationError(
                    f'В зале закреплено читателей: {taken}. '
                    'Вместимость не может быть меньше.'
                )
        return total


@admin.register(Hall)
class HallAdmin(admin.ModelAdmin):
    form = HallAdminForm
    list_display = ('library_name', 'name', 'total_capacity', 'taken_capacity')
    list_filter = ('library_name',)
    search_fields = ('name', 'library_name')
    readonly_fields = ('taken_capacity',)


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    # зал меняется только через API, где проверяется вместимость
    readonly_fields = ('hall',)


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    """
    Учётные записи.

    Создаются только через API или bootstrap_admin: там же создаётся
    анкета и хешируется пароль. Роль после создания не меняется.
    """

    list_display = ('login', 'role')
    list_filter = ('role',)
    search_fields = ('login', 'profile__full_name')
    exclude = ('password',)
    readonly_fields = ('role',)
    inlines = (ProfileInline,)

    def has_add_permission(self, request):
        return False

    def delete_model(self, request, obj):
        try:
            delete_account(obj.pk)
        except LibraryError as exc:
            self.message_user(request, exc.message, level=messages.ERROR)

    def delete_queryset(self, request, queryset):
        for account in queryset:
            self.delete_model(request, account)


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')


@admin.register(Status)
class StatusAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')


class LoanAdminForm(forms.ModelForm):
    class Meta:
        model = Loan
        fields = ('due_date',)

    def clean_due_date(self):
        due = self.cleaned_data['due_date']
        if due < self.instance.issuance_date:
            raise forms.ValidationError(
                'Срок возврата не может быть раньше даты выдачи'
            )
        return due


@admin.register(Loan)
class LoanAdmin(admin.ModelAdmin):
    """Выдачи: в админке меняется только срок, возврат делается действием."""

    form = LoanAdminForm
    list_display = ('book', 'account', 'issuance_date', 'due_date', 'status')
    list_filter = ('status',)
    search_fields = ('book__title', 'account__login')
    readonly_fields = ('book', 'account', 'issuance_date', 'status')
    actions = ('mark_returned',)

    def has_add_permission(self, request):
        return False

    @admin.action(description='Отметить возврат')
    def mark_returned(self, request, queryset):
        manager = LoanManager()
        returned = 0
        for loan in queryset:
            try:
                manager.mark_returned(loan.book_id, loan.account_id)
            except LibraryError as exc:
                self.message_user(
                    request, f'{loan}: {exc.message}', level=messages.ERROR
                )
            else:
                returned += 1
        if returned:
            self.message_user(request, f'Возвращено выдач: {returned}')
