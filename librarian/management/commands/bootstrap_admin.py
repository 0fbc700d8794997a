from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from librarian.models import Account, Role
from librarian.services.accounts import AccountDraft, create_account
from librarian.services.errors import LibraryError


class Command(BaseCommand):
    """Создаёт первого администратора, если в системе нет ни одного."""

    help = (
        "Создаёт учётную запись администратора (логин и пароль из "
        "настроек LIBRARY или аргументов), если администраторов нет."
    )

    def add_arguments(self, parser) -> None:
        """Описать CLI-аргументы команды."""
        parser.add_argument("--login", type=str, default=None)
        parser.add_argument("--password", type=str, default=None)
        parser.add_argument(
            "--full-name",
            type=str,
            default="Администратор",
        )
        parser.add_argument("--phone", type=str, default="+70000000000")

    def handle(self, *args, **opts) -> None:
        """Создать администратора."""
        if Account.objects.filter(role_id=Role.ADMIN).exists():
            self.stdout.write(
                self.style.WARNING("Администратор уже есть, ничего не сделано.")
            )
            return

        login = opts["login"] or settings.LIBRARY["ADMIN_LOGIN"]
        password = opts["password"] or settings.LIBRARY["ADMIN_PASSWORD"]
        if not password:
            raise CommandError(
                "Пароль не задан: передайте --password или "
                "LIBRARY_ADMIN_PASSWORD"
            )

        try:
            account = create_account(
                AccountDraft(
                    login=login,
                    password=password,
                    role_id=Role.ADMIN,
                    full_name=opts["full_name"],
                    phone=opts["phone"],
                )
            )
        except LibraryError as exc:
            raise CommandError(exc.message) from exc

        self.stdout.write(
            self.style.SUCCESS(f"Создан администратор «{account.login}».")
        )
