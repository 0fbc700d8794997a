from datetime import date

from django.core.management.base import BaseCommand, CommandError

from librarian.services.clock import FixedClock
from librarian.services.loans import LoanManager


class Command(BaseCommand):
    """
    Помечает просроченные выдачи.

    То же, что делает любое чтение выдач через API, но по запросу
    (например, перед выгрузкой отчёта прямо из БД).
    """

    help = "Переводит выдачи с истёкшим сроком в статус «Задержана»."

    def add_arguments(self, parser) -> None:
        """Описать CLI-аргументы команды."""
        parser.add_argument(
            "--today",
            type=str,
            default=None,
            help="Дата сравнения в формате YYYY-MM-DD (по умолчанию сегодня, UTC)",
        )

    def handle(self, *args, **opts) -> None:
        """Выполнить пометку просрочек."""
        clock = None
        if opts["today"]:
            try:
                clock = FixedClock(date.fromisoformat(opts["today"]))
            except ValueError as exc:
                raise CommandError(f"Некорректная дата: {opts['today']}") from exc

        swept = LoanManager(clock).sweep_overdue()
        self.stdout.write(
            self.style.SUCCESS(f"Помечено просроченных выдач: {swept}.")
        )
