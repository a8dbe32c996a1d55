"""
Модуль календарных операций в заданном часовом поясе.

Все даты, которые возвращает утилита, содержат информацию о часовом поясе.
Наивные значения на входе считаются локальным временем указанного пояса.
"""

from datetime import date as date_type, datetime, timedelta
from typing import List, Union

import pytz

DateInput = Union[str, date_type, datetime, None]


class DateUtility:
    """Календарные операции, привязанные к одному часовому поясу IANA."""

    def __init__(self, timezone: str):
        """
        Args:
            timezone: Имя часового пояса, например ``Europe/Moscow``

        Raises:
            ValueError: Если часовой пояс неизвестен
        """
        try:
            self.tz = pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Неизвестный часовой пояс: {timezone}")
        self.timezone = timezone

    def _localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return self.tz.localize(value)
        return value.astimezone(self.tz)

    def now(self) -> datetime:
        """Текущее время в часовом поясе."""
        return datetime.now(self.tz)

    def date(self, value: DateInput = None) -> datetime:
        """
        Приводит значение к дате с часовым поясом.

        Args:
            value: Строка ISO 8601, date, datetime или None (текущий момент)

        Returns:
            datetime: Дата в часовом поясе утилиты

        Raises:
            ValueError: Если строку не удалось разобрать
        """
        if value is None or value == "":
            return self.now()
        if isinstance(value, datetime):
            return self._localize(value)
        if isinstance(value, date_type):
            return self.tz.localize(datetime(value.year, value.month, value.day))
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            raise ValueError(f"Некорректная дата: {value}")
        return self._localize(parsed)

    def parse(self, value: DateInput, fmt: str) -> datetime:
        """
        Разбирает дату по формату strftime.

        Значения date и datetime не разбираются, а только локализуются.

        Raises:
            ValueError: Если значение пустое или не соответствует формату
        """
        if value is None or value == "":
            raise ValueError(f"Некорректная дата: {value!r}, ожидаемый формат: {fmt}")
        if isinstance(value, (datetime, date_type)):
            return self.date(value)
        try:
            parsed = datetime.strptime(str(value).strip(), fmt)
        except ValueError:
            raise ValueError(f"Некорректная дата: {value}, ожидаемый формат: {fmt}")
        return self.tz.localize(parsed)

    def format(self, value: datetime, fmt: str) -> str:
        """Форматирует дату в часовом поясе утилиты."""
        return self._localize(value).strftime(fmt)

    def add_days(self, value: datetime, days: int) -> datetime:
        """Сдвигает дату на ``days`` календарных дней, сохраняя локальное время."""
        local = self._localize(value).replace(tzinfo=None)
        return self.tz.localize(local + timedelta(days=days))

    def sub_days(self, value: datetime, days: int) -> datetime:
        return self.add_days(value, -days)

    def is_before(self, value: datetime, other: datetime) -> bool:
        return self._localize(value) < self._localize(other)


def valid_timezones() -> List[str]:
    """Список всех известных часовых поясов IANA."""
    return list(pytz.all_timezones)
