"""
Модуль диапазона дат для отбора файлов.

Диапазон полуоткрытый: начало включается, конец нет.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .constants import DATE_FORMAT_YEAR_MONTH_DAY, DEFAULT_DATE_RANGE_DAYS
from .dates import DateInput, DateUtility
from .errors import ArgumentError


@dataclass(frozen=True)
class DateRange:
    """Диапазон дат [start, end)."""
    start: Optional[datetime]
    end: Optional[datetime]


def calculate_date_range(timezone: str, start: DateInput = None, end: DateInput = None) -> DateRange:
    """
    Вычисляет диапазон дат для обработки.

    По умолчанию конец диапазона - текущий момент в часовом поясе, начало -
    за 31 день до конца. Каждая явно заданная граница заменяет свое значение
    по умолчанию независимо от другой.

    Args:
        timezone: Часовой пояс IANA
        start: Начало диапазона (YYYY-MM-DD, date или datetime)
        end: Конец диапазона (YYYY-MM-DD, date или datetime)

    Returns:
        DateRange: Диапазон дат

    Raises:
        ArgumentError: Если граница некорректна или конец раньше начала
    """
    dates = DateUtility(timezone)

    range_end = dates.now()
    if end:
        try:
            range_end = dates.parse(end, DATE_FORMAT_YEAR_MONTH_DAY)
        except ValueError as e:
            raise ArgumentError('--end', str(e))

    range_start = dates.sub_days(range_end, DEFAULT_DATE_RANGE_DAYS)
    if start:
        try:
            range_start = dates.parse(start, DATE_FORMAT_YEAR_MONTH_DAY)
        except ValueError as e:
            raise ArgumentError('--start', str(e))

    if dates.is_before(range_end, range_start):
        raise ArgumentError(
            '--start',
            f"Начальная дата ({dates.format(range_start, DATE_FORMAT_YEAR_MONTH_DAY)}) не может быть позже "
            f"конечной ({dates.format(range_end, DATE_FORMAT_YEAR_MONTH_DAY)})."
        )

    return DateRange(start=range_start, end=range_end)


def is_date_in_range(date: datetime, date_range: Optional[DateRange] = None) -> bool:
    """
    Проверяет попадание даты в диапазон.

    Отсутствующий диапазон принимает любые даты. Граница, не являющаяся
    datetime, игнорируется.
    """
    if date_range is None:
        return True

    start = date_range.start if isinstance(date_range.start, datetime) else None
    end = date_range.end if isinstance(date_range.end, datetime) else None

    if start is not None and date < start:
        return False
    if end is not None and date >= end:
        return False
    return True


def invalid_bounds(date_range: Optional[DateRange]) -> list:
    """Имена границ, которые заданы, но не являются датами."""
    if date_range is None:
        return []
    invalid = []
    if date_range.start is not None and not isinstance(date_range.start, datetime):
        invalid.append('start')
    if date_range.end is not None and not isinstance(date_range.end, datetime):
        invalid.append('end')
    return invalid


def describe_date_range(date_range: Optional[DateRange]) -> str:
    """Описание диапазона для логов."""
    if date_range is None:
        return "все даты"
    start = date_range.start.isoformat() if isinstance(date_range.start, datetime) else "начала"
    end = date_range.end.isoformat() if isinstance(date_range.end, datetime) else "конца"
    return f"с {start} до {end}"
