"""
Модуль кодирования даты в путь и обратно.

Структура каталогов определяет, какие компоненты даты лежат во вложенных
каталогах (год, месяц, день). В имени файла остается ровно та часть даты,
которая не выражена каталогами:

    none   YYYY-M-D[-HHmm]-...       в имени файла
    year   YYYY/M-D[-HHmm]-...
    month  YYYY/MM/D[-HHmm]-...
    day    YYYY/MM/DD/[HHmm]-...
"""

import logging
import os
import re
from datetime import datetime, timezone
from pathlib import PurePath
from typing import List, Optional

from .constants import DATE_FORMAT_DAY, DATE_FORMAT_MONTH_DAY, DATE_FORMAT_YEAR_MONTH_DAY
from .dates import DateUtility
from .errors import ArgumentError
from .structure import FilesystemStructure

FORMAT_YEAR_MONTH_DAY_TIME = 'YYYY-M-D-HHmm'
FORMAT_MONTH_DAY_TIME = 'M-D-HHmm'
FORMAT_DAY_TIME = 'D-HHmm'
FORMAT_TIME = 'HHmm'

_EDGE_NON_ALNUM = re.compile(r'^[\W_]+|[\W_]+$')
_SEPARATORS = re.compile(r'[-_]')
_YEAR = re.compile(r'^[0-9]{4}$')
_ONE_OR_TWO_DIGITS = re.compile(r'^[0-9]{1,2}$')


def _to_int(token: Optional[str]) -> Optional[int]:
    if token is None or not token.isdigit() or not token.isascii():
        return None
    return int(token)


def _parse_time(token: str, exact: bool = False) -> Optional[tuple]:
    """Разбирает HHmm из первых четырех символов токена."""
    if len(token) < 4 or (exact and len(token) != 4):
        return None
    hour = _to_int(token[:2])
    minute = _to_int(token[2:4])
    if hour is None or minute is None:
        return None
    return hour, minute


def parse_date_from_string(
    date_str: str,
    fmt: str,
    should_parse_time: bool,
    year: Optional[int] = None,
    month: Optional[int] = None,
    day: Optional[int] = None,
) -> Optional[datetime]:
    """
    Разбирает дату из основы имени файла.

    Недостающие компоненты берутся из аргументов ``year``, ``month``, ``day``
    (месяц 1-12), которые получены из каталогов. Время без
    ``should_parse_time`` считается 00:00.

    Args:
        date_str: Имя файла без расширения
        fmt: Один из форматов FORMAT_*
        should_parse_time: Требовать ли токен HHmm
        year: Год из каталога
        month: Месяц из каталога
        day: День из каталога

    Returns:
        datetime или None: Дата в UTC или None, если разобрать не удалось
    """
    if not date_str:
        return None

    cleaned = _EDGE_NON_ALNUM.sub('', date_str)
    parts = _SEPARATORS.split(cleaned)
    hour, minute = 0, 0
    time_token: Optional[str] = None

    if fmt == FORMAT_YEAR_MONTH_DAY_TIME:
        if len(parts) < (4 if should_parse_time else 3):
            return None
        if not _YEAR.match(parts[0]):
            return None
        year, month, day = _to_int(parts[0]), _to_int(parts[1]), _to_int(parts[2])
        if should_parse_time:
            time_token = parts[3]
    elif fmt == FORMAT_MONTH_DAY_TIME:
        if year is None:
            return None
        if len(parts) < (3 if should_parse_time else 2):
            return None
        month, day = _to_int(parts[0]), _to_int(parts[1])
        if should_parse_time:
            time_token = parts[2]
    elif fmt == FORMAT_DAY_TIME:
        if year is None or month is None:
            return None
        if len(parts) < (2 if should_parse_time else 1):
            return None
        day = _to_int(parts[0])
        if should_parse_time:
            time_token = parts[1]
    elif fmt == FORMAT_TIME:
        if year is None or month is None or day is None:
            return None
        if should_parse_time:
            parsed_time = _parse_time(parts[0], exact=True)
            if parsed_time is None:
                return None
            hour, minute = parsed_time
    else:
        return None

    if time_token is not None:
        parsed_time = _parse_time(time_token)
        if parsed_time is None:
            return None
        hour, minute = parsed_time

    if year is None or month is None or day is None:
        return None
    if not (1 <= month <= 12 and 1 <= day <= 31 and 0 <= hour <= 23 and 0 <= minute <= 59):
        return None

    # Несуществующие даты (30 февраля) не нормализуются, а отбрасываются
    try:
        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    except ValueError:
        return None


def _directory_parts(relative_path: str, filename: str) -> List[str]:
    """Компоненты каталогов относительного пути без имени файла."""
    parts = [part for part in PurePath(relative_path).parts if part not in ('', '.', os.sep)]
    if parts and parts[-1] == filename:
        parts = parts[:-1]
    return parts


def parse_date_from_file_path(
    relative_path: str,
    filename: str,
    structure,
    should_parse_time: bool,
    logger: Optional[logging.Logger] = None,
) -> Optional[datetime]:
    """
    Восстанавливает дату файла по относительному пути и имени.

    Args:
        relative_path: Путь относительно входного каталога (имя файла в конце
            допускается и отбрасывается)
        filename: Имя файла с расширением
        structure: Структура входного каталога
        should_parse_time: Разбирать ли HHmm из имени файла
        logger: Логгер для предупреждений

    Returns:
        datetime или None: Дата в UTC или None, если путь не соответствует структуре

    Raises:
        ArgumentError: Если структура неизвестна
    """
    logger = logger or logging.getLogger('file_cabinet')
    try:
        structure = FilesystemStructure.parse(structure)
    except ArgumentError:
        logger.error(f'Неизвестная структура входного каталога "{structure}" в конфигурации')
        raise

    stem = os.path.splitext(filename)[0]
    parts = _directory_parts(relative_path, filename)

    if structure == FilesystemStructure.NONE:
        return parse_date_from_string(stem, FORMAT_YEAR_MONTH_DAY_TIME, should_parse_time)

    if len(parts) < structure.depth:
        logger.warning(f"Путь {relative_path} не соответствует структуре '{structure.value}'")
        return None

    if not _YEAR.match(parts[0]):
        logger.warning(f"Некорректный год в пути: {parts[0]}")
        return None
    year = int(parts[0])

    if structure == FilesystemStructure.YEAR:
        return parse_date_from_string(stem, FORMAT_MONTH_DAY_TIME, should_parse_time, year)

    month = int(parts[1]) if _ONE_OR_TWO_DIGITS.match(parts[1]) else None
    if month is None or not 1 <= month <= 12:
        logger.warning(f"Некорректный год/месяц в пути: {parts[0]}/{parts[1]}")
        return None

    if structure == FilesystemStructure.MONTH:
        return parse_date_from_string(stem, FORMAT_DAY_TIME, should_parse_time, year, month)

    day = int(parts[2]) if _ONE_OR_TWO_DIGITS.match(parts[2]) else None
    if day is None or not 1 <= day <= 31:
        logger.warning(f"Некорректный год/месяц/день в пути: {parts[0]}/{parts[1]}/{parts[2]}")
        return None

    return parse_date_from_string(stem, FORMAT_TIME, should_parse_time, year, month, day)


def format_date(date: datetime, structure, dates: DateUtility) -> str:
    """
    Кодирует в строку ту часть даты, которая не выражена каталогами.

    Args:
        date: Дата
        structure: Структура выходного каталога
        dates: Календарная утилита (определяет часовой пояс)

    Returns:
        str: ``YYYY-MM-DD``, ``MM-DD`` или ``DD``

    Raises:
        ArgumentError: Если структура не задана или равна ``day``
    """
    if not structure:
        raise ArgumentError('--output-structure', "Невозможно построить имя файла: структура выходного каталога не задана")

    structure = FilesystemStructure.parse(structure, '--output-structure')
    if structure == FilesystemStructure.NONE:
        return dates.format(date, DATE_FORMAT_YEAR_MONTH_DAY)
    if structure == FilesystemStructure.YEAR:
        return dates.format(date, DATE_FORMAT_MONTH_DAY)
    if structure == FilesystemStructure.MONTH:
        return dates.format(date, DATE_FORMAT_DAY)
    raise ArgumentError('--output-filename-options', 'Нельзя использовать дату в имени файла при структуре "day"')
