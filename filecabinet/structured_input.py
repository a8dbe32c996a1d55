"""
Модуль обработки структурированного входного каталога.

Перебирает файлы входного каталога, восстанавливает дату каждого файла по
его пути и имени, отбирает файлы по диапазону дат и передает подходящие
файлы в callback вызывающей стороны.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .constants import FEATURE_EXTENSIONS
from .date_path import parse_date_from_file_path
from .date_range import DateRange, calculate_date_range, describe_date_range, invalid_bounds, is_date_in_range
from .dates import DateInput
from .errors import ArgumentError
from .stats import WalkStats
from .storage import Storage
from .structure import FilenameOption, FilesystemStructure

FileCallback = Callable[[Path, datetime], None]


def get_file_pattern(features: List[str], extensions: Optional[List[str]], logger: logging.Logger) -> str:
    """
    Строит glob-шаблон для поиска файлов.

    Args:
        features: Включенные возможности
        extensions: Расширения без точки
        logger: Логгер

    Returns:
        str: ``**/*.ext``, ``**/*.{a,b}`` или ``**/*.*``

    Raises:
        ArgumentError: Если расширение начинается с точки
    """
    for extension in extensions or []:
        if extension.startswith('.'):
            raise ArgumentError('--extensions', f'Некорректное расширение "{extension}": расширения указываются без точки')

    if FEATURE_EXTENSIONS in features and extensions:
        if len(extensions) == 1:
            pattern = f"**/*.{extensions[0]}"
        else:
            pattern = f"**/*.{{{','.join(extensions)}}}"
        logger.debug(f"Применяется фильтр по расширениям: {','.join(extensions)}")
    else:
        pattern = "**/*.*"
        logger.debug(f"Фильтр по расширениям не применяется, шаблон: {pattern}")
    return pattern


def process_structured_file(
    file_path: Path,
    input_directory: Path,
    structure: FilesystemStructure,
    should_parse_time: bool,
    callback: FileCallback,
    pattern: str,
    date_range: Optional[DateRange],
    logger: logging.Logger,
    stats: Optional[WalkStats] = None,
) -> bool:
    """
    Обрабатывает один файл структурированного каталога.

    Returns:
        bool: True, если callback был вызван и завершился без ошибки
    """
    file_path = Path(file_path)
    input_directory = Path(input_directory)
    stats = stats or WalkStats()

    if file_path == input_directory or (not file_path.suffix and pattern.endswith('*.*')):
        return False

    relative_path = os.path.relpath(file_path, input_directory)
    filename = file_path.name

    parsed_date = parse_date_from_file_path(relative_path, filename, structure, should_parse_time, logger)

    if parsed_date is None:
        logger.warning(
            f'Не удалось определить дату файла {file_path} для структуры "{structure.value}" '
            f'(имя: "{file_path.stem}", путь: {Path(relative_path).parent.as_posix()})'
        )
        stats.record_unparsed()
        return False

    if not is_date_in_range(parsed_date, date_range):
        logger.debug(f"Файл {file_path} пропущен: дата {parsed_date.isoformat()} вне диапазона {describe_date_range(date_range)}")
        stats.record_out_of_range()
        return False

    logger.debug(f"Обработка файла {file_path} с датой {parsed_date.isoformat()}")
    try:
        callback(file_path, parsed_date)
    except Exception as e:
        logger.error(f"Ошибка при обработке файла {file_path}: {e}", exc_info=True)
        stats.record_failure(file_path, e)
        return False

    stats.record_processed()
    return True


def process_with_stats(
    input_structure,
    input_filename_options: Optional[List],
    extensions: Optional[List[str]],
    timezone: str,
    start: DateInput,
    end: DateInput,
    limit: Optional[int],
    features: List[str],
    logger: logging.Logger,
    input_directory,
    callback: FileCallback,
    concurrency: Optional[int] = None,
    storage: Optional[Storage] = None,
) -> WalkStats:
    """
    Обходит структурированный входной каталог.

    Args:
        input_structure: Структура каталога (none/year/month/day)
        input_filename_options: Опции имени файла; ``time`` включает разбор HHmm
        extensions: Расширения для фильтра
        timezone: Часовой пояс для диапазона дат
        start: Начало диапазона
        end: Конец диапазона
        limit: Максимальное количество файлов, взятых из каталога
        features: Включенные возможности
        logger: Логгер
        input_directory: Входной каталог
        callback: Вызывается как ``callback(path, date)`` для каждого отобранного файла
        concurrency: Количество одновременно обрабатываемых файлов
        storage: Объект операций с файловой системой

    Returns:
        WalkStats: Статистика обхода

    Raises:
        ArgumentError: Если конфигурация некорректна
    """
    structure = FilesystemStructure.parse(input_structure or FilesystemStructure.NONE)
    storage = storage or Storage(logger)
    input_directory = Path(input_directory)
    date_range = calculate_date_range(timezone, start, end)

    for bound in invalid_bounds(date_range):
        logger.warning(f"Некорректная граница диапазона дат ({bound}), граница игнорируется")

    options = FilenameOption.parse_list(input_filename_options, '--input-filename-options')
    should_parse_time = FilenameOption.TIME in options
    if should_parse_time:
        logger.debug("Разбор времени из имени файла включен опцией time")
    else:
        logger.debug("Разбор времени из имени файла выключен, время считается 00:00 UTC")

    pattern = get_file_pattern(features, extensions, logger)

    logger.info(f'Обработка структурированного каталога {input_directory} (структура "{structure.value}"), '
                f'диапазон дат: {describe_date_range(date_range)}')
    logger.debug(f"Шаблон поиска {pattern} в {input_directory}")

    stats = WalkStats()
    stats.start_time = datetime.now()

    def handle(file_path: Path) -> None:
        process_structured_file(
            file_path,
            input_directory,
            structure,
            should_parse_time,
            callback,
            pattern,
            date_range,
            logger,
            stats,
        )

    storage.for_each_file_in(input_directory, handle, pattern=pattern, limit=limit, concurrency=concurrency or 1)

    stats.end_time = datetime.now()
    return stats


def process(*args, **kwargs) -> int:
    """
    Обходит структурированный входной каталог (аргументы как у process_with_stats).

    Returns:
        int: Количество файлов, успешно переданных в callback
    """
    return process_with_stats(*args, **kwargs).processed_files
