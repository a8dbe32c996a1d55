"""
Модуль обработки неструктурированного входного каталога.

Дата файла не определяется: каждый найденный файл передается в callback
как есть.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .errors import ArgumentError
from .stats import WalkStats
from .storage import Storage

_NON_ALNUM = re.compile(r'[^a-zA-Z0-9]')


def sanitize_extension(extension: str) -> str:
    """Оставляет в расширении только буквы и цифры (без glob-символов)."""
    return _NON_ALNUM.sub('', extension)


def get_file_pattern(recursive: bool, extensions: Optional[List[str]], logger: logging.Logger) -> str:
    """
    Строит glob-шаблон для неструктурированного каталога.

    Raises:
        ArgumentError: Если после очистки не осталось ни одного расширения
    """
    if extensions:
        safe_extensions = [ext for ext in (sanitize_extension(e) for e in extensions) if ext]
        if not safe_extensions:
            raise ArgumentError('--extensions', "После очистки не осталось ни одного корректного расширения")
        prefix = "**/" if recursive else ""
        logger.debug(f"Применяется фильтр по расширениям: {','.join(safe_extensions)}")
        if len(safe_extensions) == 1:
            return f"{prefix}*.{safe_extensions[0]}"
        return f"{prefix}*.{{{','.join(safe_extensions)}}}"

    if recursive:
        return "**/*"
    return "*.*"


def process_with_stats(
    input_directory,
    recursive: bool,
    extensions: Optional[List[str]],
    limit: Optional[int],
    logger: logging.Logger,
    callback: Callable[[Path, None], None],
    concurrency: Optional[int] = None,
    storage: Optional[Storage] = None,
) -> WalkStats:
    """
    Обходит неструктурированный каталог и вызывает ``callback(path, None)``.

    Returns:
        WalkStats: Статистика обхода
    """
    storage = storage or Storage(logger)
    input_directory = Path(input_directory)
    pattern = get_file_pattern(recursive, extensions, logger)

    logger.info(f"Обработка неструктурированного каталога {input_directory} "
                f"({'рекурсивно' if recursive else 'без вложенных каталогов'}), шаблон {pattern}")

    stats = WalkStats()
    stats.start_time = datetime.now()

    def handle(file_path: Path) -> None:
        logger.debug(f"Обработка файла {file_path}")
        try:
            callback(file_path, None)
        except Exception as e:
            logger.error(f"Ошибка при обработке файла {file_path}: {e}", exc_info=True)
            stats.record_failure(file_path, e)
            return
        stats.record_processed()

    storage.for_each_file_in(input_directory, handle, pattern=pattern, limit=limit, concurrency=concurrency or 1)

    stats.end_time = datetime.now()
    return stats


def process(*args, **kwargs) -> int:
    """Обходит неструктурированный каталог; возвращает количество обработанных файлов."""
    return process_with_stats(*args, **kwargs).processed_files
