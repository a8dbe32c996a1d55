"""
Модуль для операций с файловой системой.

Изолирует работу с файловой системой от остального кода: проверки
каталогов, создание каталогов, перебор файлов по шаблону с ограничением
количества и параллельной обработкой.
"""

import hashlib
import logging
import os
import queue
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, Union

PathLike = Union[str, Path]

_BRACE_PATTERN = re.compile(r'\{([^{}]*)\}')


class StorageError(Exception):
    """Исключение для ошибок операций с файловой системой."""
    pass


def expand_pattern(pattern: str) -> List[str]:
    """
    Раскрывает группы в фигурных скобках: ``**/*.{md,txt}`` ->
    ``['**/*.md', '**/*.txt']``.
    """
    match = _BRACE_PATTERN.search(pattern)
    if not match:
        return [pattern]

    expanded = []
    for alternative in match.group(1).split(','):
        candidate = pattern[:match.start()] + alternative + pattern[match.end():]
        for item in expand_pattern(candidate):
            if item not in expanded:
                expanded.append(item)
    return expanded


def _is_hidden(relative_path: Path) -> bool:
    return any(part.startswith('.') for part in relative_path.parts)


class Storage:
    """Класс для операций с файловой системой."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Args:
            logger: Логгер для отладочных сообщений
        """
        self.logger = logger or logging.getLogger('file_cabinet')

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def is_directory(self, path: PathLike) -> bool:
        if not Path(path).is_dir():
            self.logger.debug(f"{path} не является каталогом")
            return False
        return True

    def is_readable(self, path: PathLike) -> bool:
        if not os.access(path, os.R_OK):
            self.logger.debug(f"{path} недоступен для чтения")
            return False
        return True

    def is_writable(self, path: PathLike) -> bool:
        if not os.access(path, os.W_OK):
            self.logger.debug(f"{path} недоступен для записи")
            return False
        return True

    def is_directory_writable(self, path: PathLike) -> bool:
        return self.exists(path) and self.is_directory(path) and self.is_writable(path)

    def is_directory_readable(self, path: PathLike) -> bool:
        return self.exists(path) and self.is_directory(path) and self.is_readable(path)

    def create_directory(self, path: PathLike) -> Path:
        """
        Создает каталог вместе с родительскими, если он не существует.

        Повторный вызов для существующего каталога ничего не делает,
        поэтому метод можно вызывать из нескольких потоков.

        Args:
            path: Путь к каталогу

        Returns:
            Path: Путь к каталогу

        Raises:
            StorageError: Если каталог не удалось создать
        """
        directory = Path(path)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Ошибка создания каталога {directory}: {e}")
        return directory

    def hash_file(self, path: PathLike, length: int) -> str:
        """
        Получает префикс sha256-хеша содержимого файла.

        Args:
            path: Путь к файлу
            length: Длина возвращаемого префикса

        Returns:
            str: Первые ``length`` символов шестнадцатеричного хеша
        """
        hasher = hashlib.sha256()
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(4096), b""):
                hasher.update(chunk)
        return hasher.hexdigest()[:length]

    def glob_files(self, directory: PathLike, pattern: str) -> List[Path]:
        """
        Находит файлы (не каталоги) по шаблону относительно каталога.

        Скрытые файлы и содержимое скрытых каталогов (``.git``, ``.obsidian``)
        пропускаются.

        Returns:
            List[Path]: Отсортированный список без повторов

        Raises:
            StorageError: Если шаблон некорректен или каталог недоступен
        """
        base = Path(directory)
        found = set()
        try:
            for expanded in expand_pattern(pattern):
                for path in base.glob(expanded):
                    if path.is_file() and not _is_hidden(path.relative_to(base)):
                        found.add(path)
        except (OSError, ValueError) as e:
            raise StorageError(f"Ошибка поиска по шаблону {pattern} в {directory}: {e}")
        return sorted(found)

    def for_each_file_in(
        self,
        directory: PathLike,
        callback: Callable[[Path], None],
        pattern: str = '*.*',
        limit: Optional[int] = None,
        concurrency: int = 1,
    ) -> int:
        """
        Вызывает ``callback`` для каждого файла, подходящего под шаблон.

        Файлы помещаются в общую очередь, из которой ``concurrency``
        потоков забирают по одному пути, так что каждый файл обрабатывается
        ровно одним потоком. ``limit`` ограничивает количество файлов,
        попадающих в очередь.

        Args:
            directory: Корневой каталог
            callback: Функция, вызываемая для каждого файла
            pattern: Glob-шаблон, допускаются группы ``{a,b}``
            limit: Максимальное количество файлов
            concurrency: Количество одновременно обрабатываемых файлов

        Returns:
            int: Количество файлов, переданных в callback

        Raises:
            StorageError: Если не удалось перебрать файлы
            Exception: Исключения из callback пробрасываются вызывающему
        """
        files = self.glob_files(directory, pattern)
        if limit is not None and limit > 0:
            files = files[:limit]

        work: "queue.Queue[Path]" = queue.Queue()
        for file_path in files:
            work.put(file_path)

        def worker() -> int:
            handled = 0
            while True:
                try:
                    file_path = work.get_nowait()
                except queue.Empty:
                    return handled
                callback(file_path)
                handled += 1

        workers = max(1, concurrency or 1)
        if workers == 1:
            total = worker()
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(worker) for _ in range(workers)]
                total = sum(future.result() for future in futures)

        if limit is not None and limit > 0 and total >= limit:
            self.logger.debug(f"Достигнут лимит в {limit} файлов, перебор остановлен")
        return total


def create_storage(logger: Optional[logging.Logger] = None) -> Storage:
    """
    Удобная функция для создания объекта операций с файловой системой.

    Args:
        logger: Логгер

    Returns:
        Storage: Объект операций с файловой системой
    """
    return Storage(logger)
