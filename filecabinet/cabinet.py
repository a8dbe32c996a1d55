"""
Модуль, объединяющий обход входного каталога и построение путей назначения.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from . import structured_input, unstructured_input
from .config_loader import Config
from .constants import FEATURE_STRUCTURED_INPUT
from .logger import FileCabinetLogger
from .output import OutputLocation, create_output
from .stats import WalkStats
from .storage import create_storage

FileCallback = Callable[[Path, Optional[datetime]], None]


class FileCabinet:
    """Основной класс для обработки файлов по конфигурации."""

    def __init__(self, config: Config, logger: FileCabinetLogger):
        """
        Инициализация.

        Args:
            config: Конфигурация (с примененными значениями по умолчанию)
            logger: Логгер для записи операций
        """
        self.config = config
        self.logger = logger
        self.storage = create_storage(logger.get_logger())
        self.output = create_output(config, logger.get_logger(), self.storage)

    @property
    def is_structured(self) -> bool:
        return FEATURE_STRUCTURED_INPUT in self.config.features and self.config.input.structure is not None

    def operate(self, callback: FileCallback) -> WalkStats:
        """
        Обходит входной каталог и вызывает callback для отобранных файлов.

        Для структурированного каталога callback получает дату файла, для
        неструктурированного - None.

        Args:
            callback: Вызывается как ``callback(path, date)``

        Returns:
            WalkStats: Статистика обхода

        Raises:
            ArgumentError: Если конфигурация некорректна
        """
        inp = self.config.input
        log = self.logger.get_logger()

        if self.is_structured:
            self.logger.log_walk_start(inp.structure.value, inp.directory, self._describe_range())
            stats = structured_input.process_with_stats(
                inp.structure,
                inp.filename_options,
                inp.extensions,
                self.config.timezone,
                inp.start,
                inp.end,
                inp.limit,
                self.config.features,
                log,
                inp.directory,
                callback,
                concurrency=inp.concurrency,
                storage=self.storage,
            )
        else:
            self.logger.log_walk_start("unstructured", inp.directory, "все даты")
            stats = unstructured_input.process_with_stats(
                inp.directory,
                bool(inp.recursive),
                inp.extensions,
                inp.limit,
                log,
                callback,
                concurrency=inp.concurrency,
                storage=self.storage,
            )

        self.logger.log_walk_end(stats.processed_files, stats.skipped_files, stats.failed_files)
        log.debug(f"Итоги обхода: {stats.to_dict()}")
        return stats

    def _describe_range(self) -> str:
        start = self.config.input.start or "конец - 31 день"
        end = self.config.input.end or "сейчас"
        return f"{start} - {end}"

    def get_output_directory(self, date: datetime) -> Path:
        return self.output.get_output_directory(date)

    def construct_output_directory(self, date: datetime) -> Path:
        return self.output.construct_output_directory(date)

    def construct_filename(self, date: datetime, type_tag: str, identifier: str,
                           subject: Optional[str] = None) -> str:
        return self.output.construct_filename(date, type_tag, identifier, subject)

    def construct_output_location(self, date: datetime, type_tag: str, identifier: str,
                                  subject: Optional[str] = None) -> OutputLocation:
        return self.output.construct_output_location(date, type_tag, identifier, subject)


def create_cabinet(config: Config, logger: FileCabinetLogger) -> FileCabinet:
    """
    Удобная функция для создания объекта FileCabinet.

    Args:
        config: Конфигурация
        logger: Логгер

    Returns:
        FileCabinet: Объект обработки файлов
    """
    return FileCabinet(config, logger)
