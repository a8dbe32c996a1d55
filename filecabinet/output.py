"""
Модуль построения выходного пути и имени файла.

Каталог назначения строится по структуре выходного каталога
(YYYY, YYYY/MM, YYYY/MM/DD), а в имя файла попадает только та часть
даты, которая не выражена каталогами.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config_loader import Config, OutputConfig
from .constants import (
    DATE_FORMAT_DAY,
    DATE_FORMAT_HOURS_MINUTES,
    DATE_FORMAT_MONTH,
    DATE_FORMAT_YEAR,
    UNTITLED,
)
from .date_path import format_date
from .dates import DateUtility
from .errors import ArgumentError
from .storage import Storage
from .structure import FilenameOption, FilesystemStructure

_UNSAFE_CHARACTERS = re.compile(r'[^a-zA-Z0-9\-_.]')
_UNDERSCORE_RUNS = re.compile(r'_+')


def sanitize_filename_string(value: str) -> str:
    """
    Приводит строку к безопасному фрагменту имени файла.

    Все символы кроме ``[A-Za-z0-9._-]`` заменяются на ``_``, повторы ``_``
    схлопываются, ``_`` по краям удаляются; пустой результат заменяется на
    ``untitled``.
    """
    result = _UNSAFE_CHARACTERS.sub('_', value or '')
    result = _UNDERSCORE_RUNS.sub('_', result)
    result = result.strip('_')
    return result or UNTITLED


@dataclass(frozen=True)
class OutputLocation:
    """Каталог и имя файла назначения."""
    directory: Path
    filename: str

    @property
    def path(self) -> Path:
        return self.directory / self.filename


class Output:
    """Класс для построения путей назначения."""

    def __init__(self, output_config: OutputConfig, timezone: str = 'Etc/UTC',
                 storage: Optional[Storage] = None, logger: Optional[logging.Logger] = None):
        """
        Args:
            output_config: Конфигурация выходного каталога
            timezone: Часовой пояс, в котором форматируются даты
            storage: Объект операций с файловой системой
            logger: Логгер
        """
        self.logger = logger or logging.getLogger('file_cabinet')
        self.output_config = output_config
        self.dates = DateUtility(timezone or 'Etc/UTC')
        self.storage = storage or Storage(self.logger)
        self.filename_options = FilenameOption.parse_list(output_config.filename_options)

    def construct_filename(self, date: datetime, type_tag: str, identifier: str,
                           subject: Optional[str] = None) -> str:
        """
        Собирает имя файла из фрагментов.

        Порядок фрагментов фиксирован: дата, время, идентификатор, тип, тема.

        Args:
            date: Дата файла
            type_tag: Тип (например ``eml``)
            identifier: Уникальный идентификатор (например хеш)
            subject: Тема; используется только с опцией ``subject``

        Returns:
            str: Имя файла без каталога

        Raises:
            ArgumentError: Если опция ``date`` несовместима со структурой
        """
        parts = []

        if FilenameOption.DATE in self.filename_options:
            parts.append(format_date(date, self.output_config.structure, self.dates))

        if FilenameOption.TIME in self.filename_options:
            parts.append(self.dates.format(date, DATE_FORMAT_HOURS_MINUTES))

        parts.append(identifier)
        parts.append(type_tag)

        if FilenameOption.SUBJECT in self.filename_options:
            parts.append(sanitize_filename_string(subject or ''))

        return '-'.join(parts)

    def get_output_directory(self, date: datetime) -> Path:
        """
        Вычисляет каталог назначения для даты, не создавая его.

        Args:
            date: Дата файла

        Returns:
            Path: ``root``, ``root/YYYY``, ``root/YYYY/MM`` или ``root/YYYY/MM/DD``

        Raises:
            ArgumentError: Если выходной каталог или структура не заданы
        """
        directory = self.output_config.directory
        if not directory:
            raise ArgumentError('--output-directory', "Невозможно построить путь: выходной каталог не задан")
        if not self.output_config.structure:
            raise ArgumentError('--output-structure', "Невозможно построить путь: структура выходного каталога не задана")

        structure = FilesystemStructure.parse(self.output_config.structure, '--output-structure')
        year = self.dates.format(date, DATE_FORMAT_YEAR)
        month = self.dates.format(date, DATE_FORMAT_MONTH)
        day = self.dates.format(date, DATE_FORMAT_DAY)

        output_path = Path(directory)
        if structure == FilesystemStructure.YEAR:
            output_path = output_path / year
        elif structure == FilesystemStructure.MONTH:
            output_path = output_path / year / month
        elif structure == FilesystemStructure.DAY:
            output_path = output_path / year / month / day
        return output_path

    def construct_output_directory(self, date: datetime) -> Path:
        """
        Строит и создает каталог назначения для даты.

        Raises:
            ArgumentError: Если выходной каталог или структура не заданы
            StorageError: Если каталог не удалось создать
        """
        output_path = self.get_output_directory(date)
        self.storage.create_directory(output_path)
        return output_path

    def construct_output_location(self, date: datetime, type_tag: str, identifier: str,
                                  subject: Optional[str] = None) -> OutputLocation:
        """Каталог (создается) и имя файла назначения одним вызовом."""
        return OutputLocation(
            directory=self.construct_output_directory(date),
            filename=self.construct_filename(date, type_tag, identifier, subject),
        )


def create_output(config: Config, logger: Optional[logging.Logger] = None,
                  storage: Optional[Storage] = None) -> Output:
    """
    Удобная функция для создания построителя путей из конфигурации.

    Args:
        config: Конфигурация
        logger: Логгер
        storage: Объект операций с файловой системой

    Returns:
        Output: Построитель путей
    """
    return Output(config.output, config.timezone, storage, logger)
