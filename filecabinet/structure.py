"""
Перечисления структуры каталогов и опций имени файла.
"""

from enum import Enum
from typing import Iterable, List, Optional

from .errors import ArgumentError


class FilesystemStructure(str, Enum):
    """Сколько компонентов даты вынесено во вложенные каталоги."""

    NONE = "none"
    YEAR = "year"
    MONTH = "month"
    DAY = "day"

    @property
    def depth(self) -> int:
        """Количество каталогов даты: 0, 1, 2 или 3."""
        return _DEPTHS[self]

    @classmethod
    def parse(cls, value, argument: str = "--input-structure") -> "FilesystemStructure":
        """
        Преобразует строку в структуру.

        Args:
            value: Строка или уже готовое значение перечисления
            argument: Имя параметра для сообщения об ошибке

        Returns:
            FilesystemStructure: Структура каталогов

        Raises:
            ArgumentError: Если значение не распознано
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(item.value for item in cls)
            raise ArgumentError(argument, f"Некорректная структура: {value}. Допустимые значения: {valid}")


_DEPTHS = {
    FilesystemStructure.NONE: 0,
    FilesystemStructure.YEAR: 1,
    FilesystemStructure.MONTH: 2,
    FilesystemStructure.DAY: 3,
}


class FilenameOption(str, Enum):
    """Фрагменты, которые могут входить в имя файла."""

    DATE = "date"
    TIME = "time"
    SUBJECT = "subject"

    @classmethod
    def parse_list(cls, values: Optional[Iterable], argument: str = "--output-filename-options") -> List["FilenameOption"]:
        """Преобразует список строк в список опций (без дубликатов)."""
        result: List[FilenameOption] = []
        for value in values or []:
            if isinstance(value, cls):
                option = value
            else:
                try:
                    option = cls(str(value).strip().lower())
                except ValueError:
                    valid = ", ".join(item.value for item in cls)
                    raise ArgumentError(argument, f"Некорректная опция имени файла: {value}. Допустимые значения: {valid}")
            if option not in result:
                result.append(option)
        return result
