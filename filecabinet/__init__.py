"""
File Cabinet

Помощник для раскладки файлов по каталогам с датами: определяет дату файла
по его пути и имени, фильтрует по диапазону дат и строит путь назначения.
"""

__version__ = "1.0.0"
__author__ = "File Cabinet Team"
__description__ = "Date-structured input walker and output path constructor"

from .config_loader import ArgumentError, Config, load_config
from .structure import FilenameOption, FilesystemStructure
from .date_path import parse_date_from_file_path, format_date
from .date_range import DateRange, calculate_date_range, is_date_in_range
from .cabinet import FileCabinet, create_cabinet

__all__ = [
    "ArgumentError",
    "Config",
    "load_config",
    "FilenameOption",
    "FilesystemStructure",
    "parse_date_from_file_path",
    "format_date",
    "DateRange",
    "calculate_date_range",
    "is_date_in_range",
    "FileCabinet",
    "create_cabinet",
]
