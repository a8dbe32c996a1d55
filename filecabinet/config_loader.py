"""
Модуль для загрузки и валидации конфигурации.

Обеспечивает загрузку параметров из config/settings.ini, наложение
параметров командной строки, заполнение значений по умолчанию
и проверку конфигурации перед обработкой файлов.
"""

import configparser
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from . import constants
from .errors import ArgumentError
from .structure import FilenameOption, FilesystemStructure
from .dates import valid_timezones
from .storage import Storage


@dataclass
class InputConfig:
    """Конфигурация входного каталога."""
    directory: Optional[Path] = None
    recursive: Optional[bool] = None
    limit: Optional[int] = None
    concurrency: Optional[int] = None
    structure: Optional[FilesystemStructure] = None
    filename_options: Optional[List[FilenameOption]] = None
    extensions: Optional[List[str]] = None
    start: Optional[str] = None
    end: Optional[str] = None


@dataclass
class OutputConfig:
    """Конфигурация выходного каталога."""
    directory: Optional[Path] = None
    structure: Optional[FilesystemStructure] = None
    filename_options: Optional[List[FilenameOption]] = None


@dataclass
class LoggingConfig:
    """Конфигурация логирования."""
    level: str = "INFO"
    log_file: Optional[Path] = None
    max_log_size: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Основная конфигурация."""
    timezone: Optional[str] = None
    features: List[str] = field(default_factory=lambda: list(constants.ALL_FEATURES))
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Соответствие ключей переопределений (из CLI) полям конфигурации
_OVERRIDE_FIELDS = {
    'timezone': ('', 'timezone'),
    'input_directory': ('input', 'directory'),
    'recursive': ('input', 'recursive'),
    'limit': ('input', 'limit'),
    'concurrency': ('input', 'concurrency'),
    'input_structure': ('input', 'structure'),
    'input_filename_options': ('input', 'filename_options'),
    'extensions': ('input', 'extensions'),
    'start': ('input', 'start'),
    'end': ('input', 'end'),
    'output_directory': ('output', 'directory'),
    'output_structure': ('output', 'structure'),
    'output_filename_options': ('output', 'filename_options'),
}


def _split_list(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return value.split()


class ConfigLoader:
    """Класс для загрузки и валидации конфигурации."""

    def __init__(self, config_path: Optional[str] = "config/settings.ini"):
        """
        Инициализация загрузчика конфигурации.

        Args:
            config_path: Путь к файлу конфигурации; None - только значения
                по умолчанию и переопределения
        """
        self.config_path = Path(config_path) if config_path else None

    def load_config(self, overrides: Optional[Dict] = None) -> Config:
        """
        Загружает конфигурацию из файла и накладывает переопределения.

        Args:
            overrides: Значения из командной строки (ключи как у argparse)

        Returns:
            Config: Объект конфигурации

        Raises:
            FileNotFoundError: Если файл конфигурации не найден
            ArgumentError: Если параметр конфигурации некорректен
            ValueError: Если файл конфигурации не удалось разобрать
        """
        config = Config()

        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Файл конфигурации не найден: {self.config_path}")

            parser = configparser.ConfigParser()
            try:
                parser.read(self.config_path, encoding='utf-8')
                self._load_general_config(parser, config)
                config.input = self._load_input_config(parser)
                config.output = self._load_output_config(parser)
                config.logging = self._load_logging_config(parser)
            except configparser.Error as e:
                raise ValueError(f"Ошибка загрузки конфигурации: {e}")

        if overrides:
            apply_overrides(config, overrides)

        config = apply_defaults(config)
        validate_config(config)
        return config

    def _load_general_config(self, parser: configparser.ConfigParser, config: Config) -> None:
        """Загружает общие параметры."""
        section = 'general'
        if not parser.has_section(section):
            return

        config.timezone = parser.get(section, 'timezone', fallback=None)
        features = _split_list(parser.get(section, 'features', fallback=None))
        if features is not None:
            config.features = features

    def _load_input_config(self, parser: configparser.ConfigParser) -> InputConfig:
        """Загружает конфигурацию входного каталога."""
        section = 'input'
        if not parser.has_section(section):
            return InputConfig()

        directory = parser.get(section, 'directory', fallback=None)
        structure = parser.get(section, 'structure', fallback=None)

        try:
            limit = parser.getint(section, 'limit', fallback=None)
            concurrency = parser.getint(section, 'concurrency', fallback=None)
            recursive = parser.getboolean(section, 'recursive', fallback=None)
        except ValueError as e:
            raise ArgumentError('--limit', f"Некорректное числовое значение в секции [{section}]: {e}")

        return InputConfig(
            directory=Path(directory) if directory else None,
            recursive=recursive,
            limit=limit,
            concurrency=concurrency,
            structure=FilesystemStructure.parse(structure, '--input-structure') if structure else None,
            filename_options=_split_list(parser.get(section, 'filename_options', fallback=None)),
            extensions=_split_list(parser.get(section, 'extensions', fallback=None)),
            start=parser.get(section, 'start', fallback=None),
            end=parser.get(section, 'end', fallback=None),
        )

    def _load_output_config(self, parser: configparser.ConfigParser) -> OutputConfig:
        """Загружает конфигурацию выходного каталога."""
        section = 'output'
        if not parser.has_section(section):
            return OutputConfig()

        directory = parser.get(section, 'directory', fallback=None)
        structure = parser.get(section, 'structure', fallback=None)

        return OutputConfig(
            directory=Path(directory) if directory else None,
            structure=FilesystemStructure.parse(structure, '--output-structure') if structure else None,
            filename_options=_split_list(parser.get(section, 'filename_options', fallback=None)),
        )

    def _load_logging_config(self, parser: configparser.ConfigParser) -> LoggingConfig:
        """Загружает конфигурацию логирования."""
        section = 'logging'
        if not parser.has_section(section):
            return LoggingConfig()

        log_file = parser.get(section, 'log_file', fallback=None)

        return LoggingConfig(
            level=parser.get(section, 'level', fallback='INFO'),
            log_file=Path(log_file) if log_file else None,
            max_log_size=parser.getint(section, 'max_log_size', fallback=10),
            backup_count=parser.getint(section, 'backup_count', fallback=5)
        )


def apply_overrides(config: Config, overrides: Dict) -> Config:
    """
    Накладывает переопределения (обычно из командной строки) на конфигурацию.

    Значения None пропускаются, поэтому неуказанные флаги не затирают файл.
    """
    for key, value in overrides.items():
        if value is None or key not in _OVERRIDE_FIELDS:
            continue
        section, name = _OVERRIDE_FIELDS[key]
        if name == 'structure':
            value = FilesystemStructure.parse(value, f"--{key.replace('_', '-')}")
        elif name == 'directory':
            value = Path(value)
        target = getattr(config, section) if section else config
        setattr(target, name, value)
    return config


def apply_defaults(config: Config) -> Config:
    """
    Заполняет незаданные параметры значениями по умолчанию.

    Заполняются только параметры включенных возможностей (features).
    Некорректное значение concurrency заменяется значением по умолчанию.
    """
    features = config.features
    config.timezone = config.timezone or constants.DEFAULT_TIMEZONE

    if constants.FEATURE_INPUT in features:
        inp = config.input
        if inp.recursive is None:
            inp.recursive = constants.DEFAULT_RECURSIVE
        if inp.directory is None:
            inp.directory = Path(constants.DEFAULT_INPUT_DIRECTORY)
        if not isinstance(inp.concurrency, int) or isinstance(inp.concurrency, bool) or inp.concurrency < 1:
            inp.concurrency = constants.DEFAULT_CONCURRENCY

    if constants.FEATURE_OUTPUT in features and config.output.directory is None:
        config.output.directory = Path(constants.DEFAULT_OUTPUT_DIRECTORY)

    if constants.FEATURE_STRUCTURED_OUTPUT in features:
        if config.output.structure is None:
            config.output.structure = FilesystemStructure(constants.DEFAULT_OUTPUT_STRUCTURE)
        if config.output.filename_options is None:
            config.output.filename_options = list(constants.DEFAULT_OUTPUT_FILENAME_OPTIONS)

    if constants.FEATURE_EXTENSIONS in features and config.input.extensions is None:
        config.input.extensions = list(constants.DEFAULT_EXTENSIONS)

    if constants.FEATURE_STRUCTURED_INPUT in features:
        if config.input.structure is None:
            config.input.structure = FilesystemStructure(constants.DEFAULT_INPUT_STRUCTURE)
        if config.input.filename_options is None:
            config.input.filename_options = list(constants.DEFAULT_INPUT_FILENAME_OPTIONS)

    return config


def _validate_filename_options(options: Optional[List], structure: Optional[FilesystemStructure],
                               argument: str, kind: str) -> Optional[List[FilenameOption]]:
    """Проверяет опции имени файла и возвращает их в виде перечисления."""
    if not options:
        return options

    raw = [option.value if isinstance(option, FilenameOption) else str(option) for option in options]
    if ',' in raw[0]:
        raise ArgumentError(argument, f"Опции имени файла перечисляются через пробел, а не через запятую. Пример: {argument} date time subject")
    if len(raw) == 1 and len(raw[0].split()) > 1:
        raise ArgumentError(argument, f"Опции имени файла не нужно заключать в кавычки. Используйте: {argument} date time subject")

    invalid = [option for option in raw if option not in constants.ALLOWED_FILENAME_OPTIONS]
    if invalid:
        raise ArgumentError(argument, f"Некорректные опции имени файла: {', '.join(invalid)}. "
                                      f"Допустимые значения: {', '.join(constants.ALLOWED_FILENAME_OPTIONS)}")

    parsed = FilenameOption.parse_list(raw, argument)
    if FilenameOption.DATE in parsed and structure == FilesystemStructure.DAY:
        raise ArgumentError(argument, f'Нельзя использовать дату в имени файла при {kind} структуре "day"')
    return parsed


def validate_config(config: Config) -> None:
    """
    Валидирует конфигурацию.

    Raises:
        ArgumentError: Если какой-либо параметр некорректен
    """
    features = config.features
    storage = Storage()

    if config.timezone not in valid_timezones():
        raise ArgumentError('--timezone', f"Некорректный часовой пояс: {config.timezone}")

    unknown_features = [feature for feature in features if feature not in constants.ALL_FEATURES]
    if unknown_features:
        raise ArgumentError('--features', f"Неизвестные возможности: {', '.join(unknown_features)}")

    if constants.FEATURE_INPUT in features:
        directory = config.input.directory
        if directory is not None and not storage.is_directory_readable(directory):
            raise ArgumentError('--input-directory', f"Входной каталог не существует или недоступен для чтения: {directory}")
        if config.input.limit is not None and config.input.limit < 1:
            raise ArgumentError('--limit', "Лимит должен быть больше 0")

    if constants.FEATURE_OUTPUT in features:
        directory = config.output.directory
        if directory is not None and storage.exists(directory):
            if not storage.is_directory_writable(directory):
                raise ArgumentError('--output-directory', f"Выходной каталог недоступен для записи: {directory}")

    if constants.FEATURE_STRUCTURED_OUTPUT in features:
        if config.output.structure is not None:
            config.output.structure = FilesystemStructure.parse(config.output.structure, '--output-structure')
        config.output.filename_options = _validate_filename_options(
            config.output.filename_options, config.output.structure, '--output-filename-options', 'выходной')

    if constants.FEATURE_EXTENSIONS in features and config.input.extensions:
        for extension in config.input.extensions:
            if extension.startswith('.'):
                raise ArgumentError('--extensions', f'Некорректное расширение "{extension}": расширения указываются без точки')

    if constants.FEATURE_STRUCTURED_INPUT in features:
        if config.input.structure is not None:
            config.input.structure = FilesystemStructure.parse(config.input.structure, '--input-structure')
        config.input.filename_options = _validate_filename_options(
            config.input.filename_options, config.input.structure, '--input-filename-options', 'входной')
        _validate_start_end(config.input.start, config.input.end)


def _validate_start_end(start: Optional[str], end: Optional[str]) -> None:
    """Проверяет формат и порядок явных границ диапазона дат."""
    parsed = {}
    for argument, value in (('--start', start), ('--end', end)):
        if value is None:
            continue
        try:
            parsed[argument] = datetime.strptime(str(value), constants.DATE_FORMAT_YEAR_MONTH_DAY)
        except ValueError:
            raise ArgumentError(argument, f"Некорректная дата: {value}. Используйте формат YYYY-MM-DD")

    if len(parsed) == 2 and parsed['--end'] < parsed['--start']:
        raise ArgumentError('--start', f"Начальная дата ({start}) не может быть позже конечной ({end})")


def load_config(config_path: Optional[str] = "config/settings.ini", overrides: Optional[Dict] = None) -> Config:
    """
    Удобная функция для быстрой загрузки конфигурации.

    Args:
        config_path: Путь к файлу конфигурации
        overrides: Переопределения из командной строки

    Returns:
        Config: Объект конфигурации
    """
    loader = ConfigLoader(config_path)
    return loader.load_config(overrides)
