"""
Главный модуль CLI интерфейса.

Регистрирует флаги командной строки, собирает их значения в конфигурацию
и предоставляет команды для предварительного просмотра раскладки файлов.
"""

import argparse
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .cabinet import FileCabinet, create_cabinet
from .config_loader import ArgumentError, load_config
from .constants import ALLOWED_FILENAME_OPTIONS, ALLOWED_STRUCTURES
from .logger import FileCabinetLogger

# Длина префикса хеша, используемого как идентификатор в имени файла
IDENTIFIER_LENGTH = 10


class FileCabinetCLI:
    """Класс для обработки команд CLI."""

    def __init__(self):
        self.config = None
        self.logger = None
        self.cabinet: Optional[FileCabinet] = None

    def setup(self, config_path: Optional[str] = None, overrides: Optional[Dict] = None) -> bool:
        """
        Инициализирует CLI с конфигурацией.

        Args:
            config_path: Путь к файлу конфигурации
            overrides: Значения флагов командной строки

        Returns:
            bool: True если инициализация успешна
        """
        try:
            self.config = load_config(config_path, overrides)
            self.logger = FileCabinetLogger(self.config.logging)
            self.cabinet = create_cabinet(self.config, self.logger)
            self.logger.log_config_loaded(config_path)
            self.logger.log_system_info(f"Часовой пояс: {self.config.timezone}")
            return True

        except ArgumentError as e:
            print(f"❌ Некорректный параметр {e.argument}: {e.message}")
            return False
        except (FileNotFoundError, ValueError) as e:
            print(f"❌ Ошибка инициализации: {e}")
            return False

    def cmd_scan(self, args) -> int:
        """
        Команда предварительного просмотра: показывает дату каждого
        отобранного файла и путь, который он получит в выходном каталоге.
        Файлы не копируются и каталоги не создаются.

        Returns:
            int: Код возврата (0 - успех, 1 - ошибка)
        """
        lines: List[str] = []
        lock = threading.Lock()

        def show(file_path: Path, date: Optional[datetime]) -> None:
            if date is None:
                line = f"   • {file_path}"
            else:
                identifier = self.cabinet.storage.hash_file(file_path, IDENTIFIER_LENGTH)
                type_tag = file_path.suffix.lstrip('.') or 'file'
                directory = self.cabinet.get_output_directory(date)
                filename = self.cabinet.construct_filename(date, type_tag, identifier, file_path.stem)
                line = f"   • {file_path} ({date.isoformat()}) → {directory / filename}"
            with lock:
                lines.append(line)

        try:
            stats = self.cabinet.operate(show)
        except ArgumentError as e:
            print(f"❌ Некорректный параметр {e.argument}: {e.message}")
            return 1

        print(f"📁 Отобрано файлов: {stats.processed_files}")
        for line in sorted(lines):
            print(line)

        if stats.skipped_files:
            print(f"ℹ️ Пропущено: {stats.skipped_unparsed} без даты, {stats.skipped_out_of_range} вне диапазона")

        if stats.failed_files > 0:
            print(f"\n⚠️ Обнаружено {stats.failed_files} ошибок:")
            for error in stats.errors[:10]:
                print(f"   • {error['file']}: {error['error']}")
            if len(stats.errors) > 10:
                print(f"   ... и еще {len(stats.errors) - 10} ошибок")
            return 1

        return 0

    def cmd_config(self, args) -> int:
        """Команда просмотра итоговой конфигурации."""
        config = self.config
        print("⚙️ Конфигурация")
        print("=" * 50)
        print(f"   • Часовой пояс: {config.timezone}")
        print(f"   • Возможности: {' '.join(config.features)}")
        print(f"\n📥 Вход:")
        print(f"   • Каталог: {config.input.directory}")
        print(f"   • Рекурсивно: {config.input.recursive}")
        print(f"   • Структура: {_value(config.input.structure)}")
        print(f"   • Опции имени: {_values(config.input.filename_options)}")
        print(f"   • Расширения: {_values(config.input.extensions)}")
        print(f"   • Диапазон: {config.input.start or '-'} .. {config.input.end or '-'}")
        print(f"   • Лимит: {config.input.limit or '-'}")
        print(f"   • Параллельно: {config.input.concurrency}")
        print(f"\n📤 Выход:")
        print(f"   • Каталог: {config.output.directory}")
        print(f"   • Структура: {_value(config.output.structure)}")
        print(f"   • Опции имени: {_values(config.output.filename_options)}")
        return 0


def _value(item) -> str:
    if item is None:
        return '-'
    return getattr(item, 'value', str(item))


def _values(items) -> str:
    if not items:
        return '-'
    return ' '.join(_value(item) for item in items)


def configure_parser(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """
    Регистрирует флаги конфигурации в парсере вызывающего приложения.

    Значения по умолчанию не задаются, чтобы неуказанные флаги не
    перекрывали файл конфигурации.
    """
    parser.add_argument('--timezone', help='Часовой пояс IANA (по умолчанию: Etc/UTC)')
    parser.add_argument('-i', '--input-directory', help='Входной каталог')
    parser.add_argument('-r', '--recursive', action='store_true', default=None,
                        help='Искать файлы во вложенных каталогах (для неструктурированного входа)')
    parser.add_argument('--limit', type=int, help='Максимальное количество обрабатываемых файлов')
    parser.add_argument('--concurrency', type=int, help='Количество одновременно обрабатываемых файлов')
    parser.add_argument('--input-structure', choices=ALLOWED_STRUCTURES, help='Структура входного каталога')
    parser.add_argument('--input-filename-options', nargs='+', metavar='OPTION',
                        help=f"Опции имени входного файла: {', '.join(ALLOWED_FILENAME_OPTIONS)}")
    parser.add_argument('--extensions', nargs='+', metavar='EXT', help='Расширения файлов без точки')
    parser.add_argument('--start', help='Начало диапазона дат (формат: YYYY-MM-DD)')
    parser.add_argument('--end', help='Конец диапазона дат, не включается (формат: YYYY-MM-DD)')
    parser.add_argument('-o', '--output-directory', help='Выходной каталог')
    parser.add_argument('--output-structure', choices=ALLOWED_STRUCTURES, help='Структура выходного каталога')
    parser.add_argument('--output-filename-options', nargs='+', metavar='OPTION',
                        help=f"Опции имени выходного файла: {', '.join(ALLOWED_FILENAME_OPTIONS)}")
    return parser


def read_args(args: argparse.Namespace) -> Dict:
    """
    Собирает значения флагов в словарь переопределений конфигурации.

    Returns:
        Dict: Только явно указанные значения (без None)
    """
    keys = [
        'timezone', 'input_directory', 'recursive', 'limit', 'concurrency',
        'input_structure', 'input_filename_options', 'extensions', 'start', 'end',
        'output_directory', 'output_structure', 'output_filename_options',
    ]
    values = {key: getattr(args, key, None) for key in keys}
    return {key: value for key, value in values.items() if value is not None}


def create_parser() -> argparse.ArgumentParser:
    """
    Создает парсер аргументов командной строки.

    Returns:
        argparse.ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        description="Раскладка файлов по каталогам с датами",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:

  # Какие файлы за январь попадут в обработку и куда
  filecabinet -i notes --input-structure month --start 2024-01-01 --end 2024-02-01 scan

  # Итоговая конфигурация с учетом файла и флагов
  filecabinet --config config/settings.ini config
        """
    )

    parser.add_argument('--config', default=None, help='Путь к файлу конфигурации')
    parser.add_argument('--verbose', '-v', action='store_true', help='Подробный вывод')
    configure_parser(parser)

    subparsers = parser.add_subparsers(dest='command', help='Доступные команды')
    subparsers.add_parser('scan', help='Предварительный просмотр раскладки файлов')
    subparsers.add_parser('config', help='Просмотр итоговой конфигурации')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Главная функция CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = FileCabinetCLI()
    if not cli.setup(args.config, read_args(args)):
        return 1

    try:
        if args.command == 'scan':
            return cli.cmd_scan(args)
        elif args.command == 'config':
            return cli.cmd_config(args)
        else:
            print(f"❌ Неизвестная команда: {args.command}")
            return 1

    except KeyboardInterrupt:
        print("\n⚠️ Операция прервана пользователем")
        cli.logger.log_warning("Операция прервана пользователем")
        return 1
    except Exception as e:
        print(f"❌ Неожиданная ошибка: {e}")
        cli.logger.log_critical_error("Неожиданная ошибка", e)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
