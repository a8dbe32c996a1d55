"""
Тесты для модуля date_path.py
"""

import os
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from filecabinet.date_path import (
    FORMAT_DAY_TIME,
    FORMAT_MONTH_DAY_TIME,
    FORMAT_TIME,
    FORMAT_YEAR_MONTH_DAY_TIME,
    format_date,
    parse_date_from_file_path,
    parse_date_from_string,
)
from filecabinet.dates import DateUtility
from filecabinet.errors import ArgumentError
from filecabinet.structure import FilesystemStructure


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def encode(date: datetime, structure: FilesystemStructure, with_time: bool) -> tuple:
    """Кодирует дату в (относительный путь, имя файла) для заданной структуры."""
    dates = DateUtility('UTC')
    directories = [date.strftime('%Y'), date.strftime('%m'), date.strftime('%d')][:structure.depth]
    fragments = []
    if structure != FilesystemStructure.DAY:
        fragments.append(format_date(date, structure, dates))
    if with_time:
        fragments.append(date.strftime('%H%M'))
    fragments.append('note')
    filename = '-'.join(fragments) + '.md'
    return os.path.join(*directories, filename), filename


@pytest.fixture
def logger():
    """Создает мок логгера."""
    return Mock()


class TestParseDateFromString:
    """Тесты для parse_date_from_string."""

    def test_full_date_with_time(self):
        result = parse_date_from_string('2024-06-15-1030-report', FORMAT_YEAR_MONTH_DAY_TIME, True)
        assert result == utc(2024, 6, 15, 10, 30)

    def test_full_date_without_time(self):
        """Без разбора времени время равно 00:00, лишние токены допускаются."""
        result = parse_date_from_string('2024-6-5-report', FORMAT_YEAR_MONTH_DAY_TIME, False)
        assert result == utc(2024, 6, 5, 0, 0)

    def test_underscore_separator(self):
        result = parse_date_from_string('2024_06_15_1030', FORMAT_YEAR_MONTH_DAY_TIME, True)
        assert result == utc(2024, 6, 15, 10, 30)

    def test_edge_punctuation_is_trimmed(self):
        result = parse_date_from_string('__2024-06-15-1030--', FORMAT_YEAR_MONTH_DAY_TIME, True)
        assert result == utc(2024, 6, 15, 10, 30)

    def test_month_day_requires_year(self):
        assert parse_date_from_string('06-15-1030', FORMAT_MONTH_DAY_TIME, True) is None
        assert parse_date_from_string('06-15-1030', FORMAT_MONTH_DAY_TIME, True, year=2024) == utc(2024, 6, 15, 10, 30)

    def test_day_requires_year_and_month(self):
        assert parse_date_from_string('15-1030', FORMAT_DAY_TIME, True, year=2024) is None
        assert parse_date_from_string('15-1030', FORMAT_DAY_TIME, True, year=2024, month=6) == utc(2024, 6, 15, 10, 30)

    def test_time_only_requires_exact_token(self):
        assert parse_date_from_string('1030-note', FORMAT_TIME, True, 2024, 6, 15) == utc(2024, 6, 15, 10, 30)
        assert parse_date_from_string('10300-note', FORMAT_TIME, True, 2024, 6, 15) is None

    def test_time_only_without_time_parsing(self):
        assert parse_date_from_string('anything', FORMAT_TIME, False, 2024, 6, 15) == utc(2024, 6, 15)

    def test_missing_time_token(self):
        assert parse_date_from_string('2024-06-15', FORMAT_YEAR_MONTH_DAY_TIME, True) is None

    def test_short_time_token(self):
        assert parse_date_from_string('2024-06-15-930', FORMAT_YEAR_MONTH_DAY_TIME, True) is None

    def test_unknown_format(self):
        assert parse_date_from_string('2024-06-15', 'YYYYMMDD', False) is None

    def test_empty_string(self):
        assert parse_date_from_string('', FORMAT_YEAR_MONTH_DAY_TIME, False) is None

    @pytest.mark.parametrize('value', [
        '2024-13-01-0000',   # месяц
        '2024-00-10-0000',
        '2024-01-32-0000',   # день
        '2024-01-10-2400',   # час
        '2024-01-10-1260',   # минута
        '2024-02-30-0000',   # несуществующая дата
        '2023-02-29-0000',
        '2024-ab-10-0000',   # не число
        '2024-01-10-08x0',
        '24-01-10-0000',     # год не из четырех цифр
    ])
    def test_invalid_components(self, value):
        assert parse_date_from_string(value, FORMAT_YEAR_MONTH_DAY_TIME, True) is None

    def test_leap_day(self):
        assert parse_date_from_string('2024-02-29-0000', FORMAT_YEAR_MONTH_DAY_TIME, True) == utc(2024, 2, 29)


class TestParseDateFromFilePath:
    """Тесты для parse_date_from_file_path."""

    def test_day_structure(self, logger):
        """Структура day: YYYY/MM/DD/HHmm-..."""
        relative_path = os.path.join('2022', '01', '15', '0830-test.txt')
        result = parse_date_from_file_path(relative_path, '0830-test.txt', 'day', True, logger)
        assert result == utc(2022, 1, 15, 8, 30)

    def test_year_structure(self, logger):
        """Структура year: YYYY/M-D-HHmm-..."""
        relative_path = os.path.join('2022', '01-15-0830-test.txt')
        result = parse_date_from_file_path(relative_path, '01-15-0830-test.txt', 'year', True, logger)
        assert result == utc(2022, 1, 15, 8, 30)

    def test_month_structure(self, logger):
        relative_path = os.path.join('2022', '1', '15-0830-test.txt')
        result = parse_date_from_file_path(relative_path, '15-0830-test.txt', FilesystemStructure.MONTH, True, logger)
        assert result == utc(2022, 1, 15, 8, 30)

    def test_none_structure_ignores_directories(self, logger):
        relative_path = os.path.join('misc', '2022-01-15-0830-test.txt')
        result = parse_date_from_file_path(relative_path, '2022-01-15-0830-test.txt', 'none', True, logger)
        assert result == utc(2022, 1, 15, 8, 30)

    def test_relative_path_without_filename(self, logger):
        result = parse_date_from_file_path(os.path.join('2022', '01'), '15-0830.md', 'month', True, logger)
        assert result == utc(2022, 1, 15, 8, 30)

    def test_time_not_parsed(self, logger):
        relative_path = os.path.join('2022', '01', '15', 'notes.txt')
        result = parse_date_from_file_path(relative_path, 'notes.txt', 'day', False, logger)
        assert result == utc(2022, 1, 15, 0, 0)

    @pytest.mark.parametrize('structure', ['none', 'year', 'month', 'day'])
    @pytest.mark.parametrize('date', [
        utc(2024, 1, 1, 0, 0),
        utc(2023, 12, 31, 23, 59),
        utc(2024, 2, 29, 7, 5),
    ])
    def test_round_trip(self, structure, date, logger):
        """Кодирование и последующее декодирование возвращают исходную дату."""
        structure = FilesystemStructure(structure)
        relative_path, filename = encode(date, structure, with_time=True)
        assert parse_date_from_file_path(relative_path, filename, structure, True, logger) == date

        relative_path, filename = encode(date, structure, with_time=False)
        expected = date.replace(hour=0, minute=0)
        assert parse_date_from_file_path(relative_path, filename, structure, False, logger) == expected

    @pytest.mark.parametrize('structure,relative_path', [
        ('none', 'notes.txt'),
        ('none', '2022-01-15.txt'),
        ('year', '01-15-0830.txt'),
        ('year', os.path.join('abcd', '01-15-0830.txt')),
        ('year', os.path.join('2022', '13-15-0830.txt')),
        ('month', os.path.join('2022', '15-0830.txt')),
        ('month', os.path.join('2022', '13', '15-0830.txt')),
        ('month', os.path.join('2022', 'jan', '15-0830.txt')),
        ('month', os.path.join('2022', '02', '30-0830.txt')),
        ('day', os.path.join('2022', '01', '0830.txt')),
        ('day', os.path.join('2022', '01', '32', '0830.txt')),
        ('day', os.path.join('2022', '01', '15', '2460.txt')),
        ('day', os.path.join('2022', '01', '15', 'note.txt')),
    ])
    def test_invalid_paths_return_none(self, structure, relative_path, logger):
        filename = os.path.basename(relative_path)
        assert parse_date_from_file_path(relative_path, filename, structure, True, logger) is None

    @pytest.mark.parametrize('structure,relative_path', [
        ('year', os.path.join('２０２２', '01-15.md')),
        ('month', os.path.join('２０２２', '01', '15.md')),
        ('month', os.path.join('2022', '０１', '15.md')),
        ('day', os.path.join('2022', '01', '１５', 'note.md')),
    ])
    def test_non_ascii_digits_in_directories(self, structure, relative_path, logger):
        """Цифры в каталогах принимаются только ASCII, как и в имени файла."""
        filename = os.path.basename(relative_path)
        assert parse_date_from_file_path(relative_path, filename, structure, False, logger) is None

    def test_non_ascii_digits_in_filename(self, logger):
        assert parse_date_from_file_path('２０２２-01-15.md', '２０２２-01-15.md', 'none', False, logger) is None

    def test_invalid_directory_is_logged(self, logger):
        relative_path = os.path.join('2022', '13', '15-0830.txt')
        parse_date_from_file_path(relative_path, '15-0830.txt', 'month', True, logger)
        logger.warning.assert_called_once()

    def test_unknown_structure_raises(self, logger):
        with pytest.raises(ArgumentError):
            parse_date_from_file_path('2022/01-15.txt', '01-15.txt', 'week', True, logger)
        logger.error.assert_called_once()


class TestFormatDate:
    """Тесты для format_date."""

    @pytest.fixture
    def dates(self):
        return DateUtility('UTC')

    def test_none(self, dates):
        assert format_date(utc(2024, 6, 5), 'none', dates) == '2024-06-05'

    def test_year(self, dates):
        assert format_date(utc(2024, 6, 5), 'year', dates) == '06-05'

    def test_month(self, dates):
        assert format_date(utc(2024, 6, 5), FilesystemStructure.MONTH, dates) == '05'

    def test_day_is_rejected(self, dates):
        with pytest.raises(ArgumentError) as exc_info:
            format_date(utc(2024, 6, 5), 'day', dates)
        assert exc_info.value.argument == '--output-filename-options'

    def test_missing_structure(self, dates):
        with pytest.raises(ArgumentError):
            format_date(utc(2024, 6, 5), None, dates)

    def test_uses_timezone(self):
        dates = DateUtility('Asia/Tokyo')
        assert format_date(utc(2024, 6, 5, 20, 0), 'none', dates) == '2024-06-06'
