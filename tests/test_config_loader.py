"""
Тесты для модуля config_loader.py
"""

import os
import tempfile
from pathlib import Path

import pytest

from filecabinet.config_loader import (
    Config,
    InputConfig,
    apply_defaults,
    apply_overrides,
    load_config,
    validate_config,
)
from filecabinet.constants import FEATURE_INPUT, FEATURE_OUTPUT
from filecabinet.errors import ArgumentError
from filecabinet.structure import FilenameOption, FilesystemStructure


def write_ini(content: str) -> str:
    """Записывает временный файл конфигурации и возвращает путь."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.ini', delete=False, encoding='utf-8') as f:
        f.write(content)
        return f.name


@pytest.fixture
def dirs(tmp_path):
    """Входной и выходной каталоги."""
    input_dir = tmp_path / 'notes'
    output_dir = tmp_path / 'archive'
    input_dir.mkdir()
    output_dir.mkdir()
    return input_dir, output_dir


def overrides_for(dirs, **kwargs):
    input_dir, output_dir = dirs
    values = {'input_directory': str(input_dir), 'output_directory': str(output_dir)}
    values.update(kwargs)
    return values


class TestConfigLoader:
    """Тесты для класса ConfigLoader."""

    def test_load_config_success(self, dirs):
        """Тест успешной загрузки конфигурации из файла."""
        input_dir, output_dir = dirs
        temp_config = write_ini(f"""[general]
timezone = Europe/Moscow

[input]
directory = {input_dir}
concurrency = 4
limit = 50
structure = day
filename_options = time
extensions = md txt
start = 2024-01-01
end = 2024-02-01

[output]
directory = {output_dir}
structure = year
filename_options = date subject

[logging]
level = DEBUG
max_log_size = 2
backup_count = 1
""")
        try:
            config = load_config(temp_config)
        finally:
            os.unlink(temp_config)

        assert config.timezone == 'Europe/Moscow'
        assert config.input.directory == input_dir
        assert config.input.concurrency == 4
        assert config.input.limit == 50
        assert config.input.structure == FilesystemStructure.DAY
        assert config.input.filename_options == [FilenameOption.TIME]
        assert config.input.extensions == ['md', 'txt']
        assert config.input.start == '2024-01-01'
        assert config.input.end == '2024-02-01'
        assert config.output.directory == output_dir
        assert config.output.structure == FilesystemStructure.YEAR
        assert config.output.filename_options == [FilenameOption.DATE, FilenameOption.SUBJECT]
        assert config.logging.level == 'DEBUG'
        assert config.logging.log_file is None
        assert config.logging.max_log_size == 2

    def test_config_file_not_found(self):
        """Тест ошибки при отсутствии файла конфигурации."""
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent_config.ini")

    def test_malformed_file(self):
        temp_config = write_ini("no section header\n")
        try:
            with pytest.raises(ValueError, match="Ошибка загрузки конфигурации"):
                load_config(temp_config)
        finally:
            os.unlink(temp_config)

    def test_invalid_number(self, dirs):
        temp_config = write_ini("[input]\nlimit = many\n")
        try:
            with pytest.raises(ArgumentError):
                load_config(temp_config, overrides_for(dirs))
        finally:
            os.unlink(temp_config)

    def test_invalid_structure_in_file(self):
        temp_config = write_ini("[output]\nstructure = week\n")
        try:
            with pytest.raises(ArgumentError) as exc_info:
                load_config(temp_config)
            assert exc_info.value.argument == '--output-structure'
        finally:
            os.unlink(temp_config)

    def test_overrides_take_precedence(self, dirs):
        temp_config = write_ini("[input]\nstructure = day\nconcurrency = 2\n")
        try:
            config = load_config(temp_config, overrides_for(dirs, input_structure='year', concurrency=8))
        finally:
            os.unlink(temp_config)

        assert config.input.structure == FilesystemStructure.YEAR
        assert config.input.concurrency == 8


class TestDefaults:
    """Тесты для apply_defaults."""

    def test_all_features(self, dirs):
        config = load_config(None, overrides_for(dirs))

        assert config.timezone == 'Etc/UTC'
        assert config.input.recursive is False
        assert config.input.concurrency == 1
        assert config.input.extensions == ['md']
        assert config.input.structure == FilesystemStructure.MONTH
        assert config.input.filename_options == [FilenameOption.DATE, FilenameOption.TIME]
        assert config.output.structure == FilesystemStructure.MONTH
        assert config.output.filename_options == [FilenameOption.DATE, FilenameOption.SUBJECT]

    def test_directories(self):
        config = apply_defaults(Config())
        assert config.input.directory == Path('./')
        assert config.output.directory == Path('./')

    def test_only_enabled_features(self):
        config = apply_defaults(Config(features=[FEATURE_INPUT]))

        assert config.input.directory == Path('./')
        assert config.output.directory is None
        assert config.output.structure is None
        assert config.input.structure is None
        assert config.input.extensions is None

    @pytest.mark.parametrize('value', [0, -3, 'four', True])
    def test_invalid_concurrency_reset(self, value):
        config = Config(input=InputConfig(concurrency=value))
        assert apply_defaults(config).input.concurrency == 1

    def test_explicit_values_kept(self):
        config = Config(input=InputConfig(recursive=True, extensions=['txt']))
        config = apply_defaults(config)
        assert config.input.recursive is True
        assert config.input.extensions == ['txt']


class TestOverrides:
    """Тесты для apply_overrides."""

    def test_none_values_skipped(self):
        config = Config(timezone='Europe/Berlin')
        apply_overrides(config, {'timezone': None, 'unknown': 'x'})
        assert config.timezone == 'Europe/Berlin'

    def test_conversion(self):
        config = apply_overrides(Config(), {'output_structure': 'day', 'output_directory': 'out'})
        assert config.output.structure == FilesystemStructure.DAY
        assert config.output.directory == Path('out')

    def test_invalid_structure(self):
        with pytest.raises(ArgumentError) as exc_info:
            apply_overrides(Config(), {'input_structure': 'week'})
        assert exc_info.value.argument == '--input-structure'


class TestValidation:
    """Тесты для validate_config."""

    def test_invalid_timezone(self, dirs):
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, overrides_for(dirs, timezone='Mars/Base'))
        assert exc_info.value.argument == '--timezone'

    def test_unknown_feature(self):
        with pytest.raises(ArgumentError):
            validate_config(Config(timezone='Etc/UTC', features=['teleport']))

    def test_missing_input_directory(self, tmp_path):
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, {'input_directory': str(tmp_path / 'missing'), 'output_directory': str(tmp_path)})
        assert exc_info.value.argument == '--input-directory'

    def test_missing_output_directory_allowed(self, dirs, tmp_path):
        """Несуществующий выходной каталог будет создан при построении путей."""
        config = load_config(None, overrides_for(dirs, output_directory=str(tmp_path / 'new')))
        assert config.output.directory == tmp_path / 'new'

    def test_output_directory_is_file(self, dirs, tmp_path):
        path = tmp_path / 'file.txt'
        path.write_text('x', encoding='utf-8')
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, overrides_for(dirs, output_directory=str(path)))
        assert exc_info.value.argument == '--output-directory'

    def test_invalid_limit(self, dirs):
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, overrides_for(dirs, limit=0))
        assert exc_info.value.argument == '--limit'

    def test_date_with_day_structure(self, dirs):
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, overrides_for(dirs, output_structure='day', output_filename_options=['date']))
        assert exc_info.value.argument == '--output-filename-options'

    def test_input_date_with_day_structure(self, dirs):
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, overrides_for(dirs, input_structure='day', input_filename_options=['date', 'time']))
        assert exc_info.value.argument == '--input-filename-options'

    def test_comma_separated_options(self, dirs):
        with pytest.raises(ArgumentError, match="через запятую"):
            load_config(None, overrides_for(dirs, output_filename_options=['date,time']))

    def test_quoted_options(self, dirs):
        with pytest.raises(ArgumentError, match="кавычки"):
            load_config(None, overrides_for(dirs, output_filename_options=['date time']))

    def test_unknown_option(self, dirs):
        with pytest.raises(ArgumentError, match="weekday"):
            load_config(None, overrides_for(dirs, output_filename_options=['date', 'weekday']))

    def test_extension_with_dot(self, dirs):
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, overrides_for(dirs, extensions=['.md']))
        assert exc_info.value.argument == '--extensions'

    def test_invalid_start_format(self, dirs):
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, overrides_for(dirs, start='01/02/2024'))
        assert exc_info.value.argument == '--start'

    def test_start_after_end(self, dirs):
        with pytest.raises(ArgumentError) as exc_info:
            load_config(None, overrides_for(dirs, start='2024-03-01', end='2024-02-01'))
        assert exc_info.value.argument == '--start'

    def test_disabled_feature_not_validated(self, tmp_path):
        config = Config(timezone='Etc/UTC', features=[FEATURE_OUTPUT])
        config.input.directory = tmp_path / 'missing'
        validate_config(config)
