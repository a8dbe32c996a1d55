"""
Константы и значения по умолчанию.
"""

# Форматы дат (strftime)
DATE_FORMAT_YEAR = "%Y"
DATE_FORMAT_MONTH = "%m"
DATE_FORMAT_DAY = "%d"
DATE_FORMAT_MONTH_DAY = "%m-%d"
DATE_FORMAT_YEAR_MONTH_DAY = "%Y-%m-%d"
DATE_FORMAT_HOURS_MINUTES = "%H%M"

# Окно выборки по умолчанию (дней до "сейчас")
DEFAULT_DATE_RANGE_DAYS = 31

DEFAULT_TIMEZONE = "Etc/UTC"
DEFAULT_RECURSIVE = False
DEFAULT_CONCURRENCY = 1
DEFAULT_INPUT_DIRECTORY = "./"
DEFAULT_OUTPUT_DIRECTORY = "./"
DEFAULT_EXTENSIONS = ["md"]
DEFAULT_INPUT_STRUCTURE = "month"
DEFAULT_INPUT_FILENAME_OPTIONS = ["date", "time"]
DEFAULT_OUTPUT_STRUCTURE = "month"
DEFAULT_OUTPUT_FILENAME_OPTIONS = ["date", "subject"]

ALLOWED_STRUCTURES = ["none", "year", "month", "day"]
ALLOWED_FILENAME_OPTIONS = ["date", "time", "subject"]

# Заглушка для пустой темы в имени файла
UNTITLED = "untitled"

FEATURE_INPUT = "input"
FEATURE_OUTPUT = "output"
FEATURE_STRUCTURED_INPUT = "structured-input"
FEATURE_STRUCTURED_OUTPUT = "structured-output"
FEATURE_EXTENSIONS = "extensions"

ALL_FEATURES = [
    FEATURE_INPUT,
    FEATURE_OUTPUT,
    FEATURE_STRUCTURED_INPUT,
    FEATURE_STRUCTURED_OUTPUT,
    FEATURE_EXTENSIONS,
]
