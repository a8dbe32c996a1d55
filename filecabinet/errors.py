"""
Исключения, общие для всех модулей пакета.
"""


class ArgumentError(ValueError):
    """Ошибка конфигурации, привязанная к конкретному параметру (флагу CLI)."""

    def __init__(self, argument: str, message: str):
        """
        Args:
            argument: Имя параметра, например ``--start``
            message: Понятное пользователю описание проблемы
        """
        self.argument = argument
        self.message = message
        super().__init__(f"{argument}: {message}")
