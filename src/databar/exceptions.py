"""
Исключения кодировщика GS1 DataBar.

Иерархия типизированных исключений для всех вариантов DataBar.
Ошибки входных данных отделены от нарушений внутренних инвариантов:
первые сообщаются вызывающему коду, вторые означают ошибку в самом
кодировщике и никогда не перехватываются внутри пакета.

Example:
    >>> from src.databar.exceptions import InvalidValueError
    >>> try:
    ...     encode("12345678901234", DataBarVariant.OMNIDIRECTIONAL)
    ... except InvalidValueError as e:
    ...     logger.error(f"Cannot encode: {e}")

Иерархия:
    DataBarError (базовое)
    ├── InvalidValueError          (также ValueError)
    │   └── UnsupportedAIError
    └── EncodingInvariantError     (также AssertionError)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__: list[str] = [
    "DataBarError",
    "InvalidValueError",
    "UnsupportedAIError",
    "EncodingInvariantError",
]


# ==============================================================================
# BASE EXCEPTION
# ==============================================================================


class DataBarError(Exception):
    """
    Базовое исключение для всех ошибок кодирования DataBar.

    Attributes:
        message: Человекочитаемое сообщение об ошибке
        variant: Вариант символики, при кодировании которого возникла ошибка
        context: Дополнительный контекст для отладки (опционально)

    Example:
        >>> raise DataBarError("Encoding failed", variant="expanded")
    """

    def __init__(
        self,
        message: str,
        *,
        variant: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.variant = variant
        self.context = context or {}

    def __str__(self) -> str:
        """
        Строковое представление исключения.

        Example:
            >>> str(error)
            'InvalidValueError: Bad check digit [variant=omnidirectional]'
        """
        parts = [self.__class__.__name__, ": ", self.message]

        if self.variant:
            parts.append(f" [variant={self.variant}]")

        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f" ({ctx_str})")

        return "".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"variant={self.variant!r}, "
            f"context={self.context!r})"
        )


# ==============================================================================
# INPUT ERRORS
# ==============================================================================


class InvalidValueError(DataBarError, ValueError):
    """
    Значение не может быть закодировано выбранным вариантом.

    Raises когда:
    - Неверная длина или нецифровые символы GTIN
    - Неверная контрольная цифра
    - Нарушена скобочная запись AI или пустые данные
    - Данные превышают ёмкость символа (74 цифры / 41 буквенный символ)

    Всегда обнаруживается до начала кодирования, символ не строится частично.
    """

    pass


class UnsupportedAIError(InvalidValueError):
    """
    Application Identifier отсутствует в таблице AI.

    Attributes:
        ai: Запрошенный идентификатор
    """

    def __init__(self, ai: str, *, variant: Optional[str] = None) -> None:
        super().__init__(
            f"Unsupported application identifier ({ai})",
            variant=variant,
            context={"ai": ai},
        )
        self.ai = ai


# ==============================================================================
# INTERNAL ERRORS
# ==============================================================================


class EncodingInvariantError(DataBarError, AssertionError):
    """
    Нарушен внутренний инвариант кодировщика.

    Raises когда:
    - Число элементов собранного символа не совпадает с ожидаемым (46 для
      Omnidirectional, 25 в каждой строке Stacked, 47 для Limited)
    - Значение знака вне диапазона таблицы комбинаций

    Означает ошибку в кодировщике, а не во входных данных. Повторный вызов
    с теми же данными не поможет.
    """

    pass
