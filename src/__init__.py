"""
Пакет GS1 DataBar Encoder
=========================

Кодировщик штрихкодов семейства GS1 DataBar (ISO/IEC 24724).

Этот пакет предоставляет:
    - Omnidirectional, Truncated, Stacked, Stacked Omnidirectional и Limited для GTIN
    - Expanded и Expanded Stacked для строк элементов GS1 (AI)
    - Модель символа: ряды пробегов штрихов и пробелов в модулях
    - Предпросмотр через Pillow (PNG и другие форматы)
    - Доменную модель Barcode с валидацией и сериализацией

Пример базового использования:
    >>> from src.databar import encode, render_bytes
    >>> from src.model.enums import DataBarVariant
    >>>
    >>> symbol = encode("(01)01234567890128", DataBarVariant.STACKED)
    >>> [row.height for row in symbol.rows]
    [5, 1, 7]
    >>> png = render_bytes(symbol)

Логирование:
    >>> from src import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Отладочное логирование теперь включено")

Уровень логирования задаётся переменной окружения DATABAR_LOG_LEVEL,
файл журнала (опционально) переменной DATABAR_LOG_FILE.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Dict

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__author__ = "GS1 DataBar Encoder Development Team"
__description__ = "GS1 DataBar barcode encoder (all variants)"
__license__ = "MIT"
__python_requires__ = ">=3.11"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

# =============================================================================
# ПРОВЕРКА ВЕРСИИ PYTHON
# =============================================================================

if sys.version_info < (3, 11):
    raise RuntimeError(
        f"GS1 DataBar Encoder требует Python 3.11 или выше. "
        f"Текущая версия: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================

_PACKAGE_LOGGER = __name__

_LOG_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _setup_logging() -> None:
    """
    Инициализировать общепакетную конфигурацию логирования.

    Настраивает логгер пакета с:
    - Консольным обработчиком (stderr) для WARNING и выше
    - Ротирующим файловым обработчиком, если задан DATABAR_LOG_FILE

    Идемпотентна: повторные вызовы не добавляют обработчиков.
    """
    log_level = _LOG_LEVELS.get(
        os.environ.get("DATABAR_LOG_LEVEL", "INFO").upper(), logging.INFO
    )

    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    if package_logger.handlers:
        return

    package_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    log_file = os.environ.get("DATABAR_LOG_FILE")
    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                filename=Path(log_file),
                maxBytes=10 * 1024 * 1024,  # 10 МБ
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
        except OSError as e:
            package_logger.warning(
                "Не удалось инициализировать файловое логирование: %s. "
                "Используется только консоль.",
                e,
            )


def get_logger(module_name: str) -> logging.Logger:
    """
    Получить логгер в пространстве имён пакета.

    Аргументы:
        module_name: Обычно ``__name__``; ``"__main__"`` отображается
            в ``src.main``.

    Возвращает:
        Экземпляр logging.Logger, наследующий обработчики пакета.

    Пример:
        >>> get_logger("databar.encoder").name
        'src.databar.encoder'
    """
    if not module_name or module_name == _PACKAGE_LOGGER:
        return logging.getLogger(_PACKAGE_LOGGER)
    if module_name.startswith(_PACKAGE_LOGGER + "."):
        return logging.getLogger(module_name)
    if module_name == "__main__":
        return logging.getLogger(f"{_PACKAGE_LOGGER}.main")
    return logging.getLogger(f"{_PACKAGE_LOGGER}.{module_name.lstrip('.')}")


def check_dependencies() -> Dict[str, bool]:
    """
    Проверить, установлены ли зависимости пакета.

    Возвращает:
        Словарь: имя пакета → доступен ли он.
    """
    dependencies: Dict[str, bool] = {}

    # Pillow нужен только для предпросмотра (render_image / render_bytes)
    try:
        import PIL  # noqa: F401

        dependencies["pillow"] = True
    except ImportError:
        dependencies["pillow"] = False

    return dependencies


__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "__license__",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "VERSION_PATCH",
    "get_logger",
    "check_dependencies",
]

_setup_logging()
