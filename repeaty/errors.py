"""Исключения Repeaty.

Все ошибки загрузки, проверки и записи наследуются от `RepeatyError`,
поэтому слой представления может поймать одно исключение и показать `str(exc)`.
Неоднозначные метаданные (`pHYs` не в метрах, разная плотность по осям)
ошибкой не считаются: они только логируются.
"""
from __future__ import annotations


class RepeatyError(Exception):
    """Базовая ошибка приложения с понятным пользователю сообщением."""


class UnsupportedFormatError(RepeatyError):
    """Расширение входного файла не поддерживается."""


class PngDecodeError(RepeatyError):
    """Входной PNG повреждён или не может быть прочитан."""


class BadSignatureError(PngDecodeError):
    pass


class TruncatedChunkError(PngDecodeError):
    pass


class BadChunkTypeError(PngDecodeError):
    pass


class MalformedPhysError(PngDecodeError):
    pass


class ValidationError(RepeatyError):
    """Параметры вывода недопустимы (<= 0, NaN, бесконечность)."""


class EncodeError(RepeatyError):
    """Не удалось записать выходной PNG."""
