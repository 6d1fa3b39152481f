from __future__ import annotations

from datetime import datetime


def getNowIso() -> str:
    """
    Назначение:
        Возвращает текущее время в ISO 8601 с timezone.

    Выходные данные:
        str
            Например: 2026-01-11T18:22:10+01:00
    """
    return datetime.now().astimezone().isoformat()


def getDurationMs(startMonotonic: float, endMonotonic: float) -> int:
    """
    Назначение:
        Длительность команды в миллисекундах по monotonic-отметкам.
    """
    return int((endMonotonic - startMonotonic) * 1000)
