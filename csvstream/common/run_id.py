from __future__ import annotations

import uuid


def generate_run_id() -> str:
    """
    Назначение:
        run_id для команды csvstream, если --run-id не передан.
        Используется в именах log-файла и report.json.
    """
    return uuid.uuid4().hex
