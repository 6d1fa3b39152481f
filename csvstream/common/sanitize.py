def truncateText(value: str | None, limit: int = 200) -> str | None:
    """
    Назначение:
        Обрезает превью записи для DEBUG-лога, чтобы длинные поля не раздували log-файл.
        Обрезанный текст заканчивается на "...".
    """
    if value is None or len(value) <= limit:
        return value
    if limit <= 3:
        return value[:limit]
    return value[: limit - 3] + "..."
