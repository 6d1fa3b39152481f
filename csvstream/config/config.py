from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import yaml


@dataclass(frozen=True)
class Settings:
    # Paths
    log_dir: str = "./logs"
    report_dir: str = "./reports"

    # Logging
    log_level: str = "INFO"

    # Parsing
    encoding: str = "utf-8-sig"
    keep_quoted_cr: bool = False
    emit_dangling_row: bool = False


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


ENV_NAMES = {
    "log_dir": "CSVSTREAM_LOG_DIR",
    "report_dir": "CSVSTREAM_REPORT_DIR",
    "log_level": "CSVSTREAM_LOG_LEVEL",
    "encoding": "CSVSTREAM_ENCODING",
    "keep_quoted_cr": "CSVSTREAM_KEEP_QUOTED_CR",
    "emit_dangling_row": "CSVSTREAM_EMIT_DANGLING_ROW",
}

BOOL_KEYS = ("keep_quoted_cr", "emit_dangling_row")


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def parse_bool(v: str) -> bool:
    vv = v.lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean value: {v}")


def _cfg_value(cfg: dict, key: str, default):
    v = cfg.get(key)
    if v is None:
        return default
    if isinstance(default, bool):
        return parse_bool(str(v)) if not isinstance(v, bool) else v
    if isinstance(v, str) and v.strip() == "":
        return default
    return v


def loadSettings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # empty YAML keys (`encoding:`) fall back to defaults
    merged = {key: _cfg_value(cfg, key, getattr(defaults, key)) for key in ENV_NAMES}

    # 2) env
    env = {key: _env_get(name) for key, name in ENV_NAMES.items()}
    if any(v is not None for v in env.values()):
        sources.append("env")

    for key, value in env.items():
        if value is None:
            continue
        merged[key] = parse_bool(value) if key in BOOL_KEYS else value

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(
        log_dir=str(merged["log_dir"]),
        report_dir=str(merged["report_dir"]),
        log_level=str(merged["log_level"]),
        encoding=str(merged["encoding"]),
        keep_quoted_cr=bool(merged["keep_quoted_cr"]),
        emit_dangling_row=bool(merged["emit_dangling_row"]),
    )

    return LoadedSettings(settings=settings, sources_used=sources)
