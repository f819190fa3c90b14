from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from opportunity_crawler.extractors.base import ExtractorKind
from opportunity_crawler.utils.datetime_utils import parse_daily_time

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
_FETCHER_TYPES = {"playwright", "requests"}
_STORAGE_TYPES = {"sqlite", "none"}


class ConfigError(ValueError):
    """Raised when configuration is invalid."""


@dataclass(slots=True, frozen=True)
class TargetSettings:
    name: str
    url: str
    extractor: ExtractorKind
    category: str | None = None


@dataclass(slots=True)
class BrowserSettings:
    fetcher: str = "playwright"
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    navigation_timeout_ms: int = 60000
    max_attempts: int = 3
    retry_delay_seconds: float = 3.0
    settle_delay_seconds: float = 5.0


@dataclass(slots=True)
class StorageSettings:
    type: str = "sqlite"
    path: str = "data/opportunities.sqlite"
    path_env_var: str | None = None


@dataclass(slots=True)
class ScheduleSettings:
    daily_at: str = "03:00"
    run_on_startup: bool = True

    @property
    def hour_minute(self) -> tuple[int, int]:
        return parse_daily_time(self.daily_at)


@dataclass(slots=True)
class AppConfig:
    targets: list[TargetSettings]
    browser: BrowserSettings = field(default_factory=BrowserSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    schedule: ScheduleSettings = field(default_factory=ScheduleSettings)
    log_level: str = "INFO"


def _as_bool(value: Any, *, field_name: str) -> bool:
    if isinstance(value, bool):
        return value

    if isinstance(value, int) and value in {0, 1}:
        return bool(value)

    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes", "on"}:
            return True
        if normalized in {"false", "0", "no", "off"}:
            return False

    raise ConfigError(f"{field_name} must be a boolean")


def _as_int(value: Any, *, field_name: str, minimum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be an integer")

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc

    if minimum is not None and parsed < minimum:
        raise ConfigError(f"{field_name} must be >= {minimum}")
    return parsed


def _as_float(value: Any, *, field_name: str, minimum: float = 0.0) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be a number")

    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be a number") from exc

    if parsed < minimum:
        raise ConfigError(f"{field_name} must be >= {minimum}")
    return parsed


def _as_mapping(parsed: dict[str, Any], key: str) -> dict[str, Any]:
    value = parsed.get(key, {}) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping")
    return value


def _resolve_relative_path(config_path: Path, raw_path: str) -> str:
    candidate = Path(raw_path).expanduser()
    if candidate.is_absolute():
        return str(candidate)
    return str((config_path.parent / candidate).resolve())


def _parse_target(index: int, raw: Any) -> TargetSettings:
    if not isinstance(raw, dict):
        raise ConfigError(f"Target entry #{index} must be a mapping")

    name = str(raw.get("name", "")).strip()
    url = str(raw.get("url", "")).strip()
    extractor_raw = str(raw.get("extractor", "")).strip()
    if not name or not url or not extractor_raw:
        raise ConfigError(f"Target entry #{index} missing one of: name, url, extractor")

    try:
        extractor = ExtractorKind(extractor_raw)
    except ValueError as exc:
        available = ", ".join(item.value for item in ExtractorKind)
        raise ConfigError(
            f"Target entry #{index} has unknown extractor '{extractor_raw}'. "
            f"Known extractors: {available}"
        ) from exc

    category = str(raw.get("category") or "").strip() or None
    return TargetSettings(name=name, url=url, extractor=extractor, category=category)


def load_config(path: str | Path) -> AppConfig:
    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        parsed = yaml.safe_load(handle) or {}

    if not isinstance(parsed, dict):
        raise ConfigError("Config root must be a mapping")

    raw_targets = parsed.get("targets", [])
    if not isinstance(raw_targets, list) or not raw_targets:
        raise ConfigError("Config must define at least one target")

    targets = [_parse_target(index, raw) for index, raw in enumerate(raw_targets, start=1)]

    raw_browser = _as_mapping(parsed, "browser")
    fetcher = str(raw_browser.get("fetcher", "playwright")).strip().lower() or "playwright"
    if fetcher not in _FETCHER_TYPES:
        raise ConfigError(f"Unsupported fetcher: {fetcher}")

    browser_settings = BrowserSettings(
        fetcher=fetcher,
        headless=_as_bool(raw_browser.get("headless", True), field_name="browser.headless"),
        user_agent=str(raw_browser.get("user_agent") or DEFAULT_USER_AGENT).strip(),
        navigation_timeout_ms=_as_int(
            raw_browser.get("navigation_timeout_ms", 60000),
            field_name="browser.navigation_timeout_ms",
            minimum=1,
        ),
        max_attempts=_as_int(
            raw_browser.get("max_attempts", 3),
            field_name="browser.max_attempts",
            minimum=1,
        ),
        retry_delay_seconds=_as_float(
            raw_browser.get("retry_delay_seconds", 3),
            field_name="browser.retry_delay_seconds",
        ),
        settle_delay_seconds=_as_float(
            raw_browser.get("settle_delay_seconds", 5),
            field_name="browser.settle_delay_seconds",
        ),
    )

    raw_storage = _as_mapping(parsed, "storage")
    storage_type = str(raw_storage.get("type", "sqlite")).strip().lower() or "sqlite"
    if storage_type not in _STORAGE_TYPES:
        raise ConfigError(f"Unsupported storage type: {storage_type}")

    raw_path = str(raw_storage.get("path") or "").strip() or "data/opportunities.sqlite"
    storage_settings = StorageSettings(
        type=storage_type,
        path=_resolve_relative_path(config_path, raw_path),
        path_env_var=str(raw_storage.get("path_env_var") or "").strip() or None,
    )

    raw_schedule = _as_mapping(parsed, "schedule")
    daily_at = str(raw_schedule.get("daily_at", "03:00")).strip()
    try:
        parse_daily_time(daily_at)
    except ValueError as exc:
        raise ConfigError(f"schedule.daily_at must be HH:MM ({exc})") from exc

    schedule_settings = ScheduleSettings(
        daily_at=daily_at,
        run_on_startup=_as_bool(
            raw_schedule.get("run_on_startup", True),
            field_name="schedule.run_on_startup",
        ),
    )

    return AppConfig(
        targets=targets,
        browser=browser_settings,
        storage=storage_settings,
        schedule=schedule_settings,
        log_level=str(parsed.get("log_level", "INFO")).upper(),
    )
