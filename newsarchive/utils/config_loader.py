from __future__ import annotations

import re
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Pattern
from urllib.parse import urlparse

import yaml

from ..models import CrawlSettings, PublisherConfig
from ..models.publisher import scope_for


class ConfigError(Exception):
    """Raised when the configuration file is invalid or missing required fields."""


REQUIRED_FIELDS = {
    "name",
    "start_url",
    "article_url_pattern",
    "category_url_pattern",
    "timestamp_pattern",
}

# Settings stored as tuples on the frozen dataclass; YAML gives us lists.
_TUPLE_SETTINGS = {
    "retry_status_codes",
    "default_content_selectors",
    "article_types",
    "rejected_types",
    "breadcrumb_types",
}
_SETTING_NAMES = {f.name for f in fields(CrawlSettings)}

_OFFSET_RE = re.compile(r"Z|[+-]\d{2}:?\d{2}")


def _compile(entry: dict, key: str) -> Pattern[str]:
    raw = entry.get(key)
    if not isinstance(raw, str) or not raw:
        raise ConfigError(f"'{key}' must be a non-empty string in publisher '{entry.get('name')}'")
    try:
        return re.compile(raw)
    except re.error as exc:
        raise ConfigError(f"Invalid regular expression for '{key}': {raw!r} ({exc})") from exc


def _string_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings if provided")
    return [v.strip() for v in value if v.strip()]


def _coerce_settings(raw: dict, *, base: Optional[CrawlSettings] = None) -> CrawlSettings:
    """Build ``CrawlSettings`` from a mapping layered on top of ``base``."""
    if not isinstance(raw, dict):
        raise ConfigError("'settings' must be a mapping")
    unknown = set(raw) - _SETTING_NAMES
    if unknown:
        raise ConfigError(f"Unknown settings: {sorted(unknown)}")

    base = base or CrawlSettings()
    values: Dict[str, Any] = {name: getattr(base, name) for name in _SETTING_NAMES}
    for key, value in raw.items():
        default = getattr(base, key)
        try:
            if key in _TUPLE_SETTINGS:
                if not isinstance(value, list):
                    raise ConfigError(f"'{key}' must be a list")
                values[key] = tuple(int(v) for v in value) if key == "retry_status_codes" else tuple(
                    _string_list(value, key)
                )
            elif isinstance(default, bool):
                values[key] = bool(value)
            elif isinstance(default, int):
                values[key] = int(value)
            elif isinstance(default, float):
                values[key] = float(value)
            else:
                values[key] = str(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for setting '{key}': {value!r}") from exc

    settings = CrawlSettings(**values)
    if settings.max_retries < 1:
        raise ConfigError("'max_retries' must be at least 1")
    if settings.max_urls_per_crawl < 1:
        raise ConfigError("'max_urls_per_crawl' must be at least 1")
    if min(settings.default_max_level, settings.max_level_within_six_months) < 0:
        raise ConfigError("Traversal depths must not be negative")
    if settings.request_delay_seconds < 0 or settings.retry_delay_seconds < 0:
        raise ConfigError("Delays must not be negative")
    return settings


def _validate_publisher_dict(entry: dict) -> None:
    """Validate a single publisher mapping from YAML.

    Required fields: name, start_url (http/https), article_url_pattern,
    category_url_pattern, timestamp_pattern (one capture group).
    """
    missing = REQUIRED_FIELDS - set(entry)
    if missing:
        raise ConfigError(f"Missing required fields: {sorted(missing)} in publisher '{entry.get('name')}'")

    url_str = str(entry["start_url"]).strip()
    parsed = urlparse(url_str)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"Invalid start_url '{url_str}'. Must be absolute http(s) URL.")

    offset = entry.get("default_offset")
    if offset is not None and not _OFFSET_RE.fullmatch(str(offset)):
        raise ConfigError(f"Invalid default_offset '{offset}'. Expected e.g. '+07:00'.")

    if "category_position" in entry and not isinstance(entry["category_position"], int):
        raise ConfigError("'category_position' must be an integer")

    if "headers" in entry and entry["headers"] is not None:
        headers = entry["headers"]
        if not isinstance(headers, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in headers.items()):
            raise ConfigError("'headers' must be a mapping of string keys to string values if provided")


def _coerce_publisher(entry: dict, settings: CrawlSettings) -> PublisherConfig:
    start_url = str(entry["start_url"]).strip()
    timestamp_pattern = _compile(entry, "timestamp_pattern")
    if timestamp_pattern.groups < 1:
        raise ConfigError("'timestamp_pattern' must contain one capture group")

    scope = _compile(entry, "link_scope_pattern") if entry.get("link_scope_pattern") else scope_for(start_url)
    overrides = entry.get("overrides") or {}

    return PublisherConfig(
        name=str(entry["name"]).strip(),
        start_url=start_url,
        article_url_pattern=_compile(entry, "article_url_pattern"),
        category_url_pattern=_compile(entry, "category_url_pattern"),
        timestamp_pattern=timestamp_pattern,
        link_scope_pattern=scope,
        content_selectors=tuple(_string_list(entry.get("content_selectors"), "content_selectors")),
        category_position=int(entry.get("category_position", 1)),
        nested_breadcrumb=bool(entry.get("nested_breadcrumb", False)),
        category_url_field=str(entry.get("category_url_field") or "item"),
        category_url_suffix=str(entry.get("category_url_suffix") or ""),
        default_offset=str(entry.get("default_offset") or "+00:00"),
        headers={str(k): str(v) for k, v in (entry.get("headers") or {}).items()},
        settings=_coerce_settings(overrides, base=settings),
    )


def load_publisher_config(path: Path | str, publisher: Optional[str] = None) -> PublisherConfig:
    """Load ``publishers.yaml`` and resolve the configuration of one publisher.

    YAML structure:
      - ``current_publisher``: name used when ``publisher`` is not given
      - ``settings``: global ``CrawlSettings`` defaults
      - ``publishers``: list of publisher mappings; each may carry an
        ``overrides`` mapping with any settings key

    Unknown top-level keys are ignored for forward compatibility. Any problem
    raises ``ConfigError``; there is no partial or default configuration.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file is not valid YAML: {config_path}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Top-level configuration must be a mapping")

    settings = _coerce_settings(data.get("settings") or {})

    publishers_raw: Iterable[dict] = data.get("publishers") or []
    if not isinstance(publishers_raw, list):
        raise ConfigError("'publishers' must be a list in the YAML configuration")

    selected = (publisher or data.get("current_publisher") or "").strip()
    if not selected:
        raise ConfigError("No publisher selected and 'current_publisher' is not set")

    for item in publishers_raw:
        if not isinstance(item, dict):
            raise ConfigError(f"Each publisher must be a mapping, got: {type(item)}")
        if str(item.get("name", "")).strip().lower() != selected.lower():
            continue
        _validate_publisher_dict(item)
        return _coerce_publisher(item, settings)

    raise ConfigError(f"Configuration for publisher '{selected}' not found")
