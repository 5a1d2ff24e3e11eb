"""Cache configuration: YAML file with environment overrides."""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class CacheConfig:
    max_entries: int = 0
    normalize: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.max_entries, bool) or not isinstance(self.max_entries, int):
            raise ValueError(f"max_entries must be an integer, got {self.max_entries!r}")
        if self.max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {self.max_entries}")
        if not isinstance(self.normalize, bool):
            raise ValueError(f"normalize must be a boolean, got {self.normalize!r}")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_config(config_path: str | Path | None = None) -> CacheConfig:
    """Read the `cache` section of a YAML file, then apply RADIXCACHE_* environment overrides."""
    section: dict = {}
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config not found: {config_path}")
        with open(config_path) as f:
            document = yaml.safe_load(f) or {}
        if not isinstance(document, dict):
            raise ValueError(f"Config must be a mapping, got {type(document).__name__}: {config_path}")
        section = document.get("cache") or {}
        if not isinstance(section, dict):
            raise ValueError(f"cache section must be a mapping, got {type(section).__name__}")
    unknown = set(section) - {"max_entries", "normalize"}
    if unknown:
        raise ValueError(f"Unknown cache config keys: {sorted(unknown)}")

    max_entries = os.getenv("RADIXCACHE_MAX_ENTRIES")
    if max_entries is not None:
        try:
            section["max_entries"] = int(max_entries)
        except ValueError:
            raise ValueError(f"RADIXCACHE_MAX_ENTRIES must be an integer, got {max_entries!r}") from None
    normalize = os.getenv("RADIXCACHE_NORMALIZE")
    if normalize is not None:
        section["normalize"] = _parse_bool("RADIXCACHE_NORMALIZE", normalize)
    return CacheConfig(**section)
