"""Scan configuration: result caps, walk strides and pass selection.

Precedence for a category's cap, highest first: an explicit per-category entry
in `caps`, the global `max_results`, then the default declared with the
category. A config file is a JSON object using the same keys as `ScanConfig`;
environment overrides are applied on top by `config_from_env`.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union

from .engine.classify import Category
from .errors import ConfigError

ENV_MAX_RESULTS = "BINSCAN_MAX_RESULTS"
ENV_PASSES = "BINSCAN_PASSES"


@dataclass(frozen=True)
class ScanConfig:
    max_results: Optional[int] = None
    caps: Dict[str, Optional[int]] = field(default_factory=dict)
    probe_width: int = 4
    symbol_stride: int = 4
    struct_stride: int = 8
    passes: Tuple[str, ...] = ()

    def cap_for(self, category: Category) -> Optional[int]:
        if category.name in self.caps:
            return self.caps[category.name]
        if self.max_results is not None:
            return self.max_results
        return category.cap


DEFAULT_CONFIG = ScanConfig()


def positive_int(key: str, value: object, allow_zero: bool = False) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    floor = 0 if allow_zero else 1
    if value < floor:
        raise ConfigError(f"{key} must be >= {floor}, got {value}")
    return value


def config_from_mapping(data: Mapping[str, object]) -> ScanConfig:
    known = {"max_results", "caps", "probe_width", "symbol_stride", "struct_stride", "passes"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError("unknown config key(s): %s" % ", ".join(unknown))

    kwargs: Dict[str, object] = {}
    if data.get("max_results") is not None:
        kwargs["max_results"] = positive_int("max_results", data["max_results"], allow_zero=True)
    if "caps" in data:
        caps = data["caps"]
        if not isinstance(caps, dict):
            raise ConfigError("caps must be an object mapping category names to integers")
        parsed: Dict[str, Optional[int]] = {}
        for name, cap in caps.items():
            # null means "no cap" for that category.
            parsed[str(name)] = None if cap is None else positive_int(f"caps.{name}", cap, allow_zero=True)
        kwargs["caps"] = parsed
    for key in ("probe_width", "symbol_stride", "struct_stride"):
        if key in data:
            kwargs[key] = positive_int(key, data[key], allow_zero=(key == "probe_width"))
    if "passes" in data:
        passes = data["passes"]
        if not isinstance(passes, list) or not all(isinstance(p, str) for p in passes):
            raise ConfigError("passes must be a list of pass names")
        kwargs["passes"] = tuple(passes)
    return ScanConfig(**kwargs)


def load_config(path: Union[str, Path]) -> ScanConfig:
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise ConfigError(f"unable to read config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must contain a JSON object")
    return config_from_mapping(data)


def config_from_env(base: ScanConfig = DEFAULT_CONFIG, environ: Optional[Mapping[str, str]] = None) -> ScanConfig:
    env = os.environ if environ is None else environ
    updates: Dict[str, object] = {}
    raw = env.get(ENV_MAX_RESULTS)
    if raw:
        try:
            value = int(raw)
        except ValueError as exc:
            raise ConfigError(f"{ENV_MAX_RESULTS} must be an integer, got {raw!r}") from exc
        updates["max_results"] = positive_int(ENV_MAX_RESULTS, value, allow_zero=True)
    raw = env.get(ENV_PASSES)
    if raw:
        updates["passes"] = tuple(p.strip() for p in raw.split(",") if p.strip())
    return replace(base, **updates) if updates else base
