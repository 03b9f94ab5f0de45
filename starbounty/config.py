"""
Runtime configuration.

Resolution order: dataclass defaults, then an optional YAML file, then
environment variables named `STARBOUNTY_<SECTION>_<FIELD>`, for example
`STARBOUNTY_DISTRIBUTION_DAILY_CAP=2000000000`.

These are economic parameters, so malformed or unknown values fail closed
instead of falling back to defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .core.bootstrap import BootstrapParams
from .core.distribution import DistributionParams
from .core.errors import InvalidPreconditionError


ENV_PREFIX = "STARBOUNTY_"


@dataclass(frozen=True)
class GrantTemplate:
    """Schedule applied to every grant created for a creator."""

    net_amount_deposited: int = 1_000_000
    period: int = 60 * 60 * 24 * 30
    amount_per_period: int = 1_000_000
    cliff: int = 0
    cliff_amount: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{f.name} must be an int")
            if v < 0:
                raise ValueError(f"{f.name} must be non-negative: {v}")
        if self.period <= 0:
            raise ValueError("period must be positive")
        if self.net_amount_deposited <= 0:
            raise ValueError("net_amount_deposited must be positive")


@dataclass(frozen=True)
class EngineConfig:
    distribution: DistributionParams = field(default_factory=DistributionParams)
    bootstrap: BootstrapParams = field(default_factory=BootstrapParams)
    grant: GrantTemplate = field(default_factory=GrantTemplate)


_SECTIONS = {
    "distribution": DistributionParams,
    "bootstrap": BootstrapParams,
    "grant": GrantTemplate,
}


def _parse_int(name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise InvalidPreconditionError(f"{name} must be an integer, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip().replace("_", ""), 10)
        except ValueError as exc:
            raise InvalidPreconditionError(f"{name} must be an integer, got {raw!r}") from exc
    raise InvalidPreconditionError(f"{name} must be an integer, got {raw!r}")


def _apply_overrides(section: str, current: Any, overrides: Mapping[str, Any]) -> Any:
    known = {f.name for f in fields(current)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise InvalidPreconditionError(f"unknown {section} config keys: {', '.join(unknown)}")
    parsed = {k: _parse_int(f"{section}.{k}", v) for k, v in overrides.items()}
    try:
        return replace(current, **parsed)
    except (TypeError, ValueError) as exc:
        raise InvalidPreconditionError(f"invalid {section} config: {exc}") from exc


def config_from_mapping(data: Mapping[str, Any], base: Optional[EngineConfig] = None) -> EngineConfig:
    cfg = base or EngineConfig()
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise InvalidPreconditionError(f"unknown config sections: {', '.join(unknown)}")
    for section in _SECTIONS:
        overrides = data.get(section)
        if overrides is None:
            continue
        if not isinstance(overrides, Mapping):
            raise InvalidPreconditionError(f"config section {section!r} must be a mapping")
        cfg = replace(cfg, **{section: _apply_overrides(section, getattr(cfg, section), overrides)})
    return cfg


def _env_overrides(environ: Mapping[str, str]) -> dict[str, dict[str, str]]:
    out: dict[str, dict[str, str]] = {}
    for key, raw in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        rest = key[len(ENV_PREFIX):].lower()
        for section in _SECTIONS:
            if rest.startswith(section + "_"):
                out.setdefault(section, {})[rest[len(section) + 1:]] = raw
                break
    return out


def load_config(path: Optional[str | Path] = None, environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """Build an `EngineConfig` from defaults, an optional YAML file and the environment."""
    cfg = EngineConfig()
    if path is not None:
        text = Path(path).read_text(encoding="utf-8")
        obj = yaml.safe_load(text)
        if obj is None:
            obj = {}
        if not isinstance(obj, Mapping):
            raise InvalidPreconditionError("config YAML must be a mapping")
        cfg = config_from_mapping(obj, cfg)
    env = os.environ if environ is None else environ
    overrides = _env_overrides(env)
    if overrides:
        cfg = config_from_mapping(overrides, cfg)
    return cfg
