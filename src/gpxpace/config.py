"""
gpxpace configuration loader

This module centralizes *all* configuration handling for gpxpace.

The analytics functions take their knobs (interval width, sensitivity
factor) as plain arguments. Configuration only supplies the defaults a
presentation layer offers its user:
- the default interval width for gradient tables
- the named elevation-sensitivity presets and which one is the default

Precedence (highest to lowest) for any given value:
1) Explicit function argument (handled by the caller)
2) Environment variables (GPXPACE_*)
3) User config: ~/.config/gpxpace/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults (BUILTIN_PRESETS, 1000 m intervals)

This module uses Python's built-in tomllib on Python 3.11+, or `tomli` if installed.

Example config.toml:

    [intervals]
    default_interval_m = 500

    [pace]
    default_preset = "standard"

    [pace.presets.trail]
    factor = 0.3
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from gpxpace.errors import ConfigError, UnknownPresetError


DEFAULT_INTERVAL_M = 1000.0
DEFAULT_PRESET = "standard"

# Seconds of leg time per metre of net elevation change.
BUILTIN_PRESETS: dict[str, float] = {
    "none": 0.0,
    "low": 0.1,
    "standard": 0.2,
    "high": 0.4,
}


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise a ConfigError
      with a clear, user-facing message.
    """
    if not path.is_file():
        return {}

    try:
        try:
            import tomllib
        except ModuleNotFoundError:
            import tomli as tomllib
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (OSError, ValueError) as e:
        # tomllib.TOMLDecodeError subclasses ValueError
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "intervals.default_interval_m")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_float(v: Any) -> Optional[float]:
    """
    Coerce a config value into a finite float.

    Accepts ints, floats and numeric strings (environment variables).
    Booleans are rejected even though bool subclasses int.
    Returns None if the value cannot be interpreted.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        out = float(v)
    elif isinstance(v, str):
        try:
            out = float(v.strip())
        except ValueError:
            return None
    else:
        return None
    return out if math.isfinite(out) else None


def _as_str(v: Any, default: str) -> str:
    """
    Coerce config values into strings.

    Always returns a string; never raises.
    """
    if v is None:
        return default
    s = str(v).strip()
    return s or default


# ---------------------------------------------------------------------------
# Pace config parsing (raw TOML -> plain dicts)
# ---------------------------------------------------------------------------
def _parse_pace_section(cfg: dict[str, Any]) -> tuple[Optional[str], dict[str, float]]:
    """
    Extract the default preset name and preset factors from raw TOML.

    Presets may be written either as tables or as bare numbers:

        [pace.presets.trail]
        factor = 0.3

        [pace.presets]
        road = 0.15

    Entries without a usable factor are ignored.
    """
    pace = cfg.get("pace", {}) or {}
    if not isinstance(pace, dict):
        return None, {}

    default_preset = pace.get("default_preset")
    default_preset = str(default_preset).strip() if default_preset is not None else None

    raw_presets = pace.get("presets", {}) or {}
    if not isinstance(raw_presets, dict):
        raw_presets = {}

    presets: dict[str, float] = {}
    for name, block in raw_presets.items():
        factor = _as_float(block.get("factor") if isinstance(block, dict) else block)
        if factor is None:
            continue
        presets[str(name)] = factor

    return default_preset or None, presets


# ---------------------------------------------------------------------------
# Repo discovery
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the gpxpace repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SensitivityPreset:
    """A named elevation-sensitivity factor (seconds per metre of net change)."""

    name: str
    factor: float


@dataclass(frozen=True)
class IntervalConfig:
    default_interval_m: float = DEFAULT_INTERVAL_M


@dataclass(frozen=True)
class PaceConfig:
    """
    Parsed and merged pace-planner configuration.

    This object is what pace planning code should consume.
    """

    default_preset: str = DEFAULT_PRESET
    presets: dict[str, SensitivityPreset] = field(default_factory=dict)

    def preset_names(self) -> list[str]:
        """Preset names ordered by factor, for building a selection list."""
        return [p.name for p in sorted(self.presets.values(), key=lambda p: (p.factor, p.name))]

    def factor_for(self, name: Optional[str] = None) -> float:
        """
        Return the factor of the requested preset.

        Resolution order:
        1) Explicitly requested preset (unknown names raise)
        2) Configured default_preset
        3) Built-in "standard" factor
        """
        if name:
            preset = self.presets.get(name)
            if preset is None:
                known = ", ".join(self.preset_names()) or "(none)"
                raise UnknownPresetError(f"Unknown sensitivity preset {name!r}; known presets: {known}")
            return preset.factor
        if self.default_preset in self.presets:
            return self.presets[self.default_preset].factor
        return BUILTIN_PRESETS[DEFAULT_PRESET]


@dataclass(frozen=True)
class GpxPaceConfig:
    """
    Fully merged gpxpace configuration.

    Attributes:
    - intervals: gradient table defaults
    - pace: sensitivity presets + default preset
    - source: provenance map showing where each value came from
    """

    intervals: IntervalConfig
    pace: PaceConfig
    source: dict[str, str]


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> GpxPaceConfig:
    """
    Load, merge, and normalize all gpxpace configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "gpxpace" / "config.toml"

    # Load raw TOML dicts
    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------
    interval_m = DEFAULT_INTERVAL_M
    default_preset = DEFAULT_PRESET
    factors: dict[str, float] = dict(BUILTIN_PRESETS)

    src = {
        "intervals.default_interval_m": "default",
        "pace.default_preset": "default",
        "pace.presets": "default",
    }

    # ------------------------------------------------------------------
    # Repo + user overrides (user wins)
    # ------------------------------------------------------------------
    for cfg, label, path in ((repo_cfg, "repo", repo_config_path), (user_cfg, "user", user_config_path)):
        v = _as_float(_deep_get(cfg, "intervals.default_interval_m"))
        if v is not None and v > 0:
            interval_m = v
            src["intervals.default_interval_m"] = f"{label}:{path}"

        cfg_default, cfg_presets = _parse_pace_section(cfg)
        if cfg_default:
            default_preset = cfg_default
            src["pace.default_preset"] = f"{label}:{path}"
        if cfg_presets:
            factors.update(cfg_presets)
            src["pace.presets"] = f"{label}:{path}"

    # Environment variable overrides (highest non-argument precedence)
    env_interval = _as_float(os.environ.get("GPXPACE_INTERVAL_M"))
    if env_interval is not None and env_interval > 0:
        interval_m = env_interval
        src["intervals.default_interval_m"] = "env:GPXPACE_INTERVAL_M"

    env_preset = _as_str(os.environ.get("GPXPACE_SENSITIVITY_PRESET"), "")
    if env_preset:
        default_preset = env_preset
        src["pace.default_preset"] = "env:GPXPACE_SENSITIVITY_PRESET"

    if default_preset not in factors:
        raise UnknownPresetError(
            f"Default sensitivity preset {default_preset!r} ({src['pace.default_preset']}) is not defined"
        )

    pace_cfg = PaceConfig(
        default_preset=default_preset,
        presets={name: SensitivityPreset(name=name, factor=f) for name, f in factors.items()},
    )

    return GpxPaceConfig(
        intervals=IntervalConfig(default_interval_m=interval_m),
        pace=pace_cfg,
        source=src,
    )
