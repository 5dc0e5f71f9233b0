"""Tuning configuration and its persistence for the dance floor."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

logger = logging.getLogger(__name__)

FalloffFn = Literal["cosine", "gaussian"]

FALLOFF_FUNCTIONS: tuple[FalloffFn, ...] = ("cosine", "gaussian")


@dataclass(frozen=True)
class PriorityWeights:
    """Weights for the per-dancer priority score."""

    has_message: float = 3.0
    has_paid: float = 2.0
    early_signup: float = 1.0
    jitter_weight: float = 2.0


@dataclass(frozen=True)
class LayoutConfig:
    """Placement parameters."""

    center_bias_max: float = 0.8
    # +/- pixels
    vertical_jitter: int = 4
    # 0 = scatter, 1 = collapse
    solo_affinity: float = 0.3
    # chance of a swap attempt per messageless pair
    message_balance_rate: float = 0.5
    # normalized gap between adjacent units, 0 disables enforcement
    min_spacing: float = 0.1


@dataclass(frozen=True)
class DockConfig:
    """Dock magnification parameters."""

    max_scale: float = 2.0
    neighbor_count: float = 2.0
    falloff_fn: FalloffFn = "cosine"
    base_icon_height: float = 109.0
    magnified_spacing: float = 4.0


@dataclass(frozen=True)
class DancePartyConfig:
    """Immutable engine configuration."""

    weights: PriorityWeights = field(default_factory=PriorityWeights)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    dock: DockConfig = field(default_factory=DockConfig)

    def with_overrides(
        self,
        *,
        weights: Optional[Mapping[str, Any]] = None,
        layout: Optional[Mapping[str, Any]] = None,
        dock: Optional[Mapping[str, Any]] = None,
    ) -> "DancePartyConfig":
        """Return a copy with individual fields replaced."""
        return DancePartyConfig(
            weights=replace(self.weights, **dict(weights or {})),
            layout=replace(self.layout, **dict(layout or {})),
            dock=replace(self.dock, **dict(dock or {})),
        )


DEFAULT_WEIGHTS = PriorityWeights()
DEFAULT_LAYOUT = LayoutConfig()
DEFAULT_DOCK = DockConfig()
DEFAULT_CONFIG = DancePartyConfig()


def get_config_dir(app_name: str = "dance-floor") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            root = Path(base)
        else:
            root = Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    elif os.name == "posix":
        if _is_macos():
            return _ensure_dir(
                Path.home() / "Library" / "Application Support" / app_name
            )
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
        return _ensure_dir(root / app_name)
    else:
        return _ensure_dir(Path.home() / ".config" / app_name)


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config(path: Optional[Path] = None) -> DancePartyConfig:
    """Load configuration from disk, falling back to defaults on error."""
    if path is None:
        path = get_config_path()
    if not path.exists():
        return DancePartyConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return DancePartyConfig()
    if not isinstance(raw, dict):
        return DancePartyConfig()
    return config_from_mapping(raw)


def save_config(cfg: DancePartyConfig, path: Optional[Path] = None) -> None:
    """Persist configuration to disk atomically."""
    if path is None:
        path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    temp_path.write_text(json.dumps(config_to_mapping(cfg), indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def config_to_mapping(cfg: DancePartyConfig) -> dict[str, dict[str, Any]]:
    return {
        "weights": asdict(cfg.weights),
        "layout": asdict(cfg.layout),
        "dock": asdict(cfg.dock),
    }


def config_from_mapping(raw: Mapping[str, Any]) -> DancePartyConfig:
    """Normalize raw JSON data into a DancePartyConfig."""
    weights = _section(raw, "weights")
    layout = _section(raw, "layout")
    dock = _section(raw, "dock")
    falloff = dock.get("falloff_fn", DEFAULT_DOCK.falloff_fn)
    if falloff not in FALLOFF_FUNCTIONS:
        falloff = DEFAULT_DOCK.falloff_fn
    return DancePartyConfig(
        weights=PriorityWeights(
            has_message=_get_float(weights, "has_message", DEFAULT_WEIGHTS.has_message),
            has_paid=_get_float(weights, "has_paid", DEFAULT_WEIGHTS.has_paid),
            early_signup=_get_float(
                weights, "early_signup", DEFAULT_WEIGHTS.early_signup
            ),
            jitter_weight=_get_float(
                weights, "jitter_weight", DEFAULT_WEIGHTS.jitter_weight, min_value=0.0
            ),
        ),
        layout=LayoutConfig(
            center_bias_max=_get_float(
                layout,
                "center_bias_max",
                DEFAULT_LAYOUT.center_bias_max,
                min_value=0.0,
                max_value=1.0,
            ),
            vertical_jitter=_get_int(
                layout, "vertical_jitter", DEFAULT_LAYOUT.vertical_jitter, min_value=0
            ),
            solo_affinity=_get_float(
                layout,
                "solo_affinity",
                DEFAULT_LAYOUT.solo_affinity,
                min_value=0.0,
                max_value=1.0,
            ),
            message_balance_rate=_get_float(
                layout,
                "message_balance_rate",
                DEFAULT_LAYOUT.message_balance_rate,
                min_value=0.0,
                max_value=1.0,
            ),
            min_spacing=_get_float(
                layout,
                "min_spacing",
                DEFAULT_LAYOUT.min_spacing,
                min_value=0.0,
                max_value=1.0,
            ),
        ),
        dock=DockConfig(
            max_scale=_get_float(
                dock, "max_scale", DEFAULT_DOCK.max_scale, min_value=1.0
            ),
            neighbor_count=_get_float(
                dock, "neighbor_count", DEFAULT_DOCK.neighbor_count, min_value=0.0
            ),
            falloff_fn=falloff,
            base_icon_height=_get_float(
                dock, "base_icon_height", DEFAULT_DOCK.base_icon_height, min_value=0.0
            ),
            magnified_spacing=_get_float(
                dock,
                "magnified_spacing",
                DEFAULT_DOCK.magnified_spacing,
                min_value=0.0,
            ),
        ),
    )


def _ensure_dir(path: Path) -> Path:
    """Create the directory if needed and return the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    """Return True when running on macOS."""
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if isinstance(value, dict):
        return value
    return {}


def _get_float(
    raw: Mapping[str, Any],
    key: str,
    default: float,
    *,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """Fetch a numeric value with optional clamping."""
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        value = default
    value = float(value)
    if value != value:
        value = default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def _get_int(
    raw: Mapping[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Fetch an integer value with optional clamping."""
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        value = default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value
