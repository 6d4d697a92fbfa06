"""Frozen dataclass config hierarchy for a lesson run.

Loading precedence: defaults -> YAML file -> CLI overrides -> freeze.

The serialized config is written as the first artifact of every run so a
transcript and its plots can be traced back to the settings that made them.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from anolekit.io.lizards import DEFAULT_DATA_PATH

# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DataConfig:
    """Where the lizard table comes from.

    Attributes:
        path: Path to the lizard CSV file.
    """

    path: str = DEFAULT_DATA_PATH


@dataclass(frozen=True)
class PlotConfig:
    """Settings for the per-site plots.

    Attributes:
        site: Site drawn by the single-site examples.
        x: Column on the horizontal axis.
        y: Column on the vertical axis.
        point_size: Marker area for the scatter points.
        alpha: Marker opacity.
        confidence: Confidence level of the band around the fitted line.
        dpi: Resolution of saved images.
        show: Open an interactive window for each figure as well as saving it.
    """

    site: str = "A"
    x: str = "Limb"
    y: str = "Height"
    point_size: float = 20.0
    alpha: float = 0.8
    confidence: float = 0.95
    dpi: int = 150
    show: bool = False


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LessonConfig:
    """Top-level frozen config for a lesson run.

    Attributes:
        run_id: Unique run identifier (timestamp-based by default).
        output_dir: Directory for the config artifact and saved plots.
        sections: Names of the sections to run; empty runs all of them.
        data: Data source config.
        plot: Plot config.
    """

    run_id: str = ""
    output_dir: str = ""
    sections: tuple[str, ...] = ()
    data: DataConfig = field(default_factory=DataConfig)
    plot: PlotConfig = field(default_factory=PlotConfig)

    def __post_init__(self) -> None:
        # YAML and CLI hand us lists or comma-separated strings.
        sections = self.sections
        if isinstance(sections, str):
            sections = [s.strip() for s in sections.split(",") if s.strip()]
        object.__setattr__(self, "sections", tuple(sections or ()))


_SUB_CONFIGS: dict[str, type] = {
    "data": DataConfig,
    "plot": PlotConfig,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _generate_run_id() -> str:
    """Generate a timestamp-based run identifier.

    Returns:
        Run ID string of the form "lesson_YYYYMMDD_HHMMSS".
    """
    return f"lesson_{datetime.now():%Y%m%d_%H%M%S}"


def _default_output_dir(run_id: str) -> str:
    return str(Path(f"~/anolekit/runs/{run_id}").expanduser())


def _parse_cli_value(value: Any) -> Any:
    """Parse a ``--set key=value`` string into a typed scalar.

    ``"0.9"`` becomes ``0.9``, ``"true"`` becomes ``True``; anything YAML
    cannot parse as a scalar stays a string.
    """
    if not isinstance(value, str):
        return value
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        return value
    if parsed is None or isinstance(parsed, (dict, list)):
        return value
    return parsed


def _flatten(nested: dict[str, Any]) -> dict[str, Any]:
    """Flatten one level of nesting into dot-notation keys.

    ``{"plot": {"site": "B"}}`` becomes ``{"plot.site": "B"}``; keys that
    already use dot-notation pass through.
    """
    flat: dict[str, Any] = {}
    for key, value in nested.items():
        if isinstance(value, dict):
            for subkey, subvalue in value.items():
                flat[f"{key}.{subkey}"] = subvalue
        else:
            flat[key] = value
    return flat


def _bucket(flat: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Group dot-notation keys by sub-config; bare keys go to ``"__top__"``.

    Raises:
        ValueError: If a key names an unknown sub-config.
    """
    buckets: dict[str, dict[str, Any]] = {"__top__": {}}
    for key, value in flat.items():
        if "." in key:
            section, _, field_name = key.partition(".")
            if section not in _SUB_CONFIGS:
                raise ValueError(f"Unknown config section {section!r} in key {key!r}")
            buckets.setdefault(section, {})[field_name] = value
        else:
            buckets["__top__"][key] = value
    return buckets


def _build(cls: type, kwargs: dict[str, Any]) -> Any:
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(kwargs) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} field(s): {', '.join(unknown)}")
    return cls(**kwargs)


# ---------------------------------------------------------------------------
# Public factory
# ---------------------------------------------------------------------------


def load_config(
    yaml_path: str | Path | None = None,
    *,
    cli_overrides: dict[str, Any] | None = None,
    run_id: str | None = None,
) -> LessonConfig:
    """Construct a frozen :class:`LessonConfig` using layered overrides.

    Loading precedence (lowest to highest priority):

    1. Dataclass field defaults
    2. YAML file (*yaml_path*)
    3. CLI overrides (*cli_overrides*), string values parsed as YAML scalars
    4. Freeze

    CLI overrides may use dot-notation keys (``"plot.site"``) or nested
    dicts (``{"plot": {"site": "B"}}``).

    Args:
        yaml_path: Optional path to a YAML config file.
        cli_overrides: Optional dict of CLI overrides (highest precedence).
        run_id: Explicit run identifier. Auto-generated if not provided.

    Returns:
        Frozen :class:`LessonConfig` with all overrides applied.

    Raises:
        ValueError: If a key names an unknown section or field.
    """
    buckets: dict[str, dict[str, Any]] = {"__top__": {}}

    # --- layer 2: YAML --------------------------------------------------
    if yaml_path is not None:
        with Path(yaml_path).open(encoding="utf-8") as fh:
            raw: dict[str, Any] = yaml.safe_load(fh) or {}
        for section, values in _bucket(_flatten(raw)).items():
            buckets.setdefault(section, {}).update(values)

    # --- layer 3: CLI ---------------------------------------------------
    if cli_overrides is not None:
        flat_cli = {k: _parse_cli_value(v) for k, v in _flatten(cli_overrides).items()}
        for section, values in _bucket(flat_cli).items():
            buckets.setdefault(section, {}).update(values)

    top_kwargs = dict(buckets["__top__"])

    # --- layer 4: resolve run_id and output_dir -------------------------
    resolved_run_id = run_id or top_kwargs.pop("run_id", None) or _generate_run_id()
    top_kwargs.pop("run_id", None)
    resolved_output_dir = top_kwargs.pop("output_dir", None) or _default_output_dir(
        str(resolved_run_id)
    )

    sub_configs = {
        name: _build(cls, buckets.get(name, {})) for name, cls in _SUB_CONFIGS.items()
    }
    return _build(
        LessonConfig,
        {
            "run_id": str(resolved_run_id),
            "output_dir": str(resolved_output_dir),
            **top_kwargs,
            **sub_configs,
        },
    )


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize_config(config: LessonConfig) -> str:
    """Serialize *config* to a YAML string.

    Tuples are written as YAML lists so the output loads back through
    :func:`load_config`.
    """
    as_dict = dataclasses.asdict(config)
    as_dict["sections"] = list(config.sections)
    return yaml.safe_dump(as_dict, default_flow_style=False, sort_keys=True)
