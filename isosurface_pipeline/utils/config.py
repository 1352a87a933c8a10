"""Pipeline configuration loading and validation.

Loads YAML config files and provides typed access to pipeline parameters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml


@dataclass
class InputConfig:
    format: str = "implicit"
    path: str = ""
    dataset: str = "volume"
    surface: str = "sphere"
    axis_order: str = "xyz"


@dataclass
class GridConfig:
    size: tuple = (50, 50, 50)
    lower: tuple = (-1.0, -1.0, -1.0)
    upper: tuple = (1.0, 1.0, 1.0)


@dataclass
class ExtractionConfig:
    iso: float = 0.0
    classic: bool = False
    initial_capacity: int = 65536


@dataclass
class ExportConfig:
    formats: List[str] = field(default_factory=lambda: ["ply", "json"])
    output_dir: str = "./output"
    basename: str = "mesh"
    world_space: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: str = "pipeline.log"
    console: bool = True


@dataclass
class PipelineConfig:
    """Top-level pipeline configuration."""
    name: str = "isosurface-pipeline"
    version: str = "0.1.0"

    input: InputConfig = field(default_factory=InputConfig)
    grid: GridConfig = field(default_factory=GridConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build_dataclass(cls, data: dict):
    """Recursively build a dataclass from a dict, ignoring unknown keys."""
    if data is None:
        return cls()
    import dataclasses
    field_names = {f.name for f in dataclasses.fields(cls)}
    filtered = {}
    for k, v in data.items():
        if k not in field_names:
            continue
        f = next(f for f in dataclasses.fields(cls) if f.name == k)
        # If the field type is itself a dataclass, recurse
        if dataclasses.is_dataclass(f.type):
            filtered[k] = _build_dataclass(f.type, v)
        elif f.type == tuple or f.type == "tuple" or (
            hasattr(f.type, '__origin__') and f.type.__origin__ is tuple
        ):
            filtered[k] = tuple(v) if isinstance(v, list) else v
        else:
            filtered[k] = v
    return cls(**filtered)


def load_config(path: str | Path) -> PipelineConfig:
    """Load pipeline configuration from a YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Fully populated PipelineConfig object.
    """
    path = Path(path)
    with open(path, "r") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return PipelineConfig()

    pipeline_raw = raw.get("pipeline", {})
    config = PipelineConfig(
        name=pipeline_raw.get("name", "isosurface-pipeline"),
        version=pipeline_raw.get("version", "0.1.0"),
    )

    if "input" in raw:
        config.input = _build_dataclass(InputConfig, raw["input"])
    if "grid" in raw:
        config.grid = _build_dataclass(GridConfig, raw["grid"])
    if "extraction" in raw:
        config.extraction = _build_dataclass(ExtractionConfig, raw["extraction"])
    if "export" in raw:
        config.export = _build_dataclass(ExportConfig, raw["export"])
    if "logging" in raw:
        config.logging = _build_dataclass(LoggingConfig, raw["logging"])

    return config


def save_config(config: PipelineConfig, path: str | Path) -> None:
    """Save pipeline configuration to a YAML file for reproducibility."""
    import dataclasses

    def _to_dict(obj):
        if dataclasses.is_dataclass(obj):
            result = {}
            for f in dataclasses.fields(obj):
                val = getattr(obj, f.name)
                result[f.name] = _to_dict(val)
            return result
        elif isinstance(obj, (list, tuple)):
            return [_to_dict(v) for v in obj]
        elif isinstance(obj, dict):
            return {k: _to_dict(v) for k, v in obj.items()}
        else:
            return obj

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = _to_dict(config)
    data = {"pipeline": {"name": data.pop("name"), "version": data.pop("version")}, **data}
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
