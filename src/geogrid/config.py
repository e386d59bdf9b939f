"""Run configuration.

A ``RunConfig`` is built once from the config file and the command line
and handed to the pipeline.  Command-line values win over file values.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError
from .geometry import Offset, StudyArea, parse_coordinate
from .tiling.grid_tiler import TilingParameters
from .tiling.offsets import default_offset

OUTPUT_FORMATS = ("json", "text", "csv")

DEFAULT_FILEPATHS = {
    "json": "geo_rules.json",
    "text": "geo_rules.txt",
    "csv": "geo_boxes.csv",
}


@dataclass(frozen=True)
class RunConfig:
    """Everything one tiling run needs."""

    area: StudyArea
    offset: Offset
    output_format: str = "json"
    filepath: Path = Path(DEFAULT_FILEPATHS["json"])
    tag: Optional[str] = None
    tiling: TilingParameters = field(default_factory=TilingParameters)

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"unknown output format {self.output_format!r}, expected one of {OUTPUT_FORMATS}"
            )


def build_tiling_parameters(values: Optional[Mapping[str, Any]]) -> TilingParameters:
    """Build ``TilingParameters`` from the ``tiling`` section of a config file."""
    if not values:
        return TilingParameters()
    if not isinstance(values, Mapping):
        raise ConfigurationError("'tiling' section must be a mapping")

    known = {f.name for f in fields(TilingParameters)}
    unknown = set(values) - known
    if unknown:
        raise ConfigurationError(f"unknown tiling parameters: {sorted(unknown)}")

    kwargs: Dict[str, Any] = {}
    for name, value in values.items():
        if name == "delta_tiers":
            try:
                kwargs[name] = tuple(
                    (parse_coordinate(limit, "tier limit"), parse_coordinate(delta, "tier delta"))
                    for limit, delta in value
                )
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"delta_tiers must be a list of [limit, delta] pairs: {e}") from e
        elif name in ("max_iterations", "row_precision"):
            number = parse_coordinate(value, name)
            if not number.is_integer():
                raise ConfigurationError(f"{name} must be a whole number, got {value!r}")
            kwargs[name] = int(number)
        else:
            kwargs[name] = parse_coordinate(value, name)

    try:
        return TilingParameters(**kwargs)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def build_run_config(
    file_values: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> RunConfig:
    """Merge config-file values with command-line overrides.

    Parameters
    ----------
    file_values : mapping, optional
        Contents of a YAML config file (see ``load_config``).
    **overrides
        Command-line values; ``None`` means "not given".  Recognised keys
        are ``west``, ``south``, ``east``, ``north``, ``tag``,
        ``filepath``, ``output_format``, ``limit_lat`` and ``limit_long``.

    Returns
    -------
    RunConfig
        The immutable configuration for this run.
    """
    merged: Dict[str, Any] = dict(file_values or {})
    if "format" in merged:
        merged["output_format"] = merged.pop("format")
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value

    area = StudyArea.from_values(
        merged.get("west"), merged.get("south"), merged.get("east"), merged.get("north")
    )

    limit_lat = merged.get("limit_lat")
    limit_long = merged.get("limit_long")
    offset = default_offset(
        area,
        lat_override=None if limit_lat is None else parse_coordinate(limit_lat, "limit_lat"),
        long_override=None if limit_long is None else parse_coordinate(limit_long, "limit_long"),
    )

    output_format = str(merged.get("output_format", "json"))
    filepath = merged.get("filepath") or DEFAULT_FILEPATHS.get(output_format, DEFAULT_FILEPATHS["json"])
    tag = merged.get("tag")

    return RunConfig(
        area=area,
        offset=offset,
        output_format=output_format,
        filepath=Path(filepath),
        tag=None if tag is None else str(tag),
        tiling=build_tiling_parameters(merged.get("tiling")),
    )
