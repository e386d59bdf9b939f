"""Write bounding boxes as filter rules and read them back.

Three output formats are supported:

* ``json`` – a rule set ``{"rules": [{"value": "bounding_box:[...]",
  "tag": ...}, ...]}``; the ``tag`` key is only present when a tag was
  given.
* ``text`` – one ``bounding_box:[...]`` rule per line, for pasting into
  a dashboard.
* ``csv`` – a table with one row per box, its grid row number and its
  width in miles, written with pandas.

Coordinates are always written with five decimals.
"""

import json
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..exceptions import ConfigurationError, MalformedNumericInputError
from ..geometry import BoundingBox, parse_coordinate
from ..utils.geodesy import haversine_miles
from ..utils.logging import get_logger

logger = get_logger(__name__)

RULE_PATTERN = re.compile(r"^bounding_box:\[(\S+) (\S+) (\S+) (\S+)\]$")

CSV_COLUMNS = ["row", "west", "south", "east", "north", "width_miles"]


def build_rule_set(boxes: Sequence[BoundingBox], tag: Optional[str] = None) -> Dict[str, List[Dict[str, str]]]:
    """Convert boxes into a rule-set dictionary."""
    rules = []
    for box in boxes:
        rule = {"value": box.to_rule_value()}
        if tag is not None:
            rule["tag"] = tag
        rules.append(rule)
    return {"rules": rules}


def write_json_rules(boxes: Sequence[BoundingBox], path: Path, tag: Optional[str] = None) -> Path:
    """Write boxes as a JSON rule set.

    Parameters
    ----------
    boxes : sequence of BoundingBox
        Boxes to write.
    path : Path
        Output file.
    tag : str, optional
        Tag attached to every rule.

    Returns
    -------
    Path
        The written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(build_rule_set(boxes, tag), f)
    return path


def write_text_rules(boxes: Sequence[BoundingBox], path: Path) -> Path:
    """Write boxes as plain-text rules, one per line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        for box in boxes:
            f.write(box.to_rule_value() + "\n")
    return path


def boxes_to_dataframe(boxes: Sequence[BoundingBox]) -> pd.DataFrame:
    """Tabulate boxes with their grid row and great-circle width.

    Boxes of one row share the same southern edge, so the row number
    is the rank of each box's ``south`` value.

    Returns
    -------
    pandas.DataFrame
        Columns ``row, west, south, east, north, width_miles``.
    """
    if not boxes:
        return pd.DataFrame(columns=CSV_COLUMNS)

    coords = np.array([box.as_tuple() for box in boxes], dtype=float)
    df = pd.DataFrame(coords, columns=["west", "south", "east", "north"])
    df.insert(0, "row", pd.factorize(df["south"], sort=True)[0])
    df["width_miles"] = haversine_miles(
        df["south"].to_numpy(), df["west"].to_numpy(),
        df["south"].to_numpy(), df["east"].to_numpy(),
    )
    return df


def write_csv_table(boxes: Sequence[BoundingBox], path: Path) -> Path:
    """Write boxes as a CSV table (see ``boxes_to_dataframe``)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = boxes_to_dataframe(boxes)
    df.to_csv(path, index=False, float_format="%.5f")
    return path


def write_rules(
    boxes: Sequence[BoundingBox],
    path: Path,
    output_format: str = "json",
    tag: Optional[str] = None,
) -> Path:
    """Write boxes in ``output_format`` (``json``, ``text`` or ``csv``)."""
    if output_format == "json":
        written = write_json_rules(boxes, path, tag=tag)
    elif output_format == "text":
        written = write_text_rules(boxes, path)
    elif output_format == "csv":
        written = write_csv_table(boxes, path)
    else:
        raise ConfigurationError(f"unknown output format {output_format!r}")
    logger.info("Wrote %d boxes to %s (%s)", len(boxes), written, output_format)
    return written


def parse_rule(value: str) -> BoundingBox:
    """Parse one ``bounding_box:[w s e n]`` rule.

    Raises
    ------
    MalformedNumericInputError
        If the rule does not match the syntax or a coordinate is not
        numeric.
    """
    match = RULE_PATTERN.match(value.strip())
    if match is None:
        raise MalformedNumericInputError(f"not a bounding_box rule: {value!r}")
    west, south, east, north = (
        parse_coordinate(raw, name)
        for raw, name in zip(match.groups(), ("west", "south", "east", "north"))
    )
    return BoundingBox(west=west, south=south, east=east, north=north)


def read_rules(path: Path) -> List[BoundingBox]:
    """Read boxes back from a JSON or plain-text rules file.

    The format is detected from the content: a document starting with
    ``{`` is read as a JSON rule set, anything else as one rule per line.
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()

    if content.lstrip().startswith("{"):
        try:
            rule_set = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedNumericInputError(f"{path} is not a valid rule set: {e}") from e
        rules = rule_set.get("rules")
        if not isinstance(rules, list):
            raise MalformedNumericInputError(f"{path} has no 'rules' list")
        boxes = []
        for rule in rules:
            if not isinstance(rule, dict) or "value" not in rule:
                raise MalformedNumericInputError(f"rule without a value in {path}: {rule!r}")
            boxes.append(parse_rule(rule["value"]))
        return boxes

    return [parse_rule(line) for line in content.splitlines() if line.strip()]
