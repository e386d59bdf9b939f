"""Rule writers and readers."""

from .rules import (
    build_rule_set,
    boxes_to_dataframe,
    read_rules,
    write_csv_table,
    write_json_rules,
    write_rules,
    write_text_rules,
)

__all__ = [
    "build_rule_set",
    "boxes_to_dataframe",
    "read_rules",
    "write_csv_table",
    "write_json_rules",
    "write_rules",
    "write_text_rules",
]
