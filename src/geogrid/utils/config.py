"""Configuration loader.

Reads run configuration files in YAML format and returns a dictionary.
A configuration file may hold any of the command-line settings
(``west``, ``south``, ``east``, ``north``, ``tag``, ``filepath``,
``format``, ``limit_lat``, ``limit_long``) plus a ``tiling`` mapping
with resize-loop parameters, for example::

    west: -109
    south: 37
    east: -102
    north: 41
    tag: geo-colorado
    tiling:
      band_min_miles: 24.8
      band_max_miles: 24.9
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from ..exceptions import ConfigurationError


def load_config(path: str, required: bool = False) -> Dict[str, Any]:
    """Load a YAML configuration file into a dictionary.

    Parameters
    ----------
    path : str
        Path to the YAML configuration file.
    required : bool, optional
        Raise instead of returning an empty dict when the file is missing.
        Set this when the user named the file explicitly.

    Returns
    -------
    dict
        Parsed configuration dictionary.  Returns an empty dict if the
        file is empty, or does not exist and is not ``required``.

    Raises
    ------
    ConfigurationError
        If a required file is missing, or the file cannot be read, is not
        valid YAML, or does not hold a mapping at the top level.
    """
    cfg_path = Path(path)
    if not cfg_path.is_file():
        if required:
            raise ConfigurationError(f"config file {cfg_path} not found")
        return {}
    try:
        with open(cfg_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"cannot read config {cfg_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config {cfg_path} must contain a mapping")
    return data
