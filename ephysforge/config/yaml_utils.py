"""YAML loading for simulation configs, with duplicate-key validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TextIO, Union

import yaml

from ephysforge.config.schema import EphysForgeConfig


class UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that refuses mappings with repeated keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict:
    mapping = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ValueError(f"Duplicate key '{key}' detected in YAML.")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def load_yaml(stream: Union[str, TextIO]) -> Any:
    """Parse YAML text or a stream, rejecting duplicate keys.

    Raises:
        ValueError: If a mapping repeats a key (a silently dropped
            ``noise_level`` is a hard bug to spot otherwise).
    """
    return yaml.load(stream, Loader=UniqueKeyLoader)


def load_config(path: Union[str, Path]) -> EphysForgeConfig:
    """Read a YAML file into an :class:`EphysForgeConfig`.

    An empty file yields the default configuration.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On duplicate keys or a non-mapping document.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = load_yaml(f)
    if data is None:
        return EphysForgeConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at top level")
    return EphysForgeConfig.from_dict(data)
