"""Configuration: OmegaConf defaults, YAML files with _base_ inheritance, dotlist overrides."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from omegaconf import DictConfig, OmegaConf

DEFAULT_CONFIG = {
    "compiler": {
        "max_steps": 50,
        "separator": "\n| ",
        "omit_empty_values": False,
        "reject_fan_in": False,
    },
    "log_level": "WARNING",
}


def default_config() -> DictConfig:
    return OmegaConf.create(DEFAULT_CONFIG)


def _load_file(path: Union[str, Path]) -> DictConfig:
    cfg = OmegaConf.load(path)
    # _base_ is resolved relative to the including file
    if "_base_" in cfg:
        base_path = Path(path).parent / str(cfg._base_)
        base = _load_file(base_path)
        cfg = OmegaConf.merge(base, cfg)
        del cfg["_base_"]
    return cfg


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Iterable[str]] = None,
) -> DictConfig:
    """Defaults, then the file at path (if any), then "key=value" overrides."""
    cfg = default_config()
    if path is not None:
        cfg = OmegaConf.merge(cfg, _load_file(path))
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))
    return cfg


def merge_configs(*configs: DictConfig) -> DictConfig:
    """Merge several configs (last one wins)."""
    return OmegaConf.merge(*configs)


def save_config(config: DictConfig, path: Union[str, Path]) -> None:
    OmegaConf.save(config, path)


def load_document(path: Union[str, Path]) -> Any:
    """Read a diagram or catalog file: .json through json, anything else as YAML."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    return OmegaConf.to_container(OmegaConf.load(path), resolve=True)
