"""Reader configuration.

The defaults match files written by OpenFOAM with the standard banner: ten
header lines are skipped before the list grammars start looking for the
element count, and boundary sentinels start at -10.

Configuration is built with OmegaConf so it can be loaded from YAML and
overridden from a dotlist::

    cfg = load_config("reader.yaml", overrides=["skip_lines=16"])
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from omegaconf import DictConfig, OmegaConf

DEFAULT_SKIP_LINES = 10
DEFAULT_BOUNDARY_ID_START = -10
MESH_FILES = ("points", "faces", "owner", "neighbour", "boundary")


@dataclass
class ReaderConfig:
    """Settings shared by all readers."""

    skip_lines: int = DEFAULT_SKIP_LINES
    mesh_dir: str = "constant/polyMesh"
    boundary_id_start: int = DEFAULT_BOUNDARY_ID_START
    max_blank_lines: int = 1  # blank lines tolerated at boundary-block junctions
    encoding: str = "utf-8"

    def mesh_path(self, case_dir: Union[str, Path]) -> Path:
        return Path(case_dir) / self.mesh_dir


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Iterable[str]] = None,
) -> ReaderConfig:
    """Build a ReaderConfig from defaults, an optional YAML file and overrides.

    Parameters
    ----------
    path : str or Path, optional
        YAML file with any subset of the ReaderConfig fields.
    overrides : iterable of str, optional
        Dotlist entries such as ``"skip_lines=16"``, applied last.

    Returns
    -------
    ReaderConfig
        Validated configuration object.
    """
    cfg = OmegaConf.structured(ReaderConfig)
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(str(path)))
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))
    return OmegaConf.to_object(cfg)


def as_reader_config(config=None) -> ReaderConfig:
    """Coerce None, a mapping or a DictConfig into a ReaderConfig."""
    if config is None:
        return ReaderConfig()
    if isinstance(config, ReaderConfig):
        return config
    if not isinstance(config, DictConfig):
        config = OmegaConf.create(dict(config))
    cfg = OmegaConf.merge(OmegaConf.structured(ReaderConfig), config)
    return OmegaConf.to_object(cfg)
