"""
Run parameters for the two pipelines.

Both configs are plain dataclasses with literal defaults; a script edits the
values it needs (or loads them from JSON) and hands the object to
``build_sky_mesh`` / ``export_fields``.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import json


@dataclass
class MeshConfig:
    """Pixel mesh generation: one quad per pixel at ``nside``."""
    nside: int = 64
    nest: bool = False
    output_path: Path = field(default_factory=lambda: Path("healpix_mesh.obj"))

    def __post_init__(self):
        self.output_path = Path(self.output_path)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["output_path"] = str(self.output_path)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MeshConfig":
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> "MeshConfig":
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def save(self, path: Path) -> None:
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


@dataclass
class ExportConfig:
    """
    Map resampling/export.

    Each name in ``fields`` is read from ``source_path``, brought to
    ``nside_out`` in ``order_out`` ordering, multiplied by ``unit_scale``
    (K -> uK by default) and saved as ``<output_dir>/<field><suffix>``.
    ``order_in=None`` trusts the ORDERING keyword of the source file.
    """
    source_path: Path = field(default_factory=lambda: Path("COM_CMB_IQU-smica_2048_R3.00_full.fits"))
    fields: Tuple[str, ...] = ("I_STOKES", "Q_STOKES", "U_STOKES")
    nside_out: int = 64
    order_in: Optional[str] = None
    order_out: str = "RING"
    unit_scale: float = 1e6
    output_dir: Path = field(default_factory=lambda: Path("."))
    suffix: str = ".txt"
    conserve: str = "mean"
    pess: bool = False

    def __post_init__(self):
        self.source_path = Path(self.source_path)
        self.output_dir = Path(self.output_dir)
        self.fields = tuple(self.fields)

    def output_path(self, name: str) -> Path:
        return self.output_dir / f"{name}{self.suffix}"

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["source_path"] = str(self.source_path)
        d["output_dir"] = str(self.output_dir)
        d["fields"] = list(self.fields)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> "ExportConfig":
        """Load config from JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def save(self, path: Path) -> None:
        """Save config to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
