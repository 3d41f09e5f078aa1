"""HEALPix pixel mesh and the OBJ subset it is written in.

Only two record kinds are produced: ``v x y z`` and ``f i1 i2 i3 i4`` with
1-based vertex indices. Every pixel gets its own four vertices; shared
corners are left for the importing application to merge.
"""
import logging

import numpy as np

from .ring_tables import nside2npix
from .boundaries import pixel_corners

logger = logging.getLogger(__name__)


def to_left_handed(vertices):
    """Map ``(x, y, z)`` to ``(x, z, -y)``. Apply once only."""
    v = np.asarray(vertices, dtype=np.float64)
    return np.stack([v[..., 0], v[..., 2], -v[..., 1]], axis=-1)

def quad_faces(npix:int):
    return np.arange(1, 4*int(npix) + 1, dtype=np.int64).reshape(int(npix), 4)


class SkyMesh:
    def __init__(self, vertices, faces, nside=None, nest=False):
        self.vertices = np.asarray(vertices)
        self.faces = np.asarray(faces)
        self.nside = nside
        self.nest = nest

    @classmethod
    def from_healpix(cls, nside:int, nest=False):
        verts = to_left_handed(pixel_corners(nside, nest=nest))
        return cls(verts, quad_faces(nside2npix(nside)), nside=int(nside), nest=nest)

    @property
    def n_vertices(self)->int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self)->int:
        return int(self.faces.shape[0])

    def __repr__(self):
        return (f"SkyMesh(nside={self.nside}, nest={self.nest}, "
                f"n_vertices={self.n_vertices}, n_faces={self.n_faces})")


def write_records(f, rows, tag):
    for row in rows:
        f.write(tag + " " + " ".join(str(c) for c in np.asarray(row).tolist()) + "\n")

def write_obj(path, mesh, faces=None):
    """Write a mesh (or a vertex array plus ``faces``) as OBJ text."""
    if isinstance(mesh, SkyMesh):
        vertices, faces = mesh.vertices, mesh.faces
    else:
        vertices = mesh
        if faces is None:
            raise ValueError("faces are required when passing a bare vertex array")
    with open(path, "w", encoding="ascii") as f:
        write_records(f, vertices, "v")
        write_records(f, faces, "f")
    return path

def read_obj(path):
    verts, faces = [], []
    with open(path, "r", encoding="ascii") as f:
        for line in f:
            parts = line.split()
            if not parts or parts[0].startswith("#"):
                continue
            if parts[0] == "v":
                # trailing w or per-vertex colour components are dropped
                verts.append([float(c) for c in parts[1:4]])
            elif parts[0] == "f":
                # "i/t/n" references keep only the vertex index
                faces.append([int(c.split("/")[0]) for c in parts[1:]])
    verts = np.asarray(verts, dtype=np.float64).reshape(len(verts), 3)
    if faces:
        faces = np.asarray(faces, dtype=np.int64).reshape(len(faces), -1)
    else:
        faces = np.empty((0, 4), dtype=np.int64)
    return verts, faces

def build_sky_mesh(config):
    """Build the HEALPix quad mesh described by a ``MeshConfig`` and write it."""
    mesh = SkyMesh.from_healpix(config.nside, nest=config.nest)
    write_obj(config.output_path, mesh)
    logger.info("Wrote %d vertices, %d faces (nside=%d, %s) to %s",
                mesh.n_vertices, mesh.n_faces, mesh.nside,
                "NESTED" if mesh.nest else "RING", config.output_path)
    return mesh
