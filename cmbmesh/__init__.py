"""
cmbmesh - HEALPix sky maps prepared for 3D content-creation tools

Two batch pipelines:
- Pixel mesh: one quad per HEALPix pixel, written as OBJ text
  (``v x y z`` / ``f i1 i2 i3 i4``), vertices in a left-handed frame
- Map export: FITS map fields resampled (ud_grade), unit-scaled and saved
  as plain text, one value per pixel

plus the HEALPix geometry they rest on (RING and NESTED indexing, pixel
boundaries, order conversion), FITS I/O and a Mollweide preview.

Usage:
    from cmbmesh import MeshConfig, ExportConfig, build_sky_mesh, export_fields

    build_sky_mesh(MeshConfig(nside=64, output_path="sky.obj"))
    export_fields(ExportConfig(source_path="smica.fits", nside_out=64))
"""

__version__ = "0.1.0"

# Geometry
from .ring_tables import HealpixRingTables, UNSEEN, isnsideok, nside2npix, npix2nside
from .coords_ring import RingMapper, vec2pix_ring
from .nested import ang2pix_nest, pix2ang_nest, pix2vec_nest, Ring2NestLUT
from .order_convert import ring2nest, nest2ring, reorder
from .boundaries import boundaries, pixel_corners

# Resampling
from .udgrade import ud_grade, degrade_nested, upgrade_nested, mask_bad

# Mesh
from .mesh_obj import SkyMesh, to_left_handed, quad_faces, write_obj, read_obj, build_sky_mesh

# FITS I/O
from .io_fits import read_map, read_map_fields, write_map

# Export pipeline
from .export import export_field, export_fields, load_exported

# Config / logging
from .config import MeshConfig, ExportConfig
from .logging_config import setup_logging

# Visualization
from .viz import mollview

__all__ = [
    # Geometry
    'HealpixRingTables', 'UNSEEN', 'isnsideok', 'nside2npix', 'npix2nside',
    'RingMapper', 'vec2pix_ring',
    'ang2pix_nest', 'pix2ang_nest', 'pix2vec_nest', 'Ring2NestLUT',
    'ring2nest', 'nest2ring', 'reorder',
    'boundaries', 'pixel_corners',

    # Resampling
    'ud_grade', 'degrade_nested', 'upgrade_nested', 'mask_bad',

    # Mesh
    'SkyMesh', 'to_left_handed', 'quad_faces', 'write_obj', 'read_obj', 'build_sky_mesh',

    # I/O
    'read_map', 'read_map_fields', 'write_map',

    # Export
    'export_field', 'export_fields', 'load_exported',

    # Config
    'MeshConfig', 'ExportConfig', 'setup_logging',

    # Viz
    'mollview',
]
