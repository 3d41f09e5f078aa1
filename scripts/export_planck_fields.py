"""Downgrade the Planck SMICA I/Q/U maps and dump them as text, in uK.

The output ordering (RING) matches the mesh written by make_sky_mesh.py,
so line ``p`` of each text file is the value of face ``p``.
"""
import logging

from cmbmesh import ExportConfig, export_fields, setup_logging

SOURCE = "COM_CMB_IQU-smica_2048_R3.00_full.fits"
FIELDS = ("I_STOKES", "Q_STOKES", "U_STOKES")
NSIDE_OUT = 64
UNIT_SCALE = 1e6  # K_CMB -> uK_CMB

if __name__ == "__main__":
    setup_logging(logging.INFO)
    export_fields(ExportConfig(source_path=SOURCE, fields=FIELDS,
                               nside_out=NSIDE_OUT, order_out="RING",
                               unit_scale=UNIT_SCALE, output_dir="."))
