"""Write a HEALPix quad mesh (one face per pixel) as an OBJ file.

Edit the values below and run the script. Import the OBJ into the 3D
application, then merge by distance to weld the shared pixel corners.
"""
from cmbmesh import MeshConfig, build_sky_mesh, setup_logging

NSIDE = 64
NEST = False
OUTPUT = "healpix_nside64.obj"

if __name__ == "__main__":
    setup_logging("info")
    build_sky_mesh(MeshConfig(nside=NSIDE, nest=NEST, output_path=OUTPUT))
