import numpy as np

UNSEEN = -1.6375e30


def isnsideok(nside)->bool:
    try:
        nside = int(nside)
    except (TypeError, ValueError):
        return False
    return nside >= 1 and (nside & (nside-1)) == 0

def nside2npix(nside:int)->int:
    return 12*int(nside)*int(nside)

def npix2nside(npix:int)->int:
    npix = int(npix)
    nside = int(np.sqrt(npix // 12))
    if 12*nside*nside != npix or nside < 1:
        raise ValueError(f"npix={npix} is not 12*nside^2")
    return nside


class HealpixRingTables:
    """Iso-latitude ring layout of a RING-ordered HEALPix map.

    Rings are numbered north to south. For ring ``r`` the pixels
    ``ring_start[r] .. ring_start[r+1]-1`` share ``z_centers[r]`` and are
    spaced ``2*pi/nphi[r]`` apart in azimuth starting at ``phi_center0[r]``.
    """

    def __init__(self, nside:int):
        if not isnsideok(nside):
            raise ValueError(f"nside must be a power of 2, got {nside!r}")
        self.nside = int(nside)
        ns = self.nside
        Nr = 4*ns - 1
        i = np.arange(1, Nr+1, dtype=np.int64)
        north = i < ns
        south = i > 3*ns
        # pixels-per-ring index: i in the north cap, 4*nside-i in the south cap
        ir = np.where(north, i, np.where(south, 4*ns - i, ns))
        self.nphi = (4*ir).astype(np.int32)

        cap = 1.0 - (ir*ir) / (3.0*ns*ns)
        belt = (2*ns - i) * (2.0 / (3.0*ns))
        self.z_centers = np.where(north, cap, np.where(south, -cap, belt))
        self.theta_centers = np.arccos(self.z_centers)

        # belt rings with (i+nside) odd start at phi=0, the rest are shifted half a pixel
        shifted = ((i + ns) & 1) == 0
        self.phi_center0 = np.where(north | south, np.pi / (4.0*ir),
                                    np.where(shifted, np.pi / (4.0*ns), 0.0))

        self.ring_start = np.zeros((Nr+1,), dtype=np.int64)
        self.ring_start[1:] = np.cumsum(self.nphi, dtype=np.int64)

        self.z_edges = np.empty((Nr+1,), dtype=np.float64)
        self.z_edges[0] = 1.0
        self.z_edges[-1] = -1.0
        self.z_edges[1:-1] = 0.5*(self.z_centers[:-1] + self.z_centers[1:])

        self.Nr = Nr
        self.npix = int(self.ring_start[-1])
        assert self.npix == nside2npix(ns), f"npix mismatch {self.npix} vs 12 nside^2"

    def ring_of(self, ipix):
        """Ring index (0-based) of each RING pixel."""
        ipix = np.asarray(ipix, dtype=np.int64)
        return np.searchsorted(self.ring_start, ipix, side='right') - 1

    def weights_dz(self):
        return self.z_edges[:-1] - self.z_edges[1:]

    def dump_host(self):
        return {
            "nside": self.nside,
            "Nr": self.Nr,
            "npix": self.npix,
            "z_centers": self.z_centers.copy(),
            "theta_centers": self.theta_centers.copy(),
            "nphi": self.nphi.copy(),
            "phi_center0": self.phi_center0.copy(),
            "ring_start": self.ring_start.copy(),
            "z_edges": self.z_edges.copy(),
        }
