import numpy as np
from .ring_tables import isnsideok, nside2npix
from .coords_ring import RingMapper, _check_pix, _wrap_phi_quadrants

# base-pixel ring number (in units of nside) and azimuth offset (in units of pi/4)
JRLL = np.array([2, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4], dtype=np.int64)
JPLL = np.array([1, 3, 5, 7, 0, 2, 4, 6, 1, 3, 5, 7], dtype=np.int64)


def _check_nside(nside):
    if not isnsideok(nside):
        raise ValueError(f"nside must be a power of 2, got {nside!r}")
    return int(nside)

# --------- bit interleave (ix, iy < 2**29) ---------
def part1by1_64(x):
    x = np.asarray(x, dtype=np.int64)
    x = (x | (x << 16)) & 0x0000FFFF0000FFFF
    x = (x | (x << 8))  & 0x00FF00FF00FF00FF
    x = (x | (x << 4))  & 0x0F0F0F0F0F0F0F0F
    x = (x | (x << 2))  & 0x3333333333333333
    x = (x | (x << 1))  & 0x5555555555555555
    return x

def compact1by1_64(x):
    x = np.asarray(x, dtype=np.int64) & 0x5555555555555555
    x = (x ^ (x >> 1))  & 0x3333333333333333
    x = (x ^ (x >> 2))  & 0x0F0F0F0F0F0F0F0F
    x = (x ^ (x >> 4))  & 0x00FF00FF00FF00FF
    x = (x ^ (x >> 8))  & 0x0000FFFF0000FFFF
    x = (x ^ (x >> 16)) & 0x00000000FFFFFFFF
    return x

def encode_nested(face, ix, iy, nside:int):
    face = np.asarray(face, dtype=np.int64)
    nside = int(nside)
    return face*(nside*nside) + ((part1by1_64(iy) << 1) | part1by1_64(ix))

def decode_nested(ipix, nside:int):
    ip = np.asarray(ipix, dtype=np.int64)
    pix_per_face = int(nside)*int(nside)
    face = ip // pix_per_face
    idx = ip % pix_per_face
    return face, compact1by1_64(idx), compact1by1_64(idx >> 1)

# --------- angles <-> NESTED index ---------
def ang2pix_nest(nside:int, theta, phi):
    ns = _check_nside(nside)
    theta = np.asarray(theta, dtype=np.float64)
    z = np.cos(theta)
    za = np.abs(z)
    tt = _wrap_phi_quadrants(phi)

    # equatorial belt
    temp1 = ns*(0.5 + tt)
    temp2 = ns*(z*0.75)
    jp = (temp1 - temp2).astype(np.int64)
    jm = (temp1 + temp2).astype(np.int64)
    ifp = jp // ns
    ifm = jm // ns
    face_eq = np.where(ifp == ifm, ifp | 4, np.where(ifp < ifm, ifp, ifm + 8))
    ix_eq = jm % ns
    iy_eq = ns - (jp % ns) - 1

    # polar caps
    ntt = np.minimum(3, tt.astype(np.int64))
    tp = tt - ntt
    tmp = ns*np.sqrt(3.0*(1.0 - za))
    jp = np.minimum((tp*tmp).astype(np.int64), ns - 1)
    jm = np.minimum(((1.0 - tp)*tmp).astype(np.int64), ns - 1)
    north = z >= 0
    face_cap = np.where(north, ntt, ntt + 8)
    ix_cap = np.where(north, ns - jm - 1, jp)
    iy_cap = np.where(north, ns - jp - 1, jm)

    eq = za <= 2.0/3.0
    return encode_nested(np.where(eq, face_eq, face_cap),
                         np.where(eq, ix_eq, ix_cap),
                         np.where(eq, iy_eq, iy_cap), ns)

def pix2ang_nest(nside:int, ipix):
    ns = _check_nside(nside)
    ipix = _check_pix(ipix, nside2npix(ns))
    face, ix, iy = decode_nested(ipix, ns)
    fact2 = 4.0 / nside2npix(ns)
    jr = JRLL[face]*ns - ix - iy - 1
    north = jr < ns
    south = jr > 3*ns
    nr = np.where(north, jr, np.where(south, 4*ns - jr, ns))
    z = np.where(north, 1.0 - nr*nr*fact2,
                 np.where(south, nr*nr*fact2 - 1.0, (2*ns - jr)*(2*ns*fact2)))
    tmp = JPLL[face]*nr + ix - iy
    tmp = np.where(tmp < 0, tmp + 8*nr, tmp)
    phi = (0.25*np.pi)*tmp / nr
    return np.arccos(z), phi

def pix2vec_nest(nside:int, ipix):
    th, ph = pix2ang_nest(nside, ipix)
    st = np.sin(th)
    return st*np.cos(ph), st*np.sin(ph), np.cos(th)


class Ring2NestLUT:
    """RING <-> NESTED index tables for one nside.

    Built by locating every RING pixel centre in the NESTED scheme; pass
    ``ring2nest_host`` to reuse a precomputed table.
    """

    def __init__(self, nside:int, ring2nest_host=None):
        self.nside = _check_nside(nside)
        self.npix = nside2npix(self.nside)
        if ring2nest_host is None:
            th, ph = RingMapper(self.nside).all_centers()
            ring2nest_host = ang2pix_nest(self.nside, th, ph)
        self.ring2nest = np.asarray(ring2nest_host, dtype=np.int64)
        if self.ring2nest.shape != (self.npix,):
            raise ValueError(f"ring2nest table must have {self.npix} entries")
        inv = np.full((self.npix,), -1, dtype=np.int64)
        inv[self.ring2nest] = np.arange(self.npix, dtype=np.int64)
        assert (inv >= 0).all(), "ring2nest table is not a permutation"
        self.nest2ring = inv

    def ring_to_nest(self, ipix_ring):
        return self.ring2nest[_check_pix(ipix_ring, self.npix)]

    def nest_to_ring(self, ipix_nest):
        return self.nest2ring[_check_pix(ipix_nest, self.npix)]
