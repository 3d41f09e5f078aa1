import numpy as np
from .ring_tables import HealpixRingTables


def _check_pix(ipix, npix):
    ipix = np.asarray(ipix, dtype=np.int64)
    if ipix.size and (ipix.min() < 0 or ipix.max() >= npix):
        raise ValueError(f"pixel index out of range [0, {npix})")
    return ipix

def _wrap_phi_quadrants(phi):
    # azimuth in units of pi/2, folded into [0, 4)
    tt = np.mod(np.asarray(phi, dtype=np.float64) / (0.5*np.pi), 4.0)
    return np.where(tt >= 4.0, tt - 4.0, tt)


class RingMapper:
    def __init__(self, nside:int):
        self.tables = HealpixRingTables(nside)
        self.nside = self.tables.nside
        self.npix = self.tables.npix

    def ang2pix(self, theta, phi):
        theta = np.asarray(theta, dtype=np.float64)
        ns = self.nside
        ncap = 2*ns*(ns-1)
        z = np.cos(theta)
        za = np.abs(z)
        tt = _wrap_phi_quadrants(phi)

        # equatorial belt: ascending/descending edge line indices
        temp1 = ns*(0.5 + tt)
        temp2 = ns*z*0.75
        jp = (temp1 - temp2).astype(np.int64)
        jm = (temp1 + temp2).astype(np.int64)
        ir = ns + 1 + jp - jm
        kshift = 1 - (ir & 1)
        t1 = jp + jm - ns + kshift + 1 + 8*ns
        pix_eq = ncap + (ir - 1)*4*ns + (t1 >> 1) % (4*ns)

        # polar caps
        tp = tt - np.floor(tt)
        tmp = ns*np.sqrt(3.0*(1.0 - za))
        jp = (tp*tmp).astype(np.int64)
        jm = ((1.0 - tp)*tmp).astype(np.int64)
        ir = jp + jm + 1
        ip = (tt*ir).astype(np.int64) % (4*ir)
        pix_cap = np.where(z > 0, 2*ir*(ir-1) + ip, self.npix - 2*ir*(ir+1) + ip)

        return np.where(za <= 2.0/3.0, pix_eq, pix_cap)

    def pix2ang(self, ipix):
        ipix = _check_pix(ipix, self.npix)
        tabs = self.tables
        r = tabs.ring_of(ipix)
        j = ipix - tabs.ring_start[r]
        theta = tabs.theta_centers[r]
        phi = tabs.phi_center0[r] + j*(2*np.pi / tabs.nphi[r])
        return theta, phi

    def pix2vec(self, ipix):
        th, ph = self.pix2ang(ipix)
        st = np.sin(th)
        return st*np.cos(ph), st*np.sin(ph), np.cos(th)

    def all_centers(self):
        return self.pix2ang(np.arange(self.npix, dtype=np.int64))

    def weights_dz(self):
        return self.tables.weights_dz()


def vec2pix_ring(x, y, z, mapper: 'RingMapper'):
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)
    r = np.sqrt(x*x + y*y + z*z)
    theta = np.arccos(np.clip(z / r, -1.0, 1.0))
    phi = np.arctan2(y, x)
    phi = np.where(phi < 0, phi + 2*np.pi, phi)
    return mapper.ang2pix(theta, phi)
