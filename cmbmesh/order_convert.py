import numpy as np
from .ring_tables import npix2nside
from .nested import Ring2NestLUT

_lut_cache = {}
def get_lut(nside:int)->Ring2NestLUT:
    nside = int(nside)
    if nside not in _lut_cache:
        _lut_cache[nside] = Ring2NestLUT(nside)
    return _lut_cache[nside]

def normalize_ordering(order)->str:
    o = str(order).strip().upper()
    if o.startswith("NEST"):
        return "NESTED"
    if o == "RING":
        return "RING"
    raise ValueError(f"unknown pixel ordering {order!r}, expected 'RING' or 'NESTED'")

def _resolve(m, nside):
    m = np.asarray(m)
    if nside is None:
        nside = npix2nside(m.shape[-1])
    elif 12*int(nside)*int(nside) != m.shape[-1]:
        raise ValueError(f"map length {m.shape[-1]} does not match nside={nside}")
    return m, int(nside)

def ring2nest(m_ring, nside=None):
    m_ring, nside = _resolve(m_ring, nside)
    out = np.empty_like(m_ring)
    out[..., get_lut(nside).ring2nest] = m_ring
    return out

def nest2ring(m_nest, nside=None):
    m_nest, nside = _resolve(m_nest, nside)
    return m_nest[..., get_lut(nside).ring2nest]

def reorder(m, r2n=False, n2r=False):
    if r2n == n2r:
        raise ValueError("exactly one of r2n, n2r must be set")
    return ring2nest(m) if r2n else nest2ring(m)

def convert(m, order_in, order_out, nside=None):
    """Reorder ``m`` from ``order_in`` to ``order_out``; same ordering returns ``m`` as an array."""
    order_in = normalize_ordering(order_in)
    order_out = normalize_ordering(order_out)
    if order_in == order_out:
        return np.asarray(m)
    return ring2nest(m, nside) if order_in == "RING" else nest2ring(m, nside)
