"""Pixel boundary corners.

The corners of every pixel are computed in continuous face coordinates
``(x, y)`` on the base pixel ``face``: pixel ``(ix, iy)`` covers
``[ix/nside, (ix+1)/nside] x [iy/nside, (iy+1)/nside]``.
"""
import numpy as np
from .ring_tables import nside2npix
from .coords_ring import _check_pix
from .nested import JRLL, JPLL, _check_nside, decode_nested
from .order_convert import get_lut


def xyf2loc(x, y, face):
    """Continuous face coordinates -> ``(z, phi, sin(theta))``."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    face = np.asarray(face, dtype=np.int64)
    jr = JRLL[face] - x - y
    north = jr < 1
    south = jr > 3
    nr = np.where(north, jr, np.where(south, 4 - jr, 1.0))
    tmp = nr*nr/3.0
    z = np.where(north, 1.0 - tmp, np.where(south, tmp - 1.0, (2 - jr)*2.0/3.0))
    # (1-z)(1+z) == tmp*(2-tmp) in the caps, without cancellation near the poles
    sth = np.where(north | south, np.sqrt(np.abs(tmp*(2.0 - tmp))), np.sqrt((1.0 - z)*(1.0 + z)))
    t = JPLL[face]*nr + x - y
    t = np.where(t < 0, t + 8, t)
    t = np.where(t >= 8, t - 8, t)
    pole = nr < 1e-15
    phi = np.where(pole, 0.0, (0.25*np.pi)*t / np.where(pole, 1.0, nr))
    return z, phi, sth

def boundaries(nside:int, pix, step:int=1, nest=False):
    """Boundary points of pixels as unit vectors.

    Returns shape ``(3, 4*step)`` for a scalar ``pix`` and ``(N, 3, 4*step)``
    for an array. With ``step=1`` the corners come out N, W, S, E.
    """
    nside = _check_nside(nside)
    step = int(step)
    if step < 1:
        raise ValueError("step must be >= 1")
    pix = _check_pix(pix, nside2npix(nside))
    scalar = pix.ndim == 0
    pix = np.atleast_1d(pix)
    if not nest:
        pix = get_lut(nside).ring_to_nest(pix)
    face, ix, iy = decode_nested(pix, nside)

    dc = 0.5/nside
    xc = ((ix + 0.5)/nside)[:, None]
    yc = ((iy + 0.5)/nside)[:, None]
    d = (np.arange(step, dtype=np.float64) / (step*nside))[None, :]
    flat = np.zeros_like(d)
    x = np.concatenate([xc + dc - d, xc - dc + flat, xc - dc + d, xc + dc + flat], axis=1)
    y = np.concatenate([yc + dc + flat, yc + dc - d, yc - dc + flat, yc - dc + d], axis=1)

    z, phi, sth = xyf2loc(x, y, np.broadcast_to(face[:, None], x.shape))
    vec = np.stack([sth*np.cos(phi), sth*np.sin(phi), z], axis=1)
    return vec[0] if scalar else vec

def pixel_corners(nside:int, nest=False):
    """Flat ``(4*npix, 3)`` corner array; rows ``4p..4p+3`` belong to pixel ``p``."""
    npix = nside2npix(_check_nside(nside))
    b = boundaries(nside, np.arange(npix, dtype=np.int64), step=1, nest=nest)
    return np.ascontiguousarray(b.transpose(0, 2, 1)).reshape(4*npix, 3)
