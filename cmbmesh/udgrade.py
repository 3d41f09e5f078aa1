import numpy as np
from .ring_tables import UNSEEN, isnsideok, npix2nside, nside2npix
from .order_convert import normalize_ordering, convert


def mask_bad(m, badval=UNSEEN, rtol=1e-5, atol=1e-8):
    m = np.asarray(m)
    return ~np.isfinite(m) | (np.abs(m - badval) <= atol + rtol*abs(badval))

def _factor(nside_big, nside_small):
    if not (isnsideok(nside_big) and isnsideok(nside_small)):
        raise ValueError(f"nside values must be powers of 2, got {nside_big} and {nside_small}")
    if nside_big % nside_small:
        raise ValueError(f"nside {nside_big} is not a multiple of {nside_small}")
    return int(nside_big) // int(nside_small)

def _check_conserve(conserve):
    if conserve not in ("mean", "sum"):
        raise ValueError(f"conserve must be 'mean' or 'sum', got {conserve!r}")

# --------- NESTED degrade (children of a parent are contiguous) ---------
def degrade_nested(map_nested, nside_src, nside_dst, conserve='mean', pess=False, badval=UNSEEN):
    _check_conserve(conserve)
    m = np.asarray(map_nested, dtype=np.float64)
    factor = _factor(nside_src, nside_dst)
    if m.shape[-1] != nside2npix(nside_src):
        raise ValueError(f"map length {m.shape[-1]} does not match nside={nside_src}")
    blocks = m.reshape(m.shape[:-1] + (nside2npix(nside_dst), factor*factor))
    bad = mask_bad(blocks, badval)
    nvalid = (~bad).sum(axis=-1)
    s = np.where(bad, 0.0, blocks).sum(axis=-1)
    out = s if conserve == 'sum' else s / np.maximum(nvalid, 1)
    empty = bad.any(axis=-1) if pess else (nvalid == 0)
    return np.where(empty, badval, out)

# --------- NESTED upgrade (spread parent to children) ---------
def upgrade_nested(map_nested, nside_src, nside_dst, conserve='mean', badval=UNSEEN):
    _check_conserve(conserve)
    m = np.asarray(map_nested, dtype=np.float64)
    factor = _factor(nside_dst, nside_src)
    if m.shape[-1] != nside2npix(nside_src):
        raise ValueError(f"map length {m.shape[-1]} does not match nside={nside_src}")
    out = np.repeat(m, factor*factor, axis=-1)
    if conserve == 'sum':
        # split the parent's sum evenly among its factor^2 children
        out = np.where(mask_bad(out, badval), badval, out / float(factor*factor))
    return out

def ud_grade(map_in, nside_out, order_in='RING', order_out='RING', conserve='mean',
             pess=False, power=None, badval=UNSEEN):
    """Change the resolution of a map (1-D, or stacked maps on the last axis).

    Works in NESTED internally; ``order_in``/``order_out`` select the pixel
    ordering of the input and of the result. ``power`` scales the output by
    ``(nside_out/nside_in)**power`` as healpy does.
    """
    m = np.asarray(map_in, dtype=np.float64)
    nside_in = npix2nside(m.shape[-1])
    nside_out = int(nside_out)
    if not isnsideok(nside_out):
        raise ValueError(f"nside_out must be a power of 2, got {nside_out}")
    order_in = normalize_ordering(order_in)
    order_out = normalize_ordering(order_out)

    m_nest = convert(m, order_in, 'NESTED', nside_in)
    if nside_out < nside_in:
        out = degrade_nested(m_nest, nside_in, nside_out, conserve=conserve, pess=pess, badval=badval)
    elif nside_out > nside_in:
        out = upgrade_nested(m_nest, nside_in, nside_out, conserve=conserve, badval=badval)
    else:
        out = m_nest.copy()

    if power is not None:
        ratio = (float(nside_out) / float(nside_in)) ** float(power)
        out = np.where(mask_bad(out, badval), badval, out*ratio)

    return convert(out, 'NESTED', order_out, nside_out)
