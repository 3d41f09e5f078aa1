import logging

import numpy as np

from .ring_tables import npix2nside
from .order_convert import normalize_ordering, convert

logger = logging.getLogger(__name__)

META_KEYS = ["NSIDE", "ORDERING", "COORDSYS", "PIXTYPE", "INDXSCHM", "OBJECT", "EXTNAME"]
STOKES_NAMES = ["I_STOKES", "Q_STOKES", "U_STOKES"]


def _ensure_astropy():
    try:
        import astropy.io.fits as fits  # noqa: F401
        return True
    except ImportError:
        return False

def _fits():
    if not _ensure_astropy():
        raise ImportError("astropy is required for FITS I/O. Try `pip install astropy`.")
    import astropy.io.fits as fits
    return fits

def _to_device(arr):
    try:
        import cupy as cp
    except ImportError as e:
        raise ImportError("cupy is required for to_gpu=True. Try `pip install cmbmesh[gpu]`.") from e
    return cp.asarray(arr)

def _to_host(m):
    return np.asarray(m.get() if hasattr(m, "__cuda_array_interface__") else m)

def _column_index(columns, field):
    names = list(columns.names)
    if isinstance(field, (int, np.integer)):
        if not -len(names) <= field < len(names):
            raise IndexError(f"field {field} out of range, table has {len(names)} columns")
        return int(field) % len(names)
    upper = [n.upper() for n in names]
    try:
        return upper.index(str(field).upper())
    except ValueError:
        raise KeyError(f"no column {field!r} in table; available: {names}") from None

def read_map(path, field=0, hdu=1, nest=None, dtype=np.float64, to_gpu=False):
    """Read one column of a HEALPix binary table.

    ``field`` is a column index or a (case-insensitive) column name. Returns
    ``(map, meta)``; ``meta`` carries the HEALPix header keywords found plus
    ``TUNIT`` and ``TTYPE`` of the column. The map keeps the file ordering
    unless ``nest`` is given, in which case it is converted to NESTED
    (``True``) or RING (``False``).
    """
    fits = _fits()
    with fits.open(path, memmap=False) as hdul:
        table = hdul[hdu]
        idx = _column_index(table.columns, field)
        arr = np.array(table.data.field(idx), dtype=dtype).ravel()
        header = table.header
        meta = {k: header[k] for k in META_KEYS if k in header}
        meta["TTYPE"] = table.columns.names[idx]
        unit = header.get(f"TUNIT{idx+1}")
        if unit is not None:
            meta["TUNIT"] = unit

    nside = npix2nside(arr.size)
    if "NSIDE" in meta and int(meta["NSIDE"]) != nside:
        logger.warning("%s: NSIDE keyword %s disagrees with %d pixels", path, meta["NSIDE"], arr.size)
    meta["NSIDE"] = nside
    ordering = normalize_ordering(meta.get("ORDERING", "RING"))
    if nest is not None:
        wanted = "NESTED" if nest else "RING"
        arr = convert(arr, ordering, wanted, nside)
        ordering = wanted
    meta["ORDERING"] = ordering
    logger.debug("read %s[%s] nside=%d ordering=%s", path, meta["TTYPE"], nside, ordering)
    return (_to_device(arr) if to_gpu else arr), meta

def read_map_fields(path, fields, hdu=1, nest=None, dtype=np.float64):
    return {f: read_map(path, field=f, hdu=hdu, nest=nest, dtype=dtype) for f in fields}

def write_map(path, maps, names=None, nest=False, coordsys="G", column_units=None,
              overwrite=True, extra_header=None):
    """Write one or more full-sky maps as columns of a HEALPix binary table."""
    fits = _fits()
    m_host = np.atleast_2d(_to_host(maps).astype(np.float64))
    nmaps, npix = m_host.shape
    nside = npix2nside(npix)
    if names is None:
        names = STOKES_NAMES[:nmaps] if nmaps <= len(STOKES_NAMES) else [f"C{i+1}" for i in range(nmaps)]
    if len(names) != nmaps:
        raise ValueError(f"{len(names)} column names for {nmaps} maps")
    if column_units is None or isinstance(column_units, str):
        column_units = [column_units]*nmaps
    if len(column_units) != nmaps:
        raise ValueError(f"{len(column_units)} column units for {nmaps} maps")
    cols = [fits.Column(name=n, format="D", unit=u, array=m)
            for n, u, m in zip(names, column_units, m_host)]
    hdu = fits.BinTableHDU.from_columns(cols)
    hdr = hdu.header
    hdr["PIXTYPE"] = ("HEALPIX", "HEALPIX pixelisation")
    hdr["ORDERING"] = ("NESTED" if nest else "RING", "Pixel ordering scheme")
    hdr["COORDSYS"] = (coordsys, "Ecliptic, Galactic or Celestial (equatorial)")
    hdr["EXTNAME"] = "xtension"
    hdr["NSIDE"] = (nside, "Resolution parameter of HEALPIX")
    hdr["FIRSTPIX"] = (0, "First pixel # (0 based)")
    hdr["LASTPIX"] = (npix - 1, "Last pixel # (0 based)")
    hdr["INDXSCHM"] = ("IMPLICIT", "Indexing: IMPLICIT or EXPLICIT")
    hdr["OBJECT"] = ("FULLSKY", "Sky coverage")
    if extra_header:
        for k, v in extra_header.items():
            hdr[k] = v
    fits.HDUList([fits.PrimaryHDU(), hdu]).writeto(path, overwrite=overwrite)
    return path
