"""Resample named map fields and dump them as plain text, one value per line."""
import logging

import numpy as np

from .ring_tables import UNSEEN, npix2nside
from .io_fits import read_map
from .udgrade import ud_grade, mask_bad

logger = logging.getLogger(__name__)


def scale_units(m, unit_scale, badval=UNSEEN):
    m = np.asarray(m, dtype=np.float64)
    return np.where(mask_bad(m, badval), badval, m*unit_scale)

def export_field(source_path, field, config):
    m, meta = read_map(source_path, field=field)
    order_in = config.order_in or meta["ORDERING"]
    nside_in = npix2nside(m.size)
    out = ud_grade(m, config.nside_out, order_in=order_in, order_out=config.order_out,
                   conserve=config.conserve, pess=config.pess)
    out = scale_units(out, config.unit_scale)
    path = config.output_path(field)
    np.savetxt(path, out)
    logger.info("%s: nside %d (%s) -> %d (%s), x%g, wrote %s",
                field, nside_in, order_in, config.nside_out, config.order_out,
                config.unit_scale, path)
    return path, out

def export_fields(config):
    """Export every field in ``config.fields``; the first failure propagates."""
    written = {}
    for name in config.fields:
        path, _ = export_field(config.source_path, name, config)
        written[name] = path
    return written

def load_exported(path):
    return np.loadtxt(path, dtype=np.float64, ndmin=1)
