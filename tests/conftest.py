import logging

import numpy as np
import pytest

from cmbmesh import write_map, ring2nest


@pytest.fixture
def ring_map():
    """nside=4 RING map whose value is its pixel index."""
    return np.arange(192, dtype=np.float64)


@pytest.fixture
def iqu_fits(tmp_path):
    """nside=8 RING I/Q/U table in K_CMB, laid out like a Planck component map."""
    npix = 768
    rng = np.random.default_rng(1234)
    maps = np.stack([
        np.full(npix, 2.5e-6),
        rng.normal(0.0, 1e-6, npix),
        rng.normal(0.0, 1e-6, npix),
    ])
    path = tmp_path / "iqu_ring.fits"
    write_map(path, maps, column_units="K_CMB")
    return path, maps


@pytest.fixture
def nested_fits(tmp_path):
    """nside=4 NESTED single-column file; also returns the same map in RING order."""
    m_ring = np.linspace(-1.0, 1.0, 192)
    path = tmp_path / "t_nest.fits"
    write_map(path, ring2nest(m_ring), names=["I_STOKES"], nest=True)
    return path, m_ring


@pytest.fixture
def clean_cmbmesh_logger():
    yield
    logger = logging.getLogger("cmbmesh")
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logging.getLogger("matplotlib").setLevel(logging.NOTSET)
