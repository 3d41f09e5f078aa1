"""Cross-checks against healpy, the reference HEALPix implementation."""
import numpy as np
import pytest

hp = pytest.importorskip("healpy")

from cmbmesh import RingMapper, Ring2NestLUT, ang2pix_nest, pix2ang_nest, boundaries, ud_grade


@pytest.mark.parametrize("nside", [1, 4, 32])
def test_ring2nest(nside):
    ip = np.arange(12*nside*nside)
    np.testing.assert_array_equal(Ring2NestLUT(nside).ring2nest, hp.ring2nest(nside, ip))


@pytest.mark.parametrize("nest", [False, True])
def test_pix2ang(nest):
    nside = 16
    ip = np.arange(12*nside*nside)
    th_ref, ph_ref = hp.pix2ang(nside, ip, nest=nest)
    th, ph = pix2ang_nest(nside, ip) if nest else RingMapper(nside).pix2ang(ip)
    np.testing.assert_allclose(th, th_ref, atol=1e-12)
    np.testing.assert_allclose(ph, ph_ref, atol=1e-12)


def test_ang2pix_random_points():
    nside = 32
    rng = np.random.default_rng(7)
    th = np.arccos(rng.uniform(-1, 1, 5000))
    ph = rng.uniform(0, 2*np.pi, 5000)
    np.testing.assert_array_equal(RingMapper(nside).ang2pix(th, ph), hp.ang2pix(nside, th, ph))
    np.testing.assert_array_equal(ang2pix_nest(nside, th, ph), hp.ang2pix(nside, th, ph, nest=True))


@pytest.mark.parametrize("nest", [False, True])
@pytest.mark.parametrize("step", [1, 3])
def test_boundaries(nest, step):
    nside = 8
    ip = np.arange(12*nside*nside)
    np.testing.assert_allclose(boundaries(nside, ip, step=step, nest=nest),
                               hp.boundaries(nside, ip, step=step, nest=nest), atol=1e-12)


@pytest.mark.parametrize("nside_out", [2, 16])
@pytest.mark.parametrize("order_in,order_out", [("RING", "RING"), ("NESTED", "RING"), ("RING", "NESTED")])
def test_ud_grade(nside_out, order_in, order_out):
    rng = np.random.default_rng(3)
    m = rng.normal(size=12*8*8)
    np.testing.assert_allclose(ud_grade(m, nside_out, order_in=order_in, order_out=order_out),
                               hp.ud_grade(m, nside_out, order_in=order_in, order_out=order_out),
                               rtol=1e-12, atol=1e-15)
