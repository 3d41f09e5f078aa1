"""Tests for HEALPix FITS tables."""
import numpy as np
import pytest
from astropy.io import fits

from cmbmesh import read_map, read_map_fields, write_map, ring2nest


class TestWriteMap:
    def test_header_keywords(self, iqu_fits):
        path, _ = iqu_fits
        hdr = fits.getheader(path, 1)
        assert hdr["PIXTYPE"] == "HEALPIX"
        assert hdr["ORDERING"] == "RING"
        assert hdr["NSIDE"] == 8
        assert hdr["FIRSTPIX"] == 0 and hdr["LASTPIX"] == 767
        assert hdr["INDXSCHM"] == "IMPLICIT"
        assert hdr["COORDSYS"] == "G"

    def test_default_names(self, iqu_fits):
        path, _ = iqu_fits
        with fits.open(path) as hdul:
            assert hdul[1].columns.names == ["I_STOKES", "Q_STOKES", "U_STOKES"]

    def test_extra_header_and_nest(self, tmp_path):
        path = tmp_path / "m.fits"
        write_map(path, np.zeros(48), names=["TEMPERATURE"], nest=True, extra_header={"TELESCOP": "TEST"})
        hdr = fits.getheader(path, 1)
        assert hdr["ORDERING"] == "NESTED"
        assert hdr["TELESCOP"] == "TEST"

    def test_name_count_mismatch(self, tmp_path):
        with pytest.raises(ValueError):
            write_map(tmp_path / "m.fits", np.zeros((2, 48)), names=["A"])

    def test_unit_count_mismatch(self, tmp_path):
        with pytest.raises(ValueError):
            write_map(tmp_path / "m.fits", np.zeros((3, 48)), column_units=["K_CMB"])
        with pytest.raises(ValueError):
            write_map(tmp_path / "m.fits", np.zeros(48), column_units=["K_CMB", "K_CMB"])

    def test_per_column_units(self, tmp_path):
        path = tmp_path / "m.fits"
        write_map(path, np.zeros((2, 48)), names=["TEMPERATURE", "HITS"],
                  column_units=["K_CMB", "counts"])
        hdr = fits.getheader(path, 1)
        assert hdr["TUNIT1"] == "K_CMB"
        assert hdr["TUNIT2"] == "counts"

    def test_bad_length(self, tmp_path):
        with pytest.raises(ValueError):
            write_map(tmp_path / "m.fits", np.zeros(50))

    def test_overwrite_flag(self, tmp_path):
        path = tmp_path / "m.fits"
        write_map(path, np.zeros(12))
        write_map(path, np.ones(12))
        with pytest.raises(OSError):
            write_map(path, np.ones(12), overwrite=False)


class TestReadMap:
    def test_by_index_and_name(self, iqu_fits):
        path, maps = iqu_fits
        q_idx, meta = read_map(path, field=1)
        q_name, _ = read_map(path, field="q_stokes")
        np.testing.assert_array_equal(q_idx, maps[1])
        np.testing.assert_array_equal(q_name, maps[1])
        assert meta["NSIDE"] == 8
        assert meta["ORDERING"] == "RING"
        assert meta["TTYPE"] == "Q_STOKES"
        assert meta["TUNIT"] == "K_CMB"

    def test_convert_to_nested(self, iqu_fits):
        path, maps = iqu_fits
        m, meta = read_map(path, field="U_STOKES", nest=True)
        np.testing.assert_array_equal(m, ring2nest(maps[2]))
        assert meta["ORDERING"] == "NESTED"

    def test_nested_file_to_ring(self, nested_fits):
        path, m_ring = nested_fits
        m, meta = read_map(path, nest=False)
        np.testing.assert_array_equal(m, m_ring)
        assert meta["ORDERING"] == "RING"

    def test_keeps_file_order_by_default(self, nested_fits):
        path, m_ring = nested_fits
        m, meta = read_map(path)
        np.testing.assert_array_equal(m, ring2nest(m_ring))
        assert meta["ORDERING"] == "NESTED"

    def test_multi_sample_rows(self, tmp_path):
        m = np.arange(192, dtype=float)
        col = fits.Column(name="TEMPERATURE", format="4D", array=m.reshape(-1, 4))
        hdu = fits.BinTableHDU.from_columns([col])
        hdu.header["ORDERING"] = "NESTED"
        hdu.header["NSIDE"] = 4
        path = tmp_path / "rows.fits"
        fits.HDUList([fits.PrimaryHDU(), hdu]).writeto(path)
        out, meta = read_map(path)
        np.testing.assert_array_equal(out, m)
        assert meta["ORDERING"] == "NESTED"

    def test_float32_dtype(self, iqu_fits):
        path, _ = iqu_fits
        m, _ = read_map(path, dtype=np.float32)
        assert m.dtype == np.float32

    def test_unknown_field(self, iqu_fits):
        path, _ = iqu_fits
        with pytest.raises(KeyError):
            read_map(path, field="TMASK")
        with pytest.raises(IndexError):
            read_map(path, field=3)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_map(tmp_path / "absent.fits")

    def test_read_fields(self, iqu_fits):
        path, maps = iqu_fits
        out = read_map_fields(path, ["I_STOKES", "U_STOKES"])
        assert list(out) == ["I_STOKES", "U_STOKES"]
        np.testing.assert_array_equal(out["U_STOKES"][0], maps[2])

    def test_to_gpu(self, iqu_fits):
        cp = pytest.importorskip("cupy")
        path, maps = iqu_fits
        m, _ = read_map(path, to_gpu=True)
        assert isinstance(m, cp.ndarray)
        np.testing.assert_array_equal(cp.asnumpy(m), maps[0])
