# imports
import math
import pytest
import numpy as np
from scipy import special, stats
from groupstats.stats.normal import erf, normal_cdf, probit, PROBIT_CLIP

def test_probit_center():
    """
    probit(0.5) is zero
    """
    assert abs(probit(0.5)) < 1e-8

def test_probit_symmetry_and_monotonicity():
    """
    probit(p) == -probit(1 - p) and probit increases with p
    """
    p = np.linspace(0.001, 0.999, 999)
    z = probit(p)
    assert np.all(np.diff(z) > 0)
    np.testing.assert_allclose(z, -probit(1.0 - p), atol=1e-8)

@pytest.mark.parametrize("p", [1e-6, 0.001, 0.02, 0.02425, 0.1, 0.3, 0.5, 0.7, 0.97575, 0.99, 0.999999])
def test_probit_accuracy(p):
    """
    Agrees with SciPy's normal quantile in every branch
    """
    assert probit(p) == pytest.approx(stats.norm.ppf(p), rel=1e-8, abs=1e-9)

def test_probit_sentinels():
    """
    Out-of-range probabilities map to infinities, or the clip value
    """
    assert probit(0.0) == -math.inf
    assert probit(1.0) == math.inf
    assert probit(-0.5) == -math.inf
    assert probit(0.0, clip=PROBIT_CLIP) == -3.5
    assert probit(1.0, clip=PROBIT_CLIP) == 3.5
    assert math.isnan(probit(math.nan))

def test_probit_scalar_and_array():
    """
    Scalars come back as floats, arrays as arrays
    """
    assert isinstance(probit(0.3), float)
    out = probit(np.array([0.0, 0.5, 1.0]))
    assert isinstance(out, np.ndarray)
    assert out.shape == (3,)
    assert out[1] == 0.0

def test_erf_accuracy():
    """
    Close to the exact error function (published bound 1.5e-7)
    """
    x = np.linspace(-4, 4, 801)
    assert np.max(np.abs(erf(x) - special.erf(x))) < 2e-7
    assert erf(0.0) == pytest.approx(0.0, abs=1e-8)
    assert erf(-1.0) == pytest.approx(-erf(1.0))

def test_normal_cdf():
    """
    Normal CDF built from erf, and its round trip through probit
    """
    assert normal_cdf(0.0) == pytest.approx(0.5, abs=1e-8)
    assert normal_cdf(1.959964) == pytest.approx(0.975, abs=1e-6)
    for p in (0.05, 0.25, 0.75, 0.95):
        assert normal_cdf(probit(p)) == pytest.approx(p, abs=1e-6)
