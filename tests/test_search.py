"""Tests for critical water level search and parameter sweeps."""

import numpy as np
import pytest

from pygravdam.materials import MaterialProperties
from pygravdam.section.features import analyze_features
from pygravdam.section.profile import Profile2D
from pygravdam.stability.calculator import analyze_stability
from pygravdam.stability.parameters import AnalysisParameters
from pygravdam.stability.search import critical_water_level, parameter_sweep


def _block():
    return Profile2D.from_points([(0, 0), (10, 0), (10, 10), (0, 10)])


def _sliding_sf(h):
    """Block with full uplift: (2400 − 49.05 h) 0.75 / (4.905 h²)."""
    return (2400.0 - 49.05 * h) * 0.75 / (4.905 * h * h)


class TestCriticalWaterLevel:
    def test_sliding_root(self):
        h = critical_water_level(_block(), MaterialProperties())
        assert h is not None
        assert 8.0 < h < 10.0
        assert _sliding_sf(h) == pytest.approx(3.0, abs=1e-4)

    def test_root_matches_calculator(self):
        params = AnalysisParameters()
        h = critical_water_level(_block(), MaterialProperties(), params)
        r = analyze_stability(_block(), MaterialProperties(), params.with_values(upstream_water_level=h))
        assert r.sliding_sf == pytest.approx(params.required_sliding_sf, abs=1e-4)

    def test_accepts_features(self):
        a = critical_water_level(_block(), MaterialProperties())
        b = critical_water_level(analyze_features(_block()), MaterialProperties())
        assert a == pytest.approx(b)

    def test_passes_at_crest(self):
        # Overturning SF is still about 2.45 with water at the crest
        assert critical_water_level(_block(), MaterialProperties(), criterion="overturning") is None

    def test_fails_when_empty(self):
        # Seismic load alone: SF = 2400 * 0.75 / 1200 = 1.5 below 3.0
        params = AnalysisParameters(seismic_coefficient=0.5)
        assert critical_water_level(_block(), MaterialProperties(), params) is None

    def test_infinite_sf_counts_as_passing(self):
        params = AnalysisParameters(required_sliding_sf=1e7)
        h = critical_water_level(_block(), MaterialProperties(), params)
        assert h is not None
        assert _sliding_sf(h) == pytest.approx(1e7, rel=1e-2)

    def test_unknown_criterion(self):
        with pytest.raises(ValueError):
            critical_water_level(_block(), MaterialProperties(), criterion="stress")


class TestParameterSweep:
    def test_seismic_sweep(self):
        params = AnalysisParameters(upstream_water_level=6.0)
        sweep = parameter_sweep(
            _block(), MaterialProperties(), params, "seismic_coefficient", [0.0, 0.05, 0.1, 0.2]
        )
        assert sweep.name == "seismic_coefficient"
        assert len(sweep.results) == 4
        assert np.all(np.diff(sweep.sliding_sf) < 0)
        assert np.all(np.diff(sweep.overturning_sf) < 0)

    def test_water_level_sweep_stability(self):
        sweep = parameter_sweep(
            _block(), MaterialProperties(), None, "upstream_water_level", [2.0, 10.0]
        )
        np.testing.assert_array_equal(sweep.stable, [True, False])
        assert sweep.sliding_sf[1] == pytest.approx(_sliding_sf(10.0))

    def test_unknown_parameter(self):
        with pytest.raises(ValueError):
            parameter_sweep(_block(), MaterialProperties(), None, "reservoir", [1.0])
