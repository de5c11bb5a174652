"""Tests for load assembly."""

import pytest

from pygravdam.errors import WarningCode
from pygravdam.materials import MaterialProperties
from pygravdam.section.features import analyze_features
from pygravdam.section.profile import Profile2D
from pygravdam.stability.loads import assemble_loads, uplift_resultant
from pygravdam.stability.parameters import AnalysisParameters


def _dam_features():
    """Base 30, crest 6, height 40; area 720, centroid (31/3, 140/9)."""
    return analyze_features(Profile2D.from_points([(0, 0), (30, 0), (6, 40), (0, 40)]))


def _load_case(**kw):
    values = dict(
        upstream_water_level=36.0,
        downstream_water_level=4.0,
        seismic_coefficient=0.05,
    )
    values.update(kw)
    return AnalysisParameters(**values)


class TestUpliftResultant:
    def test_uniform(self):
        U, x_bar = uplift_resultant(10.0, 50.0, 50.0)
        assert U == pytest.approx(500.0)
        assert x_bar == pytest.approx(5.0)

    def test_triangular(self):
        U, x_bar = uplift_resultant(30.0, 90.0, 0.0)
        assert U == pytest.approx(1350.0)
        assert x_bar == pytest.approx(10.0)

    def test_zero(self):
        assert uplift_resultant(10.0, 0.0, 0.0) == (0.0, 0.0)


class TestAssembleLoads:
    def test_all_cases_present(self):
        system = assemble_loads(_dam_features(), MaterialProperties(), AnalysisParameters())
        assert [f.name for f in system] == [
            "self_weight", "upstream_water", "downstream_water", "uplift", "seismic",
        ]
        assert system["upstream_water"].magnitude == 0.0

    def test_magnitudes(self):
        system = assemble_loads(_dam_features(), MaterialProperties(), _load_case())
        assert system.self_weight == pytest.approx(17280.0)
        assert system["upstream_water"].magnitude == pytest.approx(6356.88)
        assert system["downstream_water"].magnitude == pytest.approx(78.48)
        assert system.uplift == pytest.approx(5886.0)
        assert system.seismic == pytest.approx(864.0)
        assert system.horizontal_water_force == pytest.approx(6356.88 - 78.48)

    def test_application_points(self):
        system = assemble_loads(_dam_features(), MaterialProperties(), _load_case())
        assert system["upstream_water"].point.y == pytest.approx(12.0)
        assert system["downstream_water"].point.x == pytest.approx(30.0)
        assert system["uplift"].point.x == pytest.approx(11.0)
        assert system["self_weight"].point.x == pytest.approx(31.0 / 3.0)
        assert system["seismic"].point.y == pytest.approx(140.0 / 9.0)

    def test_sums(self):
        system = assemble_loads(_dam_features(), MaterialProperties(), _load_case())
        assert system.vertical_sum == pytest.approx(17280.0 - 5886.0)
        assert system.horizontal_sum == pytest.approx(6356.88 - 78.48 + 864.0)
        assert system.base_width == pytest.approx(30.0)

    def test_toe_moments(self):
        system = assemble_loads(_dam_features(), MaterialProperties(), _load_case())
        m = system.toe_moments()
        assert m["self_weight"] == pytest.approx(339840.0)
        assert m["upstream_water"] == pytest.approx(-76282.56)
        assert m["downstream_water"] == pytest.approx(104.64)
        assert m["uplift"] == pytest.approx(-111834.0)
        assert m["seismic"] == pytest.approx(-13440.0)
        assert system.moment_about(30.0, 0.0) == pytest.approx(sum(m.values()))

    def test_uplift_disabled(self):
        system = assemble_loads(
            _dam_features(), MaterialProperties(), _load_case(consider_uplift=False)
        )
        assert system.uplift == 0.0
        assert system["uplift"].point.x == pytest.approx(15.0)

    def test_uplift_reduction(self):
        full = assemble_loads(_dam_features(), MaterialProperties(), _load_case())
        half = assemble_loads(
            _dam_features(), MaterialProperties(), _load_case(uplift_reduction_factor=0.5)
        )
        assert half.uplift == pytest.approx(0.5 * full.uplift)

    def test_no_warnings_in_normal_case(self):
        system = assemble_loads(_dam_features(), MaterialProperties(), _load_case())
        assert system.warnings == []


class TestWaterLevels:
    def test_overtopping_clips_depth(self):
        system = assemble_loads(
            _dam_features(), MaterialProperties(), _load_case(upstream_water_level=45.0)
        )
        codes = [w.code for w in system.warnings]
        assert WarningCode.OVERTOPPING in codes
        assert system["upstream_water"].magnitude == pytest.approx(0.5 * 9.81 * 40.0**2)

    def test_reverse_head(self):
        system = assemble_loads(
            _dam_features(), MaterialProperties(),
            _load_case(upstream_water_level=2.0, downstream_water_level=5.0),
        )
        assert [w.code for w in system.warnings] == [WarningCode.REVERSE_HEAD]
        assert system.horizontal_water_force < 0

    def test_negative_level_treated_as_empty(self):
        system = assemble_loads(
            _dam_features(), MaterialProperties(), _load_case(upstream_water_level=-3.0)
        )
        assert system["upstream_water"].magnitude == 0.0

    def test_to_dict(self):
        data = assemble_loads(_dam_features(), MaterialProperties(), _load_case()).to_dict()
        assert len(data["forces"]) == 5
        assert data["toe"] == [30.0, 0.0]
