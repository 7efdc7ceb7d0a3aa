"""Tests for timeprop.scenarios."""

import numpy as np
import pytest

from timeprop import (
    REFERENCE_SCENARIOS,
    ConstantForce,
    Scenario,
    SimulationParameters,
    SpringForce,
    scenario_from_spec,
)
from timeprop.scenarios import (
    CLOSED_FORM_SOLUTIONS,
    harmonic_solution,
    uniform_acceleration_solution,
)


@pytest.mark.parametrize("name", sorted(REFERENCE_SCENARIOS))
def test_reference_scenarios_pass(name):
    result = REFERENCE_SCENARIOS[name].run()

    assert result.is_finite
    assert result.passed
    assert result.trace.n_steps == REFERENCE_SCENARIOS[name].params.n_steps


def test_reference_scenario_names():
    assert sorted(REFERENCE_SCENARIOS) == [
        "spring_motion",
        "time_dependent_force",
        "uniform_acceleration",
        "uniform_motion",
    ]


def test_uniform_motion_expected_values():
    result = REFERENCE_SCENARIOS["uniform_motion"].run()

    assert result.expected == (1.0, 1.0)
    assert result.a_final == 1.0


def test_time_dependent_force_has_no_closed_form():
    result = REFERENCE_SCENARIOS["time_dependent_force"].run()

    assert result.expected is None
    assert result.passed


def test_harmonic_solution_with_initial_rate():
    force = SpringForce(k=4.0, x_eq=1.0)
    params = SimulationParameters(tmax=np.pi / 4, x0=1.0, a0=2.0, h=0.1)

    x, a = harmonic_solution(force, params)

    # x(t) = x_eq + (a0/omega) sin(omega t), quarter period at t = pi/4
    assert x == pytest.approx(2.0)
    assert a == pytest.approx(0.0, abs=1e-12)


def test_uniform_acceleration_solution():
    params = SimulationParameters(tmax=2.0, x0=1.0, a0=0.5, h=0.1)

    x, a = uniform_acceleration_solution(ConstantForce(3.0), params)

    assert x == pytest.approx(1.0 + 1.0 + 6.0)
    assert a == pytest.approx(6.5)


def test_failed_comparison():
    scenario = Scenario(
        name="coarse_spring",
        title="Coarse Spring",
        force=SpringForce(k=1.0),
        params=SimulationParameters(tmax=2 * np.pi, x0=1.0, a0=0.0, h=0.5),
        solution=harmonic_solution,
        atol=1e-6,
    )

    result = scenario.run()

    assert result.is_finite
    assert not result.passed


def test_non_finite_result_fails():
    scenario = Scenario(
        name="blow_up",
        title="Blow Up",
        force=lambda x, t: float("inf"),
        params=SimulationParameters(tmax=1.0, x0=0.0, a0=0.0, h=0.5),
    )

    result = scenario.run()

    assert not result.is_finite
    assert not result.passed


def test_report():
    result = REFERENCE_SCENARIOS["spring_motion"].run()

    lines = result.report()

    assert lines[0] == "Test: Spring Motion"
    assert lines[1] == "  Force: F(x, t) = -k*x with k = 1.0"
    assert lines[2].startswith("  Initial conditions: x0 = 1.0, a0 = 0.0")
    assert lines[3].startswith("  -> Computed: x = ")
    assert lines[4].startswith("  -> Expected: x = ")
    assert "passed: True" in lines[-1]


def test_report_without_closed_form():
    lines = REFERENCE_SCENARIOS["time_dependent_force"].run().report()

    assert "No closed-form solution" in lines[4]


def test_force_desc_defaults_to_repr():
    scenario = Scenario(
        name="s",
        title="S",
        force=ConstantForce(2.0),
        params=SimulationParameters(tmax=1.0, x0=0.0, a0=0.0, h=0.5),
    )
    assert scenario.force_desc == "ConstantForce(value=2.0)"


def test_scenario_from_spec():
    spec = {
        "title": "Spring Motion",
        "force": {"SpringForce": {"k": 1.0}},
        "simulation": {
            "tmax": 2 * np.pi,
            "x0": {"value": 100.0, "units": "cm"},
            "a0": 0.0,
            "h": {"value": 0.1, "units": "ms"},
        },
        "expected": {"solution": "harmonic", "atol": 1e-2},
        "legend_loc": "lower left",
    }

    scenario = scenario_from_spec("spring", spec)

    assert scenario.name == "spring"
    assert scenario.title == "Spring Motion"
    assert scenario.params.x0 == pytest.approx(1.0)
    assert scenario.params.h == pytest.approx(1e-4)
    assert scenario.solution is CLOSED_FORM_SOLUTIONS["harmonic"]
    assert scenario.atol == 1e-2
    assert scenario.rtol == 0.0
    assert scenario.legend_loc == "lower left"
    assert scenario.run().passed


def test_scenario_from_spec_errors():
    with pytest.raises(KeyError, match="force"):
        scenario_from_spec("s", {"simulation": {}})

    spec = {
        "force": {"ConstantForce": {"value": 0.0}},
        "simulation": {"tmax": 1.0, "x0": 0.0, "a0": 0.0, "h": 0.1},
        "expected": {"solution": "chaotic"},
    }
    with pytest.raises(ValueError, match="Unknown closed-form solution"):
        scenario_from_spec("s", spec)
