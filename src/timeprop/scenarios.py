"""Reference scenarios with closed-form expectations.

A Scenario bundles a force function, simulation parameters and, where one
exists, the analytical solution to compare against. The four reference
scenarios cover uniform motion, uniform acceleration, a harmonic
oscillator and a time-dependent force.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from timeprop.core import SimulationParameters
from timeprop.forces import ConstantForce, SinusoidalForce, SpringForce
from timeprop.setup import parse_force_spec, read_simulation_parameters
from timeprop.trace import Trace

ClosedForm = Callable[[Callable, SimulationParameters], Tuple[float, float]]


def uniform_motion_solution(force, params):
    """x = x0 + a0*t, a = a0 (force assumed zero)."""
    return params.x0 + params.a0 * params.tmax, params.a0


def uniform_acceleration_solution(force, params):
    """Constant force c = F(x0, 0): x = x0 + a0*t + c*t**2/2, a = a0 + c*t."""
    c = force(params.x0, 0.0)
    tmax = params.tmax
    return (
        params.x0 + params.a0 * tmax + 0.5 * c * tmax**2,
        params.a0 + c * tmax,
    )


def harmonic_solution(force, params):
    """Undamped oscillator F = -k*(x - x_eq), with omega = sqrt(k)."""
    omega = np.sqrt(force.k)
    dx0 = params.x0 - force.x_eq
    wt = omega * params.tmax
    x = force.x_eq + dx0 * np.cos(wt) + params.a0 / omega * np.sin(wt)
    a = -dx0 * omega * np.sin(wt) + params.a0 * np.cos(wt)
    return float(x), float(a)


CLOSED_FORM_SOLUTIONS: Dict[str, ClosedForm] = {
    "uniform_motion": uniform_motion_solution,
    "uniform_acceleration": uniform_acceleration_solution,
    "harmonic": harmonic_solution,
}


@dataclass
class ScenarioResult:
    """Outcome of running a Scenario.

    Parameters
    ----------
    scenario : Scenario
        Scenario that was run
    x_final, a_final : float
        Final state returned by the propagation
    trace : Trace
        Recorded pre-step states
    expected : (float, float), optional
        Analytical (x, a) at tmax, None if the scenario has no closed form
    """

    scenario: "Scenario"
    x_final: float
    a_final: float
    trace: Trace
    expected: Optional[Tuple[float, float]] = None

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x_final) and math.isfinite(self.a_final)

    @property
    def passed(self) -> bool:
        """True if the final state is finite and matches the expectation.

        Comparison uses |computed - expected| <= max(rtol * max(|computed|,
        |expected|), atol) for both x and a.
        """
        if not self.is_finite:
            return False
        if self.expected is None:
            return True
        x_exp, a_exp = self.expected
        tol = dict(rel_tol=self.scenario.rtol, abs_tol=self.scenario.atol)
        return math.isclose(self.x_final, x_exp, **tol) and math.isclose(
            self.a_final, a_exp, **tol
        )

    def report(self) -> List[str]:
        """Lines describing the run, for console output."""
        scenario = self.scenario
        params = scenario.params
        lines = [
            f"Test: {scenario.title}",
            f"  Force: F(x, t) = {scenario.force_desc}",
            f"  Initial conditions: x0 = {params.x0}, a0 = {params.a0}, "
            f"tmax = {params.tmax}, h = {params.h}",
            f"  -> Computed: x = {self.x_final}, a = {self.a_final}",
        ]
        if self.expected is not None:
            x_exp, a_exp = self.expected
            lines.append(f"  -> Expected: x = {x_exp}, a = {a_exp}")
        else:
            lines.append("  No closed-form solution, comparison skipped")
        lines.append(f"  Steps: {self.trace.n_steps}, passed: {self.passed}")
        return lines


@dataclass
class Scenario:
    """A single propagation case.

    Parameters
    ----------
    name : str
        Identifier, also used for output file names
    title : str
        Human-readable title used in reports and plots
    force : callable
        Force function F(x, t)
    params : SimulationParameters
        Horizon, initial state and step size
    force_desc : str, optional
        Formula shown in reports. Defaults to repr(force).
    solution : callable, optional
        Closed form solution(force, params) -> (x, a) at tmax
    rtol, atol : float, optional
        Tolerances for comparing against the closed form
    legend_loc : str, optional
        Legend location for plots
    """

    name: str
    title: str
    force: Callable
    params: SimulationParameters
    force_desc: Optional[str] = None
    solution: Optional[ClosedForm] = None
    rtol: float = 0.0
    atol: float = 0.0
    legend_loc: str = "best"

    def __post_init__(self):
        if self.force_desc is None:
            self.force_desc = repr(self.force)

    def expected(self) -> Optional[Tuple[float, float]]:
        if self.solution is None:
            return None
        return self.solution(self.force, self.params)

    def run(self) -> ScenarioResult:
        """Propagate with trace recording and compare to the closed form."""
        x_final, a_final, trace = self.params.propagate(self.force, record=True)
        return ScenarioResult(
            scenario=self,
            x_final=x_final,
            a_final=a_final,
            trace=trace,
            expected=self.expected(),
        )


def scenario_from_spec(name: str, spec: dict, ureg=None) -> Scenario:
    """
    Build a Scenario from a YAML specification.

    Parameters
    ----------
    name : str
        Scenario name (usually the YAML file stem)
    spec : dict
        Specification with sections 'simulation' (parameters, see
        :func:`timeprop.setup.read_simulation_parameters`), 'force' (see
        :func:`timeprop.setup.parse_force_spec`) and optionally 'title',
        'force_desc', 'legend_loc' and 'expected'. 'expected' has a
        'solution' key naming an entry of CLOSED_FORM_SOLUTIONS plus
        optional 'rtol' and 'atol'.

    Returns
    -------
    Scenario
    """
    for section in ["simulation", "force"]:
        if section not in spec:
            raise KeyError(f"Missing required section: {section}")

    params = read_simulation_parameters(spec["simulation"], ureg=ureg)
    force = parse_force_spec(spec["force"])

    solution = None
    rtol, atol = 0.0, 0.0
    expected_spec = spec.get("expected")
    if expected_spec:
        solution_name = expected_spec["solution"]
        if solution_name not in CLOSED_FORM_SOLUTIONS:
            raise ValueError(f"Unknown closed-form solution: {solution_name}")
        solution = CLOSED_FORM_SOLUTIONS[solution_name]
        rtol = float(expected_spec.get("rtol", 0.0))
        atol = float(expected_spec.get("atol", 0.0))

    return Scenario(
        name=name,
        title=spec.get("title", name),
        force=force,
        params=params,
        force_desc=spec.get("force_desc"),
        solution=solution,
        rtol=rtol,
        atol=atol,
        legend_loc=spec.get("legend_loc", "best"),
    )


REFERENCE_SCENARIOS: Dict[str, Scenario] = {
    scenario.name: scenario
    for scenario in [
        Scenario(
            name="uniform_motion",
            title="Uniform Motion",
            force=ConstantForce(0.0),
            force_desc="0.0",
            params=SimulationParameters(tmax=1.0, x0=0.0, a0=1.0, h=1e-3),
            solution=uniform_motion_solution,
            rtol=1e-10,
            legend_loc="lower right",
        ),
        Scenario(
            name="uniform_acceleration",
            title="Uniform Acceleration",
            force=ConstantForce(1.0),
            force_desc="1.0",
            params=SimulationParameters(tmax=1.0, x0=0.0, a0=0.0, h=1e-4),
            solution=uniform_acceleration_solution,
            rtol=1e-3,
            legend_loc="lower right",
        ),
        Scenario(
            name="spring_motion",
            title="Spring Motion",
            force=SpringForce(k=1.0),
            force_desc="-k*x with k = 1.0",
            params=SimulationParameters(tmax=2 * np.pi, x0=1.0, a0=0.0, h=1e-4),
            solution=harmonic_solution,
            atol=1e-2,
            legend_loc="lower left",
        ),
        Scenario(
            name="time_dependent_force",
            title="Time-dependent Force",
            force=SinusoidalForce(),
            force_desc="sin(t)",
            params=SimulationParameters(tmax=2 * np.pi, x0=0.0, a0=0.0, h=1e-3),
            legend_loc="lower left",
        ),
    ]
}
