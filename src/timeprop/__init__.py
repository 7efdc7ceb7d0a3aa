"""Fixed-step time propagation of second-order scalar systems.

This package integrates

    a'(t) = F(x(t), t),  x'(t) = a(t)

from (x0, a0) at t = 0 to a horizon tmax with the semi-implicit
(symplectic) Euler method and a fixed step h.

Main Components
---------------
propagate : Propagation loop, final state only or with a trace
SimulationParameters : Validated (tmax, x0, a0, h)
SemiImplicitEuler : Single integration step
TraceRecorder, Trace : Pre-step state recording, export and plotting

Forces
------
ConstantForce : Constant value
SpringForce : Linear restoring force -k*(x - x_eq)
SinusoidalForce : amplitude*sin(omega*t + phase) + offset
InterpolatedForce : Tabulated force interpolated in time
FunctionForce : Custom function of (x, t)
CompositeForce : Combination of forces

Examples
--------
>>> from timeprop import propagate, SpringForce
>>> x, a, trace = propagate(
...     SpringForce(k=1.0), tmax=2 * np.pi, x0=1.0, a0=0.0, h=1e-4,
...     record=True,
... )
>>> fig, ax = trace.plot(title="Spring Motion")
"""

# Core propagation
from timeprop.core import (
    ForceFunction,
    InvalidParameter,
    SimulationParameters,
    StepObserver,
    check_parameters,
    perform_timeprop,
    perform_timeprop_with_trace,
    propagate,
)

# Integrators
from timeprop.integrators import SemiImplicitEuler

# Trace recording
from timeprop.trace import Trace, TraceRecorder

# Forces
from timeprop.forces import (
    CompositeForce,
    ConstantForce,
    FunctionForce,
    InterpolatedForce,
    SinusoidalForce,
    SpringForce,
)

# Configuration setup utilities
from timeprop.setup import (
    parse_force_spec,
    read_param_values,
    read_param_values_pint,
    read_simulation_parameters,
)

# Scenarios
from timeprop.scenarios import (
    REFERENCE_SCENARIOS,
    Scenario,
    ScenarioResult,
    scenario_from_spec,
)

__all__ = [
    # Core
    "propagate",
    "perform_timeprop",
    "perform_timeprop_with_trace",
    "check_parameters",
    "SimulationParameters",
    "InvalidParameter",
    "ForceFunction",
    "StepObserver",
    # Integrators
    "SemiImplicitEuler",
    # Trace
    "Trace",
    "TraceRecorder",
    # Forces
    "ConstantForce",
    "SpringForce",
    "SinusoidalForce",
    "FunctionForce",
    "InterpolatedForce",
    "CompositeForce",
    # Setup utilities
    "read_param_values",
    "read_param_values_pint",
    "read_simulation_parameters",
    "parse_force_spec",
    # Scenarios
    "Scenario",
    "ScenarioResult",
    "REFERENCE_SCENARIOS",
    "scenario_from_spec",
]
