"""Core time-propagation routine and protocols.

This module provides the fixed-step propagation loop for the scalar
second-order system

    a'(t) = F(x(t), t),  x'(t) = a(t)

starting from (x0, a0) at t = 0 and stepping with size h until t reaches
tmax. The same loop serves both presentations: final state only, and
final state plus a trace of the pre-step states.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from timeprop.integrators import SemiImplicitEuler
from timeprop.trace import TraceRecorder


class InvalidParameter(ValueError):
    """Raised when simulation parameters fail their preconditions."""


class ForceFunction(Protocol):
    """Protocol for force functions.

    A force function returns the instantaneous acceleration contribution
    at position x and time t. It must be free of side effects.
    """

    def __call__(self, x: float, t: float) -> float:
        """Evaluate F(x, t).

        Parameters
        ----------
        x : float
            Position at the start of the step
        t : float
            Time at the start of the step

        Returns
        -------
        float
            Acceleration contribution
        """
        ...


class StepObserver(Protocol):
    """Protocol for step observers.

    Observers are called once per iteration with the state as it stands
    before the step is applied.
    """

    def __call__(self, t: float, x: float, a: float) -> None:
        ...


def check_parameters(tmax: float, h: float) -> None:
    """Validate the horizon and step size.

    Raises
    ------
    InvalidParameter
        If tmax or h is not strictly positive (NaN included).
    """
    if not tmax > 0.0:
        raise InvalidParameter("tmax must be positive")
    if not h > 0.0:
        raise InvalidParameter("h must be positive")


def propagate(
    force_func: ForceFunction,
    tmax: float,
    x0: float,
    a0: float,
    h: float,
    record: bool = False,
    observer: Optional[StepObserver] = None,
):
    """Propagate (x, a) from t = 0 to tmax with semi-implicit Euler steps.

    Parameters
    ----------
    force_func : callable
        Force function F(x, t) -> float
    tmax : float
        Simulation horizon, must be positive
    x0 : float
        Initial position
    a0 : float
        Initial rate of change of position
    h : float
        Fixed step size, must be positive
    record : bool, default=False
        If True, also return the trace of pre-step states
    observer : callable, optional
        Called as observer(t, x, a) before every step

    Returns
    -------
    x_final, a_final : float
        State after the last completed step, i.e. at the first t >= tmax
    trace : Trace
        Only returned if record is True. Holds the (t, x, a) values
        before each step; the final state is not included.

    Raises
    ------
    InvalidParameter
        If tmax <= 0 or h <= 0. Nothing is evaluated in that case.

    Notes
    -----
    The force is evaluated exactly once per step with the start-of-step
    (x, t). Time is accumulated as t = t + h, so the number of steps and
    the recorded times follow the binary representation of h. Non-finite
    force values are propagated without any check.

    Examples
    --------
    >>> x, a = propagate(lambda x, t: 0.0, tmax=1.0, x0=0.0, a0=1.0, h=1e-3)
    >>> a
    1.0
    >>> x, a, trace = propagate(
    ...     lambda x, t: -x, tmax=1.0, x0=1.0, a0=0.0, h=0.25, record=True
    ... )
    >>> trace.n_steps
    4
    """
    check_parameters(tmax, h)

    step = SemiImplicitEuler(force_func)
    recorder = TraceRecorder() if record else None

    x, a, t = x0, a0, 0.0
    while t < tmax:
        if recorder is not None:
            recorder(t, x, a)
        if observer is not None:
            observer(t, x, a)
        x, a = step(t, x, a, h)
        t = t + h

    if recorder is not None:
        return x, a, recorder.to_trace()
    return x, a


def perform_timeprop(
    force_func: ForceFunction, tmax: float, x0: float, a0: float, h: float
):
    """Return the final (x, a) of a propagation without recording."""
    return propagate(force_func, tmax, x0, a0, h)


def perform_timeprop_with_trace(
    force_func: ForceFunction, tmax: float, x0: float, a0: float, h: float
):
    """Propagate and return the final state with the recorded sequences.

    Returns
    -------
    x_final, a_final : float
    ts, xs, as_ : ndarray
        Pre-step time, position and rate values, one entry per step
    """
    x, a, trace = propagate(force_func, tmax, x0, a0, h, record=True)
    return x, a, trace.ts, trace.xs, trace.as_


@dataclass(frozen=True)
class SimulationParameters:
    """Parameters of a single propagation.

    Parameters
    ----------
    tmax : float
        Simulation horizon (> 0)
    x0 : float
        Initial position
    a0 : float
        Initial rate of change of position
    h : float
        Step size (> 0)

    Examples
    --------
    >>> params = SimulationParameters(tmax=1.0, x0=0.0, a0=1.0, h=1e-3)
    >>> x, a = params.propagate(lambda x, t: 0.0)
    """

    tmax: float
    x0: float
    a0: float
    h: float

    def __post_init__(self):
        """Validate parameters."""
        check_parameters(self.tmax, self.h)

    @property
    def n_steps(self) -> int:
        """Number of steps the propagation loop will take."""
        n, t = 0, 0.0
        while t < self.tmax:
            t = t + self.h
            n += 1
        return n

    def propagate(
        self,
        force_func: ForceFunction,
        record: bool = False,
        observer: Optional[StepObserver] = None,
    ):
        """Run :func:`propagate` with these parameters."""
        return propagate(
            force_func,
            self.tmax,
            self.x0,
            self.a0,
            self.h,
            record=record,
            observer=observer,
        )
