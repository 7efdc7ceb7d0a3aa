"""Force functions for driving the propagation.

Each force is a callable F(x, t) returning the acceleration contribution
at position x and time t. They are evaluated once per step with the
start-of-step state.

Notes
-----
Any plain function of (x, t) works as well; these classes add a readable
``repr`` and can be built from YAML specs (see :mod:`timeprop.setup`).
"""

from typing import Callable, Sequence, Union

import numpy as np


class ConstantForce:
    """Constant force, independent of position and time.

    Parameters
    ----------
    value : float
        Force value. 0.0 gives uniform motion.

    Examples
    --------
    >>> F = ConstantForce(1.0)
    >>> F(0.0, 0.0)
    1.0
    >>> F(5.0, 3.0)
    1.0
    """

    def __init__(self, value: float = 0.0):
        self.value = value

    def __call__(self, x: float, t: float) -> float:
        return self.value

    def __repr__(self):
        return f"ConstantForce(value={self.value})"


class SpringForce:
    """Linear restoring force of a harmonic oscillator.

    F(x, t) = -k * (x - x_eq)

    Parameters
    ----------
    k : float
        Spring constant per unit mass. The angular frequency is sqrt(k).
    x_eq : float, optional
        Equilibrium position, by default 0.0

    Examples
    --------
    >>> F = SpringForce(k=4.0)
    >>> F(0.5, 0.0)
    -2.0
    >>> F.omega
    2.0
    """

    def __init__(self, k: float, x_eq: float = 0.0):
        self.k = k
        self.x_eq = x_eq

    @property
    def omega(self) -> float:
        """Angular frequency sqrt(k)."""
        return float(np.sqrt(self.k))

    def __call__(self, x: float, t: float) -> float:
        return -self.k * (x - self.x_eq)

    def __repr__(self):
        return f"SpringForce(k={self.k}, x_eq={self.x_eq})"


class SinusoidalForce:
    """Time-dependent sinusoidal forcing.

    F(x, t) = amplitude * sin(omega*t + phase) + offset

    Parameters
    ----------
    amplitude : float, optional
        Amplitude of the sine wave, by default 1.0
    omega : float, optional
        Angular frequency in rad per unit time, by default 1.0
    phase : float, optional
        Phase offset in radians, by default 0.0
    offset : float, optional
        Constant offset, by default 0.0

    Examples
    --------
    >>> F = SinusoidalForce()
    >>> F(0.0, 0.0)
    0.0
    >>> abs(F(0.0, np.pi / 2) - 1.0) < 1e-12
    True
    """

    def __init__(
        self,
        amplitude: float = 1.0,
        omega: float = 1.0,
        phase: float = 0.0,
        offset: float = 0.0,
    ):
        self.amplitude = amplitude
        self.omega = omega
        self.phase = phase
        self.offset = offset

    def __call__(self, x: float, t: float) -> float:
        return (
            self.amplitude * float(np.sin(self.omega * t + self.phase))
            + self.offset
        )

    def __repr__(self):
        return (
            f"SinusoidalForce(amplitude={self.amplitude}, "
            f"omega={self.omega}, phase={self.phase}, offset={self.offset})"
        )


class InterpolatedForce:
    """Time-dependent force interpolated from tabulated data.

    Parameters
    ----------
    times : array-like
        Time points of the table
    values : array-like
        Force values at each time point
    kind : str, optional
        Interpolation kind ('linear', 'cubic', etc.), by default 'linear'
    fill_value : str or float, optional
        How to handle extrapolation, by default 'extrapolate'

    Examples
    --------
    >>> F = InterpolatedForce([0.0, 1.0, 2.0], [0.0, 2.0, 0.0])
    >>> F(0.0, 0.5)
    1.0
    """

    def __init__(
        self,
        times: Sequence[float],
        values: Sequence[float],
        kind: str = "linear",
        fill_value: Union[str, float] = "extrapolate",
    ):
        from scipy.interpolate import interp1d

        self.times = np.asarray(times, dtype=float)
        self.values = np.asarray(values, dtype=float)
        self.kind = kind

        self.interp = interp1d(
            self.times, self.values, kind=kind, fill_value=fill_value
        )

    def __call__(self, x: float, t: float) -> float:
        return float(self.interp(t))

    def __repr__(self):
        return (
            f"InterpolatedForce(kind='{self.kind}', "
            f"n_points={len(self.times)})"
        )


class FunctionForce:
    """Wraps any callable func(x, t) as a force.

    Examples
    --------
    >>> F = FunctionForce(lambda x, t: -x**3)
    >>> F(2.0, 0.0)
    -8.0
    """

    def __init__(self, func: Callable[[float, float], float]):
        self.func = func

    def __call__(self, x: float, t: float) -> float:
        return self.func(x, t)

    def __repr__(self):
        func_name = getattr(self.func, "__name__", repr(self.func))
        return f"FunctionForce(func={func_name})"


class CompositeForce:
    """Combination of several forces.

    Parameters
    ----------
    forces : sequence of callables
        Forces to combine, each evaluated at the same (x, t)
    operation : callable, optional
        Combines the list of force values into one. Default is sum.

    Examples
    --------
    >>> # Driven oscillator
    >>> F = CompositeForce([SpringForce(k=1.0), SinusoidalForce(amplitude=0.5)])
    >>> F(1.0, 0.0)
    -1.0
    """

    def __init__(
        self,
        forces: Sequence[Callable[[float, float], float]],
        operation: Callable[[list], float] = None,
    ):
        self.forces = list(forces)
        self.operation = operation or sum

    def __call__(self, x: float, t: float) -> float:
        return self.operation([force(x, t) for force in self.forces])

    def __repr__(self):
        return f"CompositeForce(forces={self.forces})"
