"""Single-step integrator for second-order scalar systems.

The integrator advances the state (x, a) of the system

    a'(t) = F(x(t), t),  x'(t) = a(t)

by one fixed step of size h. The time-stepping loop that repeatedly calls
it lives in :mod:`timeprop.core`.
"""

from typing import Callable, Tuple


class SemiImplicitEuler:
    """Semi-implicit (symplectic) Euler integrator.

    The rate of change is updated first using the force evaluated at the
    start-of-step state, then the position is advanced with the *updated*
    rate:

        a_next = a + h * F(x, t)
        x_next = x + h * a_next

    Using ``a_next`` rather than ``a`` for the position update is what
    distinguishes this scheme from forward Euler and keeps the energy of
    oscillatory systems bounded.

    Parameters
    ----------
    force_func : callable
        Function F(x, t) -> float returning the acceleration contribution

    Examples
    --------
    >>> def spring(x, t):
    ...     return -x
    >>> step = SemiImplicitEuler(spring)
    >>> step(t=0.0, x=1.0, a=0.0, h=0.1)
    (0.99, -0.1)
    """

    def __init__(self, force_func: Callable[[float, float], float]):
        self.force = force_func

    def __call__(
        self, t: float, x: float, a: float, h: float
    ) -> Tuple[float, float]:
        """Advance (x, a) from t to t+h."""
        a = a + h * self.force(x, t)
        x = x + h * a
        return x, a

    def __repr__(self):
        force_name = getattr(self.force, "__name__", repr(self.force))
        return f"SemiImplicitEuler(force={force_name})"
