"""Tests for timeprop.forces."""

import numpy as np
import pytest

from timeprop import (
    CompositeForce,
    ConstantForce,
    FunctionForce,
    InterpolatedForce,
    SinusoidalForce,
    SpringForce,
    perform_timeprop,
)


def test_constant_force():
    force = ConstantForce(2.5)
    assert force(0.0, 0.0) == 2.5
    assert force(-3.0, 10.0) == 2.5
    assert ConstantForce()(1.0, 1.0) == 0.0


def test_spring_force():
    force = SpringForce(k=4.0, x_eq=1.0)
    assert force(1.0, 0.0) == 0.0
    assert force(1.5, 7.0) == pytest.approx(-2.0)
    assert force.omega == pytest.approx(2.0)


def test_sinusoidal_force():
    force = SinusoidalForce(amplitude=2.0, omega=0.5, phase=0.0, offset=1.0)
    assert force(0.0, 0.0) == pytest.approx(1.0)
    assert force(5.0, np.pi) == pytest.approx(3.0)

    # Default is sin(t), independent of x
    default = SinusoidalForce()
    assert default(3.0, 1.2) == pytest.approx(np.sin(1.2))


def test_interpolated_force():
    force = InterpolatedForce([0.0, 1.0, 2.0], [0.0, 2.0, 0.0])
    assert force(0.0, 0.5) == pytest.approx(1.0)
    assert force(9.0, 1.5) == pytest.approx(1.0)
    # Extrapolates beyond the table by default
    assert force(0.0, 3.0) == pytest.approx(-2.0)
    assert repr(force) == "InterpolatedForce(kind='linear', n_points=3)"


def test_function_force():
    def cubic(x, t):
        return -(x**3)

    force = FunctionForce(cubic)
    assert force(2.0, 0.0) == -8.0
    assert repr(force) == "FunctionForce(func=cubic)"


def test_composite_force():
    force = CompositeForce([SpringForce(k=1.0), ConstantForce(0.5)])
    assert force(2.0, 0.0) == pytest.approx(-1.5)

    product = CompositeForce(
        [ConstantForce(2.0), ConstantForce(3.0)],
        operation=lambda vals: vals[0] * vals[1],
    )
    assert product(0.0, 0.0) == 6.0


def test_spring_equilibrium_is_stationary():
    """A particle at rest at the equilibrium position stays there."""
    x_final, a_final = perform_timeprop(
        SpringForce(k=3.0, x_eq=0.5), 1.0, 0.5, 0.0, 1e-3
    )
    assert x_final == 0.5
    assert a_final == 0.0


def test_reprs():
    assert repr(ConstantForce(1.0)) == "ConstantForce(value=1.0)"
    assert repr(SpringForce(k=1.0)) == "SpringForce(k=1.0, x_eq=0.0)"
    assert repr(SinusoidalForce()) == (
        "SinusoidalForce(amplitude=1.0, omega=1.0, phase=0.0, offset=0.0)"
    )
