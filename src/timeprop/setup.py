"""Setup utilities for propagation configurations.

Parameters are given as nested dictionaries (typically loaded from YAML)
whose leaves are either plain numbers or dicts with a 'value' and
optional 'units', e.g.

    simulation:
      tmax: {value: 6.283185307179586, units: s}
      x0: {value: 1.0, units: m}
      a0: 0.0
      h: {value: 0.1, units: ms}
"""

import pint

from timeprop.core import SimulationParameters
from timeprop.forces import (
    CompositeForce,
    ConstantForce,
    InterpolatedForce,
    SinusoidalForce,
    SpringForce,
)

# Registry of force classes available to YAML specs
FORCE_CLASSES = {
    "ConstantForce": ConstantForce,
    "InterpolatedForce": InterpolatedForce,
    "SpringForce": SpringForce,
    "SinusoidalForce": SinusoidalForce,
    "CompositeForce": CompositeForce,
}

# Units each simulation parameter is converted to when units are given
PARAMETER_UNITS = {
    "tmax": "second",
    "x0": "meter",
    "a0": "meter / second",
    "h": "second",
}


def read_param_values(params_dict, parent_key="", sep="_"):
    """
    Flatten a nested parameter dictionary by concatenating keys.

    Parameters
    ----------
    params_dict : dict
        Nested dictionary of parameters. Leaf nodes are either plain values
        or dicts with a 'value' key and optional 'units' (as a string).
    parent_key : str, optional
        Prefix for keys (used in recursion), by default ''
    sep : str, optional
        Separator between nested keys, by default '_'

    Returns
    -------
    dict
        Flat dictionary of {key: {'value': ..., 'units': ..., ...}}. Extra
        fields of a leaf (e.g. 'desc') are kept. Plain values get
        units=None.

    Examples
    --------
    >>> read_param_values({'spring': {'k': {'value': 4.0, 'units': '1/s**2'}}})
    {'spring_k': {'value': 4.0, 'units': '1/s**2'}}
    >>> read_param_values({'x0': 1.0})
    {'x0': {'value': 1.0, 'units': None}}
    """
    flat = {}

    for key, value in params_dict.items():
        new_key = f"{parent_key}{sep}{key}" if parent_key else key

        if isinstance(value, dict) and "value" in value:
            flat[new_key] = dict(value)
        elif isinstance(value, dict):
            flat.update(read_param_values(value, parent_key=new_key, sep=sep))
        else:
            flat[new_key] = {"value": value, "units": None}

    return flat


def read_param_values_pint(params_dict, ureg=None, parent_key="", sep="_"):
    """
    Flatten a nested parameter dictionary and convert units to pint.

    Same as :func:`read_param_values` except that each 'units' string is
    replaced by a pint Unit from ``ureg`` (a new UnitRegistry if None).
    Leaves without units keep units=None.

    Examples
    --------
    >>> ureg = pint.UnitRegistry()
    >>> read_param_values_pint({'h': {'value': 0.1, 'units': 'ms'}}, ureg)
    {'h': {'value': 0.1, 'units': <Unit('millisecond')>}}
    """
    if ureg is None:
        ureg = pint.UnitRegistry()
    params_flat = read_param_values(
        params_dict, parent_key=parent_key, sep=sep
    )

    for value in params_flat.values():
        units = value.get("units")
        value["units"] = ureg(units).units if units is not None else None

    return params_flat


def read_simulation_parameters(params_dict, ureg=None):
    """
    Build SimulationParameters from a parameter dictionary.

    Values given with units are converted with pint to the units in
    PARAMETER_UNITS (seconds, metres, metres per second). Values without
    units are used as they are.

    Parameters
    ----------
    params_dict : dict
        Dictionary with keys 'tmax', 'x0', 'a0' and 'h'
    ureg : pint.UnitRegistry, optional
        Unit registry. A new registry is created if None.

    Returns
    -------
    SimulationParameters

    Raises
    ------
    KeyError
        If a required parameter is missing
    pint.DimensionalityError
        If a value's units are incompatible with the parameter
    InvalidParameter
        If tmax or h is not positive

    Examples
    --------
    >>> params = read_simulation_parameters({
    ...     'tmax': {'value': 2.0, 'units': 's'},
    ...     'x0': {'value': 10.0, 'units': 'cm'},
    ...     'a0': 0.0,
    ...     'h': {'value': 1.0, 'units': 'ms'},
    ... })
    >>> params.x0, params.h
    (0.1, 0.001)
    """
    if ureg is None:
        ureg = pint.UnitRegistry()
    params_flat = read_param_values_pint(params_dict, ureg=ureg)

    values = {}
    for name, target_units in PARAMETER_UNITS.items():
        if name not in params_flat:
            raise KeyError(f"Missing simulation parameter: {name}")
        param = params_flat[name]
        if param["units"] is None:
            values[name] = float(param["value"])
        else:
            quantity = ureg.Quantity(param["value"], param["units"])
            values[name] = float(quantity.to(target_units).magnitude)

    return SimulationParameters(**values)


def parse_force_spec(force_spec):
    """
    Parse a force specification and return a force object.

    Parameters
    ----------
    force_spec : dict
        Single-key dict mapping a class name in FORCE_CLASSES to its
        keyword arguments, e.g. {'SpringForce': {'k': 1.0}}.
        CompositeForce takes a list of nested specs under 'forces'.

    Returns
    -------
    callable
        Force function F(x, t)

    Examples
    --------
    >>> parse_force_spec({'SpringForce': {'k': 1.0}})
    SpringForce(k=1.0, x_eq=0.0)
    >>> parse_force_spec({'CompositeForce': {'forces': [
    ...     {'SpringForce': {'k': 1.0}}, {'ConstantForce': {'value': 0.5}}
    ... ]}})
    CompositeForce(forces=[SpringForce(k=1.0, x_eq=0.0), ConstantForce(value=0.5)])
    """
    if not isinstance(force_spec, dict) or len(force_spec) != 1:
        raise ValueError(
            f"Force spec must be a single-key dict, got: {force_spec!r}"
        )

    class_name, params = next(iter(force_spec.items()))
    if class_name not in FORCE_CLASSES:
        raise ValueError(f"Unknown force class: {class_name}")
    params = dict(params or {})

    if class_name == "CompositeForce":
        forces = [parse_force_spec(spec) for spec in params.pop("forces", [])]
        return CompositeForce(forces, **params)

    return FORCE_CLASSES[class_name](**params)
