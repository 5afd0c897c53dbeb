"""
Unit Registry for the Storm Track Viewer.

This module provides the single `pint` registry used wherever a value
crosses a unit boundary: geodesic distances arrive in metres and are shown
in kilometres, storm winds are stored in knots, weather winds arrive in
km/h.

Example Usage
-------------
>>> from common.units import Q_
>>> Q_(111_319.5, 'm').to('km')
<Quantity(111.3195, 'kilometer')>
"""

from typing import Union

import pint
from pint import UnitRegistry as PintUnitRegistry

ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity


def convert(value: Union[float, pint.Quantity], from_unit: str, to_unit: str) -> float:
    """Convert a bare magnitude (or quantity) between units.

    Parameters
    ----------
    value : float or pint.Quantity
        Magnitude in ``from_unit``, or a quantity (``from_unit`` ignored).
    from_unit : str
        Unit of a bare magnitude (e.g. ``'m'``, ``'knot'``).
    to_unit : str
        Target unit.

    Returns
    -------
    float
        Magnitude in ``to_unit``.

    Raises
    ------
    ValueError
        If the units are dimensionally incompatible.
    """
    quantity = value if isinstance(value, pint.Quantity) else Q_(value, from_unit)
    try:
        return float(quantity.to(to_unit).magnitude)
    except pint.DimensionalityError as e:
        raise ValueError(
            f"Cannot convert {quantity.units} to {to_unit}"
        ) from e
