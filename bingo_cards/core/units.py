from __future__ import annotations

from reportlab.lib.units import mm


def points_to_millimetres(pt: float) -> float:
    return pt / mm


def millimetres_to_points(value: float) -> float:
    return value * mm


def percent_of(p: float, x: float) -> float:
    return (p / 100) * x
