"""Group valued rows by (type, material) and serialize the summary table."""

from __future__ import annotations

import math
from typing import Iterable

from ._valuation import ValuedRow

HEADER = ("Typ", "Material", "Volumen_m3", "Flaeche_m2", "Total_CO2", "Total_Cost")
DELIMITER = ";"


def aggregate(rows: Iterable[ValuedRow], into: dict | None = None) -> dict[tuple[str, str], ValuedRow]:
    """Sum rows sharing (element_type, material); first occurrence fixes the order.

    Passing a previous result as ``into`` merges another batch of rows.
    """
    groups: dict[tuple[str, str], ValuedRow] = into if into is not None else {}
    for row in rows:
        key = (row.element_type, row.material)
        group = groups.get(key)
        if group is None:
            groups[key] = ValuedRow(**vars(row))
            continue
        group.volume += row.volume
        group.area += row.area
        group.total_co2 += row.total_co2
        group.total_cost += row.total_cost
    return groups


def format_number(value: float) -> str:
    """Shortest round-trip decimal, integral values without a fraction."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    exp = int(exponent)
    if -7 < exp < 0:
        sign = "-" if mantissa.startswith("-") else ""
        digits = mantissa.lstrip("-").replace(".", "")
        return f"{sign}0.{'0' * (-exp - 1)}{digits}"
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"


def format_table(groups: dict[tuple[str, str], ValuedRow]) -> str:
    lines = [DELIMITER.join(HEADER)]
    for g in groups.values():
        lines.append(DELIMITER.join([
            g.element_type,
            g.material,
            format_number(g.volume),
            format_number(g.area),
            format_number(g.total_co2),
            format_number(g.total_cost),
        ]))
    return "\n".join(lines)
