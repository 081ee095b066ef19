"""
Weight unit conversion. The store keeps every weight in lbs.
"""
from typing import Optional

LBS_PER_KG = 2.20462


def convert_weight(value: Optional[float], from_unit: str, to_unit: str) -> Optional[float]:
    """Convert a weight between 'lbs' and 'kg'. None passes through."""
    if value is None:
        return None
    value = float(value)
    if from_unit == to_unit:
        return value
    if from_unit == "lbs" and to_unit == "kg":
        return value / LBS_PER_KG
    if from_unit == "kg" and to_unit == "lbs":
        return value * LBS_PER_KG
    raise ValueError(f"Unsupported weight unit conversion: {from_unit} -> {to_unit}")
