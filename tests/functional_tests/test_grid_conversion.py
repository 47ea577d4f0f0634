#!/usr/bin/env python3
"""
Functional Test: Grid Conversion

Verifies pixel -> PDF unit conversion:
1. to_grid_value(v, r) == v * 72 / r
2. The default resolution is 240 dpi
3. Integer input is computed in floating point
4. make_grid_rectangle converts each axis with its own resolution

Usage:
    python tests/functional_tests/test_grid_conversion.py
"""

import math
import sys
from pathlib import Path

# Add repo root to path for imports
repo_root = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(repo_root))

from engines.pdf import make_grid_rectangle, to_grid_value
from engines.pdf.constants import DEFAULT_RESOLUTION, GRID_PER_INCH
from utilities import Print


def test_formula():
    """to_grid_value follows value * 72 / resolution."""
    Print("HEADER", "Testing grid formula")

    for value, resolution in [(240, 240), (100, 300), (1.5, 96), (2480, 300), (0.001, 1200)]:
        expected = value * 72 / resolution
        result = to_grid_value(value, resolution)
        Print("DEBUG", f"{value} px @ {resolution} dpi -> {result}")
        assert math.isclose(result, expected, rel_tol=1e-9)

    assert to_grid_value(300, 300) == GRID_PER_INCH
    Print("SUCCESS", "Formula holds")


def test_default_resolution():
    """Without a resolution, 240 dpi is used."""
    Print("HEADER", "Testing default resolution")

    assert DEFAULT_RESOLUTION == 240
    for value in (0, 1, 240, 1000, 12.5):
        assert to_grid_value(value) == to_grid_value(value, 240)
    assert to_grid_value(240) == 72.0
    Print("SUCCESS", "Default resolution is 240 dpi")


def test_integer_input_is_float():
    """Integer pixels and resolutions still give a fractional result."""
    Print("HEADER", "Testing integer input")

    result = to_grid_value(1, 240)
    assert isinstance(result, float)
    assert math.isclose(result, 0.3)
    Print("SUCCESS", f"1 px @ 240 dpi -> {result}")


def test_grid_rectangle_default():
    """A 2400 x 1200 px image at 240 dpi is 720 x 360 points."""
    Print("HEADER", "Testing grid rectangle")

    rect = make_grid_rectangle(2400, 1200)
    assert (rect.llx, rect.lly) == (0, 0)
    assert math.isclose(rect.urx, 720.0)
    assert math.isclose(rect.ury, 360.0)
    assert math.isclose(rect.width, 720.0)
    assert math.isclose(rect.height, 360.0)
    Print("SUCCESS", f"Rectangle: {rect}")


def test_grid_rectangle_per_axis_resolution():
    """x and y resolutions apply to width and height respectively."""
    Print("HEADER", "Testing per-axis resolution")

    rect = make_grid_rectangle(600, 600, 300, 150)
    assert math.isclose(rect.width, 144.0)
    assert math.isclose(rect.height, 288.0)

    same = make_grid_rectangle(600, 600, 240, 240)
    assert math.isclose(same.width, make_grid_rectangle(600, 600).width)
    Print("SUCCESS", f"Rectangle: {rect}")


def main():
    """Run all grid conversion tests."""
    tests = [
        ("Formula", test_formula),
        ("Default Resolution", test_default_resolution),
        ("Integer Input", test_integer_input_is_float),
        ("Grid Rectangle", test_grid_rectangle_default),
        ("Per-Axis Resolution", test_grid_rectangle_per_axis_resolution),
    ]

    all_passed = True
    for name, test in tests:
        try:
            test()
            print(f"  ✓ {name}: PASSED")
        except AssertionError as e:
            print(f"  ✗ {name}: FAILED {e}")
            all_passed = False

    sys.exit(0 if all_passed else 1)


if __name__ == "__main__":
    main()
