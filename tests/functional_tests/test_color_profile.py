#!/usr/bin/env python3
"""
Functional Test: sRGB Output Intent

This test verifies:
1. The bundled sRGB profile loads, is non-empty and is the same bytes object on every read
   (an ICC version 2 profile; a missing or unusable profile is a RuntimeError)
2. The profile bytes are a valid ICC profile (Pillow can open them)
3. add_color_profile_srgb appends one output intent per call with the fixed descriptor
4. Existing output intents are left untouched

Usage:
    python tests/functional_tests/test_color_profile.py
"""

import io
import sys
from pathlib import Path

# Add repo root to path for imports
repo_root = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(repo_root))

import pikepdf
import pytest
from pikepdf import Name
from PIL import ImageCms

from engines.pdf import add_color_profile_srgb
from engines.pdf import color_profile
from engines.pdf.color_profile import color_profile_bytes, open_color_profile
from engines.pdf.constants import COLOR_REGISTRY, SRGB_PROFILE
from utilities import Print


def check_srgb_intent(intent: pikepdf.Dictionary) -> None:
    assert intent.Type == Name.OutputIntent
    assert intent.S == Name.GTS_PDFA1
    assert str(intent.Info) == SRGB_PROFILE
    assert str(intent.OutputCondition) == SRGB_PROFILE
    assert str(intent.OutputConditionIdentifier) == SRGB_PROFILE
    assert str(intent.RegistryName) == COLOR_REGISTRY

    profile = intent.DestOutputProfile
    assert profile.N == 3
    assert profile.Alternate == Name.DeviceRGB
    assert profile.read_bytes() == color_profile_bytes()


def test_profile_loaded_once():
    """Profile bytes are non-empty and constant across reads."""
    Print("HEADER", "Testing color profile bytes")

    first = color_profile_bytes()
    second = color_profile_bytes()
    assert isinstance(first, bytes)
    assert len(first) > 0
    assert first is second

    with open_color_profile() as stream:
        assert stream.read() == first

    Print("SUCCESS", f"Profile: {len(first):,} bytes")


def test_profile_is_valid_icc():
    """The bytes deserialize as an RGB ICC profile."""
    Print("HEADER", "Testing ICC validity")

    profile = ImageCms.ImageCmsProfile(io.BytesIO(color_profile_bytes()))
    assert profile.profile.color_space.strip() == "RGB"
    Print("SUCCESS", f"Profile description: {profile.profile.profile_description}")


def test_profile_is_icc_version_2():
    """The bundled profile is ICC v2, the only version PDF/A-1 accepts."""
    Print("HEADER", "Testing ICC version")

    profile_bytes = color_profile_bytes()
    assert profile_bytes[36:40] == b'acsp'
    assert profile_bytes[8] == 2
    assert profile_bytes[16:20] == b'RGB '
    Print("SUCCESS", f"ICC version {profile_bytes[8]}.{profile_bytes[9] >> 4}")


def test_profile_load_failures_are_fatal():
    """A missing, empty, broken or v4 profile stops the import with RuntimeError."""
    Print("HEADER", "Testing profile load failures")

    with pytest.raises(RuntimeError) as excinfo:
        color_profile._load_color_profile("missing.icc")
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)

    littlecms_v4 = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()
    assert littlecms_v4[8] == 4

    for source, cause in [
        (b"", None),
        (b"not an icc profile", (ImageCms.PyCMSError, OSError, TypeError)),
        (littlecms_v4, None),
    ]:
        with pytest.MonkeyPatch.context() as mp:
            mp.setattr(color_profile, "_read_profile_resource", lambda name, data=source: data)
            with pytest.raises(RuntimeError) as excinfo:
                color_profile._load_color_profile()
        if cause is not None:
            assert isinstance(excinfo.value.__cause__, cause)
        Print("DEBUG", f"Rejected: {excinfo.value}")

    Print("SUCCESS", "Every load failure raises RuntimeError")


def test_single_output_intent():
    """One call adds exactly one output intent."""
    Print("HEADER", "Testing single output intent")

    pdf = pikepdf.Pdf.new()
    add_color_profile_srgb(pdf)

    intents = pdf.Root.OutputIntents
    assert len(intents) == 1
    check_srgb_intent(intents[0])
    Print("SUCCESS", "Output intent matches sRGB descriptor")


def test_output_intent_twice():
    """Two calls give two identical entries."""
    Print("HEADER", "Testing repeated output intent")

    pdf = pikepdf.Pdf.new()
    add_color_profile_srgb(pdf)
    add_color_profile_srgb(pdf)

    intents = pdf.Root.OutputIntents
    assert len(intents) == 2
    for intent in intents:
        check_srgb_intent(intent)
    Print("SUCCESS", "Two output intents present")


def test_existing_intents_untouched():
    """An output intent that was already there keeps its place and content."""
    Print("HEADER", "Testing existing output intents")

    pdf = pikepdf.Pdf.new()
    existing = pdf.make_indirect(pikepdf.Dictionary(
        Type=Name.OutputIntent,
        S=Name.GTS_PDFX,
        OutputConditionIdentifier="FOGRA39",
    ))
    pdf.Root.OutputIntents = pikepdf.Array([existing])

    add_color_profile_srgb(pdf)

    intents = pdf.Root.OutputIntents
    assert len(intents) == 2
    assert intents[0].S == Name.GTS_PDFX
    assert str(intents[0].OutputConditionIdentifier) == "FOGRA39"
    check_srgb_intent(intents[1])
    Print("SUCCESS", "Existing output intent preserved")


def test_output_intent_survives_save():
    """The embedded profile is intact after saving with compression."""
    Print("HEADER", "Testing output intent after save")

    pdf = pikepdf.Pdf.new()
    pdf.add_blank_page()
    add_color_profile_srgb(pdf)

    buffer = io.BytesIO()
    pdf.save(buffer, compress_streams=True)
    buffer.seek(0)

    with pikepdf.open(buffer) as reopened:
        check_srgb_intent(reopened.Root.OutputIntents[0])

    Print("SUCCESS", "Profile bytes unchanged after save")


def main():
    """Run all color profile tests."""
    tests = [
        ("Profile Loaded Once", test_profile_loaded_once),
        ("Valid ICC", test_profile_is_valid_icc),
        ("ICC Version 2", test_profile_is_icc_version_2),
        ("Load Failures", test_profile_load_failures_are_fatal),
        ("Single Output Intent", test_single_output_intent),
        ("Output Intent Twice", test_output_intent_twice),
        ("Existing Intents", test_existing_intents_untouched),
        ("After Save", test_output_intent_survives_save),
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
