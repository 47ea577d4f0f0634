"""
sRGB ICC profile shared by every output intent.

The profile is sRGB IEC61966-2.1 as an ICC version 2 profile, shipped next
to this module as sRGB.icc (PDF/A-1 only allows version 2 profiles). It is
read once when this module is imported and must deserialize with Pillow;
otherwise the import fails, since no PDF/A output intent can be written
without it.
"""

import io
from importlib import resources

from PIL import ImageCms

from utilities import Print

PROFILE_RESOURCE = "sRGB.icc"

# byte 8 of the ICC header holds the major version
MAX_PROFILE_VERSION = 2


def _read_profile_resource(name: str) -> bytes:
    return resources.files(__package__).joinpath(name).read_bytes()


def _load_color_profile(name: str = PROFILE_RESOURCE) -> bytes:
    """
    Read the bundled profile and verify Pillow can open it.

    Raises:
        RuntimeError: If the profile is missing, empty, unreadable, or newer
            than ICC version 2
    """
    try:
        profile_bytes = _read_profile_resource(name)
    except OSError as e:
        raise RuntimeError(f"Could not read bundled color profile '{name}': {e}") from e

    if not profile_bytes:
        raise RuntimeError(f"Bundled color profile '{name}' is empty")

    try:
        profile = ImageCms.ImageCmsProfile(io.BytesIO(profile_bytes))
    except (ImageCms.PyCMSError, OSError, TypeError) as e:
        raise RuntimeError(f"Bundled color profile '{name}' is not a valid ICC profile: {e}") from e

    version = profile_bytes[8]
    if version > MAX_PROFILE_VERSION:
        raise RuntimeError(
            f"Bundled color profile '{name}' is ICC version {version}; "
            f"PDF/A-1 needs version {MAX_PROFILE_VERSION}"
        )

    Print("DEBUG", f"Loaded color profile '{name}': {profile.profile.profile_description}, "
                   f"ICC v{version}, {len(profile_bytes):,} bytes")
    return profile_bytes


_COLOR_PROFILE_BYTES = _load_color_profile()


def color_profile_bytes() -> bytes:
    """The process-wide sRGB profile bytes (same object on every call)."""
    return _COLOR_PROFILE_BYTES


def open_color_profile() -> io.BytesIO:
    """A fresh read-only stream over the sRGB profile bytes."""
    return io.BytesIO(_COLOR_PROFILE_BYTES)
