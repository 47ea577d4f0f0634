"""
PDF/A conformance levels.
"""

from enum import Enum


class SubLevel(Enum):
    """
    PDF/A conformance level (sub-level of a PDF/A part).

    The string form is the single letter written to pdfaid:conformance.
    """

    A = "A"  # accessible
    B = "B"  # basic
    U = "U"  # Unicode

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value) -> "SubLevel":
        """
        Convert a config value ("a", "B", SubLevel.U) into a SubLevel.

        Raises:
            ValueError: If value does not name a conformance level
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        choices = ', '.join(member.value for member in cls)
        raise ValueError(f"Unknown PDF/A conformance level: {value!r} (expected one of {choices})")
