"""
PDF Engine Protocol

Defines the contract that all PDF/A engines must implement.
"""

from pathlib import Path
from typing import Optional, Protocol

import pikepdf

from .content import PageContentStream
from .types import SubLevel


class PDFEngine(Protocol):
    """
    Protocol for PDF/A engines.

    PDF engines are responsible for:
    - Creating documents and pages with a drawing surface
    - Writing the PDF/A identification into the XMP metadata
    - Embedding the sRGB output intent
    - Saving documents
    """

    def new_document(self) -> pikepdf.Pdf:
        """Create an empty document."""
        ...

    def new_page(
        self,
        pdf: pikepdf.Pdf,
        width: float,
        height: float,
        crop_upper_x: Optional[float] = None,
        crop_upper_y: Optional[float] = None,
        crop_lower_x: Optional[float] = None,
        crop_lower_y: Optional[float] = None
    ) -> PageContentStream:
        """
        Append a page and return a drawing surface bound to it.

        Args:
            pdf: Document to add the page to
            width, height: Page size in PDF units
            crop_upper_x, crop_upper_y: Upper right corner of the optional crop box
            crop_lower_x, crop_lower_y: Lower left corner of the optional crop box

        Returns:
            Append-mode content stream of the new page
        """
        ...

    def add_metadata(self, pdf: pikepdf.Pdf, title: str, level: int, sub_level: SubLevel) -> None:
        """
        Replace the XMP metadata with title, creators and PDF/A identification.

        Raises:
            ProcessingError: If the metadata cannot be serialized
        """
        ...

    def add_color_profile_srgb(self, pdf: pikepdf.Pdf) -> None:
        """
        Append an sRGB output intent.

        Raises:
            OSError: If the color profile cannot be read
        """
        ...

    def save(self, pdf: pikepdf.Pdf, output_path: Path) -> None:
        """Write the document to output_path."""
        ...

    @property
    def name(self) -> str:
        """
        Engine identifier for logging and debugging.

        Returns:
            Unique name of this engine (e.g., 'pikepdf')
        """
        ...
