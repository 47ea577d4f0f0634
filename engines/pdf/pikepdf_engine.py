"""
pikepdf-based PDF/A engine.

The module-level functions are the whole toolkit; they take the caller's
pikepdf.Pdf and modify it in place:

- add_metadata: XMP packet (Dublin Core + PDF/A identification) in the catalog
- add_color_profile_srgb: sRGB output intent with the embedded ICC profile
- new_page: page of a given size, optional crop box, drawing surface
- to_grid_value / make_grid_rectangle: pixels at a resolution -> PDF units

PikePDFEngine wraps them behind the PDFEngine protocol for the registry and
adds document creation and saving.

Coordinate system: 72 PDF units ("grid" units) per inch, origin at the
bottom-left corner of the page, Y increases upward.
"""

from pathlib import Path
from typing import Optional, Union

import pikepdf
from pikepdf import Name

from . import register_pdf_engine
from .color_profile import open_color_profile
from .constants import (
    COLOR_REGISTRY,
    CREATORS,
    DEFAULT_RESOLUTION,
    GRID_PER_INCH,
    JPEG_QUALITY,
    SRGB_PROFILE,
)
from .content import PageContentStream
from .types import SubLevel
from .xmp import build_xmp_packet
from utilities import Print

Number = Union[int, float]

OBJECT_STREAM_MODES = ('disable', 'preserve', 'generate')


def add_metadata(pdf: pikepdf.Pdf, title: str, level: int, sub_level: SubLevel) -> None:
    """
    Replace the document's XMP metadata with a PDF/A identification packet.

    Sets the plain-text /Title of the document info as well. The packet
    carries the title, the fixed CREATORS in order, the PDF/A part and the
    conformance level; any earlier catalog /Metadata is discarded.

    Args:
        pdf: Document to modify
        title: Document title
        level: PDF/A part (1, 2, 3, ...)
        sub_level: Conformance level

    Raises:
        ProcessingError: If the XMP packet cannot be serialized
        ValueError: If level or sub_level are not valid PDF/A values
        TypeError: If title is not a string
    """
    packet = build_xmp_packet(title, CREATORS, level, sub_level)

    pdf.docinfo[Name.Title] = title

    metadata = pikepdf.Stream(pdf, packet)
    metadata.stream_dict[Name.Type] = Name.Metadata
    metadata.stream_dict[Name.Subtype] = Name.XML
    pdf.Root.Metadata = pdf.make_indirect(metadata)

    Print("DEBUG", f"XMP metadata set: PDF/A-{level}{sub_level}, {len(packet):,} bytes, title={title!r}")


def add_color_profile_srgb(pdf: pikepdf.Pdf) -> None:
    """
    Append an sRGB output intent to the document catalog.

    Every call embeds the profile again and adds one more entry to
    /OutputIntents; existing entries stay as they are.

    Raises:
        OSError: If the profile stream cannot be read
    """
    with open_color_profile() as color_profile:
        profile_bytes = color_profile.read()

    icc_stream = pikepdf.Stream(pdf, profile_bytes)
    icc_stream.stream_dict[Name.N] = 3  # RGB
    icc_stream.stream_dict[Name.Alternate] = Name.DeviceRGB

    intent = pdf.make_indirect(pikepdf.Dictionary(
        Type=Name.OutputIntent,
        S=Name.GTS_PDFA1,
        Info=SRGB_PROFILE,
        OutputCondition=SRGB_PROFILE,
        OutputConditionIdentifier=SRGB_PROFILE,
        RegistryName=COLOR_REGISTRY,
        DestOutputProfile=pdf.make_indirect(icc_stream),
    ))

    if Name.OutputIntents not in pdf.Root:
        pdf.Root.OutputIntents = pikepdf.Array()
    pdf.Root.OutputIntents.append(intent)

    Print("DEBUG", f"Output intent added: {SRGB_PROFILE} ({len(pdf.Root.OutputIntents)} total)")


def new_page(
    pdf: pikepdf.Pdf,
    width: float,
    height: float,
    crop_upper_x: Optional[float] = None,
    crop_upper_y: Optional[float] = None,
    crop_lower_x: Optional[float] = None,
    crop_lower_y: Optional[float] = None,
    jpeg_quality: float = JPEG_QUALITY
) -> PageContentStream:
    """
    Add a width x height page to the document and open a drawing surface on it.

    The crop box is given by its upper right and lower left corners; it is
    not checked against the page size. Without it the page has no /CropBox
    and viewers use the media box.

    Args:
        pdf: Document to add the page to
        width, height: Page size in PDF units
        crop_upper_x, crop_upper_y: Upper right corner of the crop box
        crop_lower_x, crop_lower_y: Lower left corner of the crop box
        jpeg_quality: Quality for images drawn on the surface

    Returns:
        Append-mode content stream for the new page, which is already the
        last page of the document

    Raises:
        ValueError: If only some of the crop coordinates are given
    """
    crop = (crop_upper_x, crop_upper_y, crop_lower_x, crop_lower_y)
    if any(c is None for c in crop) and not all(c is None for c in crop):
        raise ValueError("Crop box needs all four coordinates or none")

    page = pdf.add_blank_page(page_size=(width, height))

    if crop_upper_x is not None:
        crop_box = pikepdf.Rectangle(crop_lower_x, crop_lower_y, crop_upper_x, crop_upper_y)
        page.obj.CropBox = crop_box.as_array()
        Print("DEBUG", f"New page {len(pdf.pages)}: {width} x {height}, crop box {crop_box}")
    else:
        Print("DEBUG", f"New page {len(pdf.pages)}: {width} x {height}")

    return PageContentStream(pdf, page, jpeg_quality=jpeg_quality)


def to_grid_value(value: Number, resolution: Number = DEFAULT_RESOLUTION) -> float:
    """
    Convert a pixel measurement at a resolution (dpi) into PDF units.

    Always computed in floating point; resolution must be positive.
    """
    return float(value) * GRID_PER_INCH / float(resolution)


def make_grid_rectangle(
    width: int,
    height: int,
    x_resolution: Number = DEFAULT_RESOLUTION,
    y_resolution: Number = DEFAULT_RESOLUTION
) -> pikepdf.Rectangle:
    """
    Page rectangle at the origin for an image of width x height pixels.

    Each axis is converted with its own resolution.
    """
    return pikepdf.Rectangle(
        0, 0,
        to_grid_value(width, x_resolution),
        to_grid_value(height, y_resolution),
    )


@register_pdf_engine("pikepdf")
class PikePDFEngineFactory:
    """Factory for creating pikepdf engine instances."""

    @staticmethod
    def create(config: dict) -> "PikePDFEngine":
        return PikePDFEngine(config)


class PikePDFEngine:
    """
    PDFEngine implementation on top of pikepdf.

    Attributes:
        compress_streams: Compress uncompressed streams when saving
        object_stream_mode: pikepdf.ObjectStreamMode used when saving
            (PDF/A-1 does not allow object streams)
        jpeg_quality: Quality (0..1) for embedded images
    """

    def __init__(self, config: dict):
        """
        Initialize PDF engine with configuration.

        Args:
            config: Configuration dictionary with optional keys:
                - compress_streams: bool (default: True)
                - object_stream_mode: str - 'disable', 'preserve' or 'generate' (default: 'disable')
                - jpeg_quality: float - 0..1 (default: JPEG_QUALITY)

        Raises:
            ValueError: If object_stream_mode is unknown
        """
        self.compress_streams = config.get('compress_streams', True)

        mode = config.get('object_stream_mode', 'disable')
        if mode not in OBJECT_STREAM_MODES:
            raise ValueError(
                f"Unknown object_stream_mode: '{mode}'. "
                f"Available modes: {', '.join(OBJECT_STREAM_MODES)}"
            )
        self.object_stream_mode = getattr(pikepdf.ObjectStreamMode, mode)

        self.jpeg_quality = config.get('jpeg_quality', JPEG_QUALITY)

        Print("DEBUG", f"PDF engine initialized: jpeg_quality={self.jpeg_quality}, object streams={mode}")

    def new_document(self) -> pikepdf.Pdf:
        return pikepdf.Pdf.new()

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
        return new_page(
            pdf, width, height,
            crop_upper_x, crop_upper_y, crop_lower_x, crop_lower_y,
            jpeg_quality=self.jpeg_quality,
        )

    def add_metadata(self, pdf: pikepdf.Pdf, title: str, level: int, sub_level: SubLevel) -> None:
        add_metadata(pdf, title, level, sub_level)

    def add_color_profile_srgb(self, pdf: pikepdf.Pdf) -> None:
        add_color_profile_srgb(pdf)

    def save(self, pdf: pikepdf.Pdf, output_path: Path) -> None:
        """Save the document; pikepdf keeps the catalog /Metadata as written."""
        pdf.save(
            str(output_path),
            compress_streams=self.compress_streams,
            object_stream_mode=self.object_stream_mode,
        )
        Print("DEBUG", f"Saved {len(pdf.pages)} pages to {output_path}")

    @property
    def name(self) -> str:
        """Engine identifier."""
        return "pikepdf"
