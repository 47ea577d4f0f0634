"""
PDF/A document builder.

Wires the PDF engine into one authoring session: create a document, add
pages (blank or from facsimile images), attach the PDF/A metadata and the
sRGB output intent, save.

Usage:
    from pdfa_builder import PDFABuilder

    builder = PDFABuilder()
    builder.initialize()
    builder.add_image_page(Path("scan_0001.jpg"))
    with builder.new_page(595, 842) as content:
        content.begin_text()
        content.set_font(12)
        content.new_line_at_offset(72, 770)
        content.show_text("Colophon")
        content.end_text()
    builder.finalize("Digital edition")
    builder.save(Path("edition.pdf"))

Image pages are sized from the pixel dimensions and the image resolution
(default 240 dpi), at 72 PDF units per inch.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from engines.pdf import get_pdf_engine, make_grid_rectangle, PageContentStream, SubLevel
from utilities import Print


class PDFABuilder:
    """
    One PDF/A authoring session.

    Attributes:
        config: Loaded configuration dictionary
        pdf_engine: Initialized PDF engine instance
        pdf: Document being built
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize builder with configuration.

        Args:
            config_path: Path to config.json. If None, uses default location.
        """
        self.config = self._load_config(config_path)
        self.pdf_engine = None
        self.pdf = None
        self._initialized = False
        self._started = None

    def _load_config(self, config_path: Optional[Path]) -> dict:
        """Load configuration from JSON file."""
        if config_path is None:
            config_path = Path(__file__).parent / "config" / "config.json"

        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}\n"
                f"Create config/config.json or specify path with config_path parameter."
            )

        with open(config_path) as f:
            config = json.load(f)

        Print("DEBUG", f"Loaded configuration v{config.get('version', 'unknown')}")
        return config

    def initialize(self, pdf_engine_name: str = "pikepdf") -> None:
        """
        Resolve the PDF engine and start a new document.

        This must be called before any other method.

        Raises:
            ValueError: If the engine is not registered
        """
        engine_config = self.config.get('pdf_engines', {}).get(pdf_engine_name, {})
        self.pdf_engine = get_pdf_engine(pdf_engine_name, engine_config)
        self.pdf = self.pdf_engine.new_document()
        self._started = datetime.now()
        self._initialized = True
        Print("SUCCESS", f"Builder initialized with PDF engine: {self.pdf_engine.name}")

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Builder not initialized. Call initialize() first.")

    @property
    def default_resolution(self) -> int:
        return self.config.get('processing', {}).get('default_resolution', 240)

    def new_page(
        self,
        width: float,
        height: float,
        crop_box: Optional[Tuple[float, float, float, float]] = None
    ) -> PageContentStream:
        """
        Add a blank page and return its drawing surface.

        Args:
            width, height: Page size in PDF units
            crop_box: Optional (upper_x, upper_y, lower_x, lower_y)
        """
        self._require_initialized()
        if crop_box is None:
            return self.pdf_engine.new_page(self.pdf, width, height)
        upper_x, upper_y, lower_x, lower_y = crop_box
        return self.pdf_engine.new_page(self.pdf, width, height, upper_x, upper_y, lower_x, lower_y)

    def add_image_page(
        self,
        image: Union[Path, str, Image.Image],
        resolution: Optional[int] = None
    ) -> None:
        """
        Add a page showing one image at its physical size.

        Args:
            image: Image file or PIL image
            resolution: Image resolution in dpi (default: from config, typically 240)
        """
        self._require_initialized()
        if resolution is None:
            resolution = self.default_resolution

        if isinstance(image, Image.Image):
            self._add_image_page(image, resolution)
        else:
            with Image.open(image) as img:
                self._add_image_page(img, resolution)

    def _add_image_page(self, img: Image.Image, resolution: int) -> None:
        width_px, height_px = img.size
        rect = make_grid_rectangle(width_px, height_px, resolution, resolution)

        Print("DEBUG", f"Image page: {rect.width:.1f} x {rect.height:.1f} points ({width_px}x{height_px}px at {resolution} DPI)")

        with self.pdf_engine.new_page(self.pdf, rect.width, rect.height) as content:
            content.draw_image(img, 0, 0, rect.width, rect.height)

    def finalize(
        self,
        title: str,
        level: Optional[int] = None,
        sub_level: Union[SubLevel, str, None] = None
    ) -> None:
        """
        Attach PDF/A metadata and the sRGB output intent.

        Args:
            title: Document title
            level: PDF/A part (default: from config)
            sub_level: Conformance level (default: from config)

        Raises:
            ProcessingError: If the metadata cannot be written
        """
        self._require_initialized()
        pdfa_config = self.config.get('pdfa', {})
        if level is None:
            level = pdfa_config.get('level', 2)
        sub_level = SubLevel.parse(sub_level if sub_level is not None else pdfa_config.get('sub_level', 'B'))

        self.pdf_engine.add_metadata(self.pdf, title, level, sub_level)
        self.pdf_engine.add_color_profile_srgb(self.pdf)
        Print("SUCCESS", f"PDF/A-{level}{sub_level} metadata and output intent attached")

    def save(self, output_path: Path) -> dict:
        """
        Save the document.

        Returns:
            dict with statistics:
                - pages: Number of pages
                - output_size: Output file size in bytes
                - processing_time: Seconds since initialize()
        """
        self._require_initialized()
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self.pdf_engine.save(self.pdf, output_path)

        stats = {
            'pages': len(self.pdf.pages),
            'output_size': output_path.stat().st_size,
            'processing_time': (datetime.now() - self._started).total_seconds(),
        }

        Print("COMPLETED", f"Saved: {output_path}")
        Print("INFO", f"Pages: {stats['pages']}, size: {stats['output_size'] / 1024:.1f} KB")
        return stats
