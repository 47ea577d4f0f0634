"""
Drawing surface bound to a single PDF page.

PageContentStream collects content stream instructions and appends them to
the page as a new stream when closed. Existing page content is kept: if the
page already has drawing commands, they are wrapped in q ... Q first, so the
graphics and text state stacks are back at their defaults when the appended
stream starts.

PDF Content Stream operators written here:
- q / Q: Save / restore graphics state
- cm: Concatenate matrix (transformation)
- w, RG, rg: Line width, stroking and non-stroking RGB color
- m, l, re, S, f: Path construction and painting
- BT / ET: Begin / end text object
- Tf, Tr, Td, Tj: Font, rendering mode, line offset, show text
- Do: Paint XObject (images)
"""

import io
from typing import List, Optional

import pikepdf
from pikepdf import Name
from PIL import Image

from .constants import JPEG_QUALITY
from utilities import Print

# PDF Base 14 fonts - guaranteed in all PDF readers
BASE_14_FONTS = {
    'Helvetica', 'Helvetica-Bold', 'Helvetica-Oblique', 'Helvetica-BoldOblique',
    'Times-Roman', 'Times-Bold', 'Times-Italic', 'Times-BoldItalic',
    'Courier', 'Courier-Bold', 'Courier-Oblique', 'Courier-BoldOblique',
    'Symbol', 'ZapfDingbats',
}


def _has_content(page: pikepdf.Page) -> bool:
    """True if the page carries at least one non-empty content stream."""
    contents = page.obj.get(Name.Contents)
    if contents is None:
        return False
    if isinstance(contents, pikepdf.Array):
        return any(len(stream.read_bytes()) > 0 for stream in contents)
    return len(contents.read_bytes()) > 0


def _flatten_image(img: Image.Image) -> Image.Image:
    """Convert to RGB or L for JPEG encoding, compositing transparency on white."""
    if img.mode in ('RGB', 'L'):
        return img
    if img.mode == 'PA' or (img.mode == 'P' and 'transparency' in img.info):
        img = img.convert('RGBA')
    if img.mode == 'RGBA':
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[3])
        return background
    if img.mode == 'LA':
        background = Image.new('L', img.size, 255)
        background.paste(img, mask=img.split()[1])
        return background
    return img.convert('RGB')


class PageContentStream:
    """
    Append-mode content stream for one page.

    Use as a context manager, or call close() when done; nothing is written
    to the page before that.

    Attributes:
        pdf: Document owning the page
        page: The page drawn on
        jpeg_quality: Quality (0..1) used when embedding images
    """

    def __init__(self, pdf: pikepdf.Pdf, page: pikepdf.Page, jpeg_quality: float = JPEG_QUALITY):
        self.pdf = pdf
        self.page = page
        self.jpeg_quality = jpeg_quality
        self._instructions: List[pikepdf.ContentStreamInstruction] = []
        self._fonts = {}
        self._closed = False

        if _has_content(page):
            page.contents_add(b'q\n', prepend=True)
            page.contents_add(b'\nQ\n')
            Print("DEBUG", "Wrapped existing page content in q/Q")

    def __enter__(self) -> "PageContentStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _emit(self, operator: str, *operands) -> None:
        if self._closed:
            raise RuntimeError("Content stream is already closed")
        self._instructions.append(
            pikepdf.ContentStreamInstruction(list(operands), pikepdf.Operator(operator))
        )

    def _resources(self, category: Name) -> pikepdf.Dictionary:
        if Name.Resources not in self.page.obj:
            self.page.obj.Resources = pikepdf.Dictionary()
        resources = self.page.obj.Resources
        if category not in resources:
            resources[category] = pikepdf.Dictionary()
        return resources[category]

    @staticmethod
    def _free_key(resources: pikepdf.Dictionary, prefix: str) -> Name:
        index = 1
        while Name(f'/{prefix}{index}') in resources:
            index += 1
        return Name(f'/{prefix}{index}')

    # graphics state

    def save_graphics_state(self) -> None:
        self._emit('q')

    def restore_graphics_state(self) -> None:
        self._emit('Q')

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        self._emit('cm', a, b, c, d, e, f)

    def set_line_width(self, width: float) -> None:
        self._emit('w', width)

    def set_stroking_color(self, r: float, g: float, b: float) -> None:
        """RGB components in 0..1."""
        self._emit('RG', r, g, b)

    def set_non_stroking_color(self, r: float, g: float, b: float) -> None:
        """RGB components in 0..1."""
        self._emit('rg', r, g, b)

    # paths

    def move_to(self, x: float, y: float) -> None:
        self._emit('m', x, y)

    def line_to(self, x: float, y: float) -> None:
        self._emit('l', x, y)

    def add_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._emit('re', x, y, width, height)

    def stroke(self) -> None:
        self._emit('S')

    def fill(self) -> None:
        self._emit('f')

    # text

    def begin_text(self) -> None:
        self._emit('BT')

    def end_text(self) -> None:
        self._emit('ET')

    def set_font(self, size: float, font_name: str = 'Helvetica') -> None:
        """
        Select a Base 14 font, registering it in the page resources on first use.

        Raises:
            ValueError: If font_name is not a Base 14 font
        """
        if font_name not in BASE_14_FONTS:
            raise ValueError(f"Not a PDF Base 14 font: {font_name}")

        key = self._fonts.get(font_name)
        if key is None:
            fonts = self._resources(Name.Font)
            key = self._free_key(fonts, 'F')
            fonts[key] = self.pdf.make_indirect(pikepdf.Dictionary(
                Type=Name.Font,
                Subtype=Name.Type1,
                BaseFont=Name(f'/{font_name}'),
                Encoding=Name.WinAnsiEncoding,
            ))
            self._fonts[font_name] = key
        self._emit('Tf', key, size)

    def set_text_rendering_mode(self, mode: int) -> None:
        """0=fill, 1=stroke, 2=fill+stroke, 3=invisible."""
        self._emit('Tr', mode)

    def new_line_at_offset(self, tx: float, ty: float) -> None:
        self._emit('Td', tx, ty)

    def show_text(self, text: str) -> None:
        """
        Show text with the current font.

        Base 14 fonts are set up with WinAnsiEncoding, so text is encoded as
        cp1252.

        Raises:
            ValueError: If text has characters cp1252 cannot encode
        """
        try:
            encoded = text.encode('cp1252')
        except UnicodeEncodeError as e:
            raise ValueError(
                f"Text not representable in WinAnsiEncoding: {text[e.start:e.end]!r} in {text!r}"
            ) from e
        self._emit('Tj', pikepdf.String(encoded))

    # images

    def draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: Optional[float] = None,
        height: Optional[float] = None
    ) -> Name:
        """
        Embed a PIL image as JPEG and paint it at (x, y).

        Args:
            image: Image to embed; transparency is composited on white
            x, y: Lower left corner in page units
            width, height: Size in page units (default: pixel size)

        Returns:
            Resource name of the image XObject

        Raises:
            OSError: If the image cannot be encoded
        """
        img = _flatten_image(image)
        width = img.width if width is None else width
        height = img.height if height is None else height

        with io.BytesIO() as buffer:
            img.save(buffer, format='JPEG', quality=round(self.jpeg_quality * 100))
            jpeg_bytes = buffer.getvalue()

        image_stream = pikepdf.Stream(self.pdf, jpeg_bytes)
        image_stream.stream_dict[Name.Type] = Name.XObject
        image_stream.stream_dict[Name.Subtype] = Name.Image
        image_stream.stream_dict[Name.Width] = img.width
        image_stream.stream_dict[Name.Height] = img.height
        image_stream.stream_dict[Name.ColorSpace] = Name.DeviceRGB if img.mode == 'RGB' else Name.DeviceGray
        image_stream.stream_dict[Name.BitsPerComponent] = 8
        image_stream.stream_dict[Name.Filter] = Name.DCTDecode

        xobjects = self._resources(Name.XObject)
        key = self._free_key(xobjects, 'Im')
        xobjects[key] = self.pdf.make_indirect(image_stream)

        self.save_graphics_state()
        self.transform(width, 0, 0, height, x, y)
        self._emit('Do', key)
        self.restore_graphics_state()

        Print("DEBUG", f"Embedded image {key}: {img.width}x{img.height}px, {len(jpeg_bytes):,} bytes")
        return key

    def close(self) -> None:
        """Append the collected instructions to the page. Closing twice does nothing."""
        if self._closed:
            return
        self._closed = True
        if not self._instructions:
            return
        content = pikepdf.unparse_content_stream(self._instructions)
        self.page.contents_add(pikepdf.Stream(self.pdf, content))
        Print("DEBUG", f"Appended {len(self._instructions)} instructions ({len(content):,} bytes)")
