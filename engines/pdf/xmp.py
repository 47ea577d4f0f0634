"""
XMP packet construction for PDF/A identification.

Builds a fresh packet holding a Dublin Core block (title, creators) and a
PDF/A identification block (part, conformance), the two schemas a PDF/A
validator looks for in the catalog /Metadata stream.

Layout of the generated packet:

    <?xpacket begin="..." id="W5M0MpCehiHzreSzNTczkc9d"?>
    <x:xmpmeta xmlns:x="adobe:ns:meta/">
      <rdf:RDF xmlns:rdf="...">
        <rdf:Description rdf:about="" xmlns:dc="...">
          <dc:title><rdf:Alt><rdf:li xml:lang="x-default">...</rdf:li></rdf:Alt></dc:title>
          <dc:creator><rdf:Seq><rdf:li>...</rdf:li>...</rdf:Seq></dc:creator>
        </rdf:Description>
        <rdf:Description rdf:about="" xmlns:pdfaid="...">
          <pdfaid:part>2</pdfaid:part>
          <pdfaid:conformance>B</pdfaid:conformance>
        </rdf:Description>
      </rdf:RDF>
    </x:xmpmeta>
    <?xpacket end="w"?>
"""

import io
from typing import Sequence

from lxml import etree

from .constants import NAMESPACES, XML_NS
from .exceptions import ProcessingError
from .types import SubLevel

XMP_HEADER = b'<?xpacket begin="\xef\xbb\xbf" id="W5M0MpCehiHzreSzNTczkc9d"?>\n'
XMP_TRAILER = b'\n<?xpacket end="w"?>'


def _tag(prefix: str, local_name: str) -> str:
    return f"{{{NAMESPACES[prefix]}}}{local_name}"


def _check_fields(title: str, level: int, sub_level: SubLevel) -> None:
    """
    Reject values that are not valid XMP fields.

    Raises:
        TypeError: If title is not a string
        ValueError: On a non-positive or non-integer part, or a conformance
            value that is not a SubLevel
    """
    if not isinstance(title, str):
        raise TypeError(f"title must be a str, got {type(title).__name__}")
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        raise ValueError(f"PDF/A part must be a positive integer, got {level!r}")
    if not isinstance(sub_level, SubLevel):
        raise ValueError(f"PDF/A conformance must be a SubLevel, got {sub_level!r}")


def _description(rdf: etree._Element, prefix: str) -> etree._Element:
    return etree.SubElement(
        rdf,
        _tag('rdf', 'Description'),
        {_tag('rdf', 'about'): ''},
        nsmap={prefix: NAMESPACES[prefix]},
    )


def _build_tree(title: str, creators: Sequence[str], level: int, sub_level: SubLevel) -> etree._Element:
    xmpmeta = etree.Element(_tag('x', 'xmpmeta'), nsmap={'x': NAMESPACES['x']})
    rdf = etree.SubElement(xmpmeta, _tag('rdf', 'RDF'), nsmap={'rdf': NAMESPACES['rdf']})

    # Dublin Core
    dublin_core = _description(rdf, 'dc')
    title_alt = etree.SubElement(etree.SubElement(dublin_core, _tag('dc', 'title')), _tag('rdf', 'Alt'))
    title_item = etree.SubElement(title_alt, _tag('rdf', 'li'), {f"{{{XML_NS}}}lang": 'x-default'})
    title_item.text = title

    creator_seq = etree.SubElement(etree.SubElement(dublin_core, _tag('dc', 'creator')), _tag('rdf', 'Seq'))
    for creator in creators:
        etree.SubElement(creator_seq, _tag('rdf', 'li')).text = creator

    # PDF/A identification
    identification = _description(rdf, 'pdfaid')
    etree.SubElement(identification, _tag('pdfaid', 'part')).text = str(level)
    etree.SubElement(identification, _tag('pdfaid', 'conformance')).text = str(sub_level)

    return xmpmeta


def build_xmp_packet(title: str, creators: Sequence[str], level: int, sub_level: SubLevel) -> bytes:
    """
    Serialize a new XMP packet for a PDF/A document.

    Args:
        title: Document title (dc:title, x-default)
        creators: Creator names in order (dc:creator)
        level: PDF/A part, e.g. 1, 2, 3 (pdfaid:part)
        sub_level: Conformance level (pdfaid:conformance)

    Returns:
        The complete packet, xpacket wrapper included, UTF-8 encoded

    Raises:
        TypeError: If title is not a string
        ValueError: If level or sub_level are not valid pdfaid values
        ProcessingError: If the packet cannot be built or serialized
    """
    _check_fields(title, level, sub_level)

    try:
        tree = _build_tree(title, creators, level, sub_level)
        with io.BytesIO() as buffer:
            buffer.write(XMP_HEADER)
            buffer.write(etree.tostring(tree, encoding='utf-8', xml_declaration=False, pretty_print=True))
            buffer.write(XMP_TRAILER)
            return buffer.getvalue()
    except ValueError as e:
        # lxml refuses text that cannot be represented in XML 1.0
        raise ProcessingError(f"Cannot write XMP metadata for title {title!r}", e) from e
    except (etree.LxmlError, OSError) as e:
        raise ProcessingError("XMP serialization failed", e) from e
