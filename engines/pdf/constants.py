"""
Fixed values for PDF/A production.

Grid units are PDF points: 72 per inch.
"""

# namespace of TIFF properties in EXIV2 XMPs (as yet unused)
TIFF = "http://ns.adobe.com/tiff/1.0/"

# namespace of camera raw settings in XMP
CRS = "http://ns.adobe.com/camera-raw-settings/1.0/"

# default JPEG quality, 0..1
JPEG_QUALITY = 0.92

# default resolution of facsimile images, in dpi
DEFAULT_RESOLUTION = 240

GRID_PER_INCH = 72.0

COLOR_REGISTRY = "http://www.color.org"
SRGB_PROFILE = "sRGB IEC61966-2.1"

CREATORS = (
    "Universität Duisburg-Essen, Arbeitsstelle für Edition und "
    "Editionstechnik",
    "Leibniz-Institut für Deutsche Sprache",
)

# XMP namespaces written by engines.pdf.xmp
NAMESPACES = {
    'x': "adobe:ns:meta/",
    'rdf': "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    'dc': "http://purl.org/dc/elements/1.1/",
    'pdfaid': "http://www.aiim.org/pdfa/ns/id/",
}

XML_NS = "http://www.w3.org/XML/1998/namespace"
