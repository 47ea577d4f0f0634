"""
PDF Engine Registry

Factory pattern with decorator-based registration.

Usage:
    # In engine implementation:
    @register_pdf_engine("pikepdf")
    class PikePDFEngineFactory:
        @staticmethod
        def create(config: dict) -> PDFEngine:
            return PikePDFEngine(config)

    # To get an engine:
    engine = get_pdf_engine("pikepdf", config)

The PDF/A helpers themselves are plain functions and can be used without
an engine:

    from engines.pdf import add_metadata, add_color_profile_srgb, SubLevel

    add_metadata(pdf, "Title", 2, SubLevel.B)
    add_color_profile_srgb(pdf)
"""

from typing import Dict, Callable
from .base import PDFEngine

# Global registry of PDF engine factories
PDF_REGISTRY: Dict[str, Callable[[dict], PDFEngine]] = {}


def register_pdf_engine(name: str):
    """
    Decorator to register PDF engine factories.

    Args:
        name: Unique identifier for this engine

    Returns:
        Decorator function that registers the factory class
    """
    def decorator(factory_class):
        PDF_REGISTRY[name] = factory_class.create
        return factory_class
    return decorator


def get_pdf_engine(name: str, config: dict) -> PDFEngine:
    """
    Get a PDF engine instance by name.

    Args:
        name: Engine identifier (must be registered)
        config: Engine-specific configuration dictionary

    Returns:
        Initialized PDF engine instance

    Raises:
        ValueError: If engine name is not registered
    """
    if name not in PDF_REGISTRY:
        available = ', '.join(PDF_REGISTRY.keys()) if PDF_REGISTRY else 'none'
        raise ValueError(
            f"Unknown PDF engine: '{name}'. "
            f"Available engines: {available}"
        )
    return PDF_REGISTRY[name](config)


# Importing the engine registers it
from .pikepdf_engine import (  # noqa: E402
    add_color_profile_srgb,
    add_metadata,
    make_grid_rectangle,
    new_page,
    to_grid_value,
)
from .content import PageContentStream  # noqa: E402
from .exceptions import ProcessingError  # noqa: E402
from .types import SubLevel  # noqa: E402

__all__ = [
    'PDF_REGISTRY',
    'PDFEngine',
    'PageContentStream',
    'ProcessingError',
    'SubLevel',
    'add_color_profile_srgb',
    'add_metadata',
    'get_pdf_engine',
    'make_grid_rectangle',
    'new_page',
    'register_pdf_engine',
    'to_grid_value',
]
