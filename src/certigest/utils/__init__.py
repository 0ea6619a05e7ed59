"""
Utility functions for asset retrieval and PDF/image handling.
"""

from .assets import fetch_asset, resolve_asset_path
from .image_utils import SUPPORTED_FORMATS, decode_page_image
from .pdf_utils import open_pdf, overlay_pages, page_sizes, pdf_to_bytes

__all__ = [
    "fetch_asset",
    "resolve_asset_path",
    "decode_page_image",
    "SUPPORTED_FORMATS",
    "open_pdf",
    "overlay_pages",
    "page_sizes",
    "pdf_to_bytes",
]
