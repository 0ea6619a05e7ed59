"""
Asset retrieval for templates and page images.
"""

import logging
from pathlib import Path

import requests

from ..errors import AssetFetchFailed

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http://", "https://")


def resolve_asset_path(reference: str, assets_dir: Path) -> Path:
    """Absolute references are kept, relative ones are joined to ``assets_dir``."""
    path = Path(reference)
    if path.is_absolute():
        return path
    return Path(assets_dir) / path


def fetch_asset(reference: str, assets_dir: Path, timeout: float | None = None) -> bytes:
    """
    Read the bytes of a template or image.

    Args:
        reference: Local path (relative to ``assets_dir`` or absolute) or http(s) URL
        assets_dir: Base directory for relative references
        timeout: Seconds to wait for a remote asset (None = requests default)

    Returns:
        Raw asset bytes

    Raises:
        AssetFetchFailed: If the asset is missing or the request fails
    """
    if reference.startswith(REMOTE_SCHEMES):
        logger.debug("Fetching remote asset %s", reference)
        try:
            response = requests.get(reference, timeout=timeout)
        except requests.RequestException as exc:
            raise AssetFetchFailed(f"Could not fetch {reference}: {exc}") from exc
        if not response.ok:
            raise AssetFetchFailed(
                f"Asset not found at {reference} (HTTP {response.status_code})"
            )
        return response.content

    path = resolve_asset_path(reference, assets_dir)
    logger.debug("Reading local asset %s", path)
    if not path.is_file():
        raise AssetFetchFailed(f"Asset not found at: {path}")
    try:
        return path.read_bytes()
    except OSError as exc:
        raise AssetFetchFailed(f"Could not read {path}: {exc}") from exc
