"""Path resolution and image helpers.

This module provides:
- Path resolution against the project root, with frozen-build fallback
- Image size caching (Pillow) for aspect-preserving display
"""
from __future__ import annotations

import os
import sys

from PIL import Image as PILImage

from config_loader import BASE_DIR


def resolve_path(p: str) -> str:
    """Resolve a possibly relative path against the project root.

    Priority:
    1. Absolute paths are returned unchanged
    2. BASE_DIR / path (bundled resources or dev mode)
    3. Executable directory / path (frozen builds shipping stimuli next to the exe)

    Args:
        p: Path to resolve (absolute or relative)

    Returns:
        Resolved absolute path (the BASE_DIR candidate if nothing exists)
    """
    if os.path.isabs(p):
        return p

    candidate = os.path.join(BASE_DIR, p)
    if os.path.exists(candidate):
        return candidate

    if getattr(sys, 'frozen', False):
        fallback = os.path.join(os.path.dirname(sys.executable), p)
        if os.path.exists(fallback):
            return fallback

    # Return first candidate even if not exists (for error messages)
    return candidate


def file_exists_nonempty(path: str) -> bool:
    """Check if a file exists and is not empty.

    Args:
        path: Path to check (will be resolved via resolve_path)

    Returns:
        True if file exists and has size > 0, False otherwise
    """
    p = resolve_path(path)
    return os.path.isfile(p) and os.path.getsize(p) > 0


# Cache for image sizes to avoid re-opening files each frame
_IMG_SIZE_CACHE: dict[str, tuple[int, int]] = {}


def get_image_pixel_size(path: str) -> tuple[int, int] | None:
    """Get pixel dimensions of an image file with caching.

    Args:
        path: Path to the image file

    Returns:
        Tuple of (width, height) in pixels, or None if the file cannot be read
    """
    abs_path = resolve_path(path)
    if abs_path in _IMG_SIZE_CACHE:
        return _IMG_SIZE_CACHE[abs_path]
    try:
        with PILImage.open(abs_path) as im:
            size = im.size  # (width, height) in pixels
    except OSError:
        return None
    _IMG_SIZE_CACHE[abs_path] = size
    return size


def fitted_size_keep_aspect(path: str, max_w: float, max_h: float) -> tuple[float, float]:
    """Compute display size (norm units) that fits within max box while preserving aspect ratio.

    Args:
        path: Path to the image file
        max_w: Maximum width in norm units
        max_h: Maximum height in norm units

    Returns:
        Tuple of (width, height) in norm units that fits within max box
    """
    px = get_image_pixel_size(path)
    if not px:
        return max_w, max_h
    pw, ph = px
    if pw <= 0 or ph <= 0:
        return max_w, max_h
    img_ratio = pw / ph
    box_ratio = max_w / max_h if max_h > 0 else img_ratio
    if img_ratio >= box_ratio:
        # width-limited
        w = max_w
        h = w / img_ratio
    else:
        # height-limited
        h = max_h
        w = h * img_ratio
    return w, h
