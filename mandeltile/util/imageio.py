from __future__ import annotations

import os

import numpy as np
from PIL import Image

from mandeltile.util.logging_setup import get_logger

def ensure_dir(path: str) -> bool:
    """Create path if missing. Failure is logged, not raised; the later write will report it."""
    logger = get_logger()
    if not path or os.path.isdir(path):
        return True
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        logger.warning("Error trying to create output folder '%s': %s", path, e)
        return False
    logger.info("Folder '%s' did not exist and has been created.", path)
    return True

def save_image(buf: np.ndarray, path: str) -> None:
    img = Image.fromarray(np.ascontiguousarray(buf, dtype=np.uint8))
    img.save(path, format="PNG", optimize=True)
