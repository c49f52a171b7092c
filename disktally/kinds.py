from __future__ import annotations
import os

IMAGE_EXTENSIONS = frozenset({
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".bmp",
    ".tiff",
    ".tif",
    ".svg",
    ".ico",
})

def file_extension(name: str) -> str:
    return os.path.splitext(os.path.basename(name))[1]

def is_image(name: str, case_sensitive: bool = False) -> bool:
    ext = file_extension(name)
    if not ext:
        return False
    if not case_sensitive:
        ext = ext.lower()
    return ext in IMAGE_EXTENSIONS
