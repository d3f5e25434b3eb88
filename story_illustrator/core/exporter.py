import io
import logging
import re
from pathlib import Path
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from story_illustrator.core.models import IllustrationExport, IllustrationResult

logger = logging.getLogger(__name__)

EXPORT_SUFFIX = "_illustration.png"


def slugify_title(title: str) -> str:
    """Filesystem-safe slug: anything outside a-z0-9 becomes '_'."""
    return re.sub(r"[^A-Za-z0-9]", "_", title).lower()


def export_filename(title: str) -> str:
    return f"{slugify_title(title)}{EXPORT_SUFFIX}"


def to_png(data: bytes, mime_type: str) -> Tuple[bytes, str]:
    if mime_type == "image/png":
        return data, mime_type
    try:
        with Image.open(io.BytesIO(data)) as img:
            buf = io.BytesIO()
            img.save(buf, format="PNG")
            return buf.getvalue(), "image/png"
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not re-encode {mime_type} image as PNG: {e}. Keeping original bytes.")
        return data, mime_type


def export_illustration(result: IllustrationResult) -> IllustrationExport:
    """Pure conversion of a generated illustration into a downloadable file."""
    data, mime_type = to_png(result.image_bytes, result.mime_type)
    return IllustrationExport(filename=export_filename(result.title), data=data, mime_type=mime_type)


def save_export(export: IllustrationExport, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export.filename
    with open(path, "wb") as f:
        f.write(export.data)
    logger.info(f"Illustration saved to {path}")
    return path
