import base64
import binascii
import logging
import re
from typing import Any, List, Tuple

from story_illustrator.core.errors import NoImageInResponseError
from story_illustrator.core.models import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_VISUAL_ELEMENTS = "Key story elements"
DEFAULT_STYLE_OPTIONS = ("Whimsical Children's Book", "Dramatic Graphic Novel", "Watercolor Painting")
DEFAULT_TITLE = "My Story"

# First occurrence of each marker wins. The elements section stops at whichever
# marker follows it so a missing style block doesn't swallow the title line.
_VISUAL_ELEMENTS_RE = re.compile(r"VISUAL ELEMENTS:(.*?)(?=STYLE OPTIONS:|TITLE:|\Z)", re.DOTALL)
_STYLE_BLOCK_RE = re.compile(r"STYLE OPTIONS:\s*((?:[-*•][ \t]+.+\n?)+)")
_TITLE_RE = re.compile(r"TITLE:(.*)")
_LIST_MARKER_RE = re.compile(r"^\s*[-*•]\s*")


def _extract_visual_elements(raw: str) -> str:
    match = _VISUAL_ELEMENTS_RE.search(raw)
    value = match.group(1).strip() if match else ""
    if not value:
        logger.warning("No VISUAL ELEMENTS section in analysis response, using default.")
        return DEFAULT_VISUAL_ELEMENTS
    return value


def _extract_style_options(raw: str) -> List[str]:
    match = _STYLE_BLOCK_RE.search(raw)
    options = []
    if match:
        for line in match.group(1).split("\n"):
            style = _LIST_MARKER_RE.sub("", line).strip()
            if style:
                options.append(style)
    if not options:
        logger.warning("No STYLE OPTIONS block in analysis response, using defaults.")
        return list(DEFAULT_STYLE_OPTIONS)
    return options


def _extract_title(raw: str) -> str:
    match = _TITLE_RE.search(raw)
    value = match.group(1).strip() if match else ""
    if not value:
        logger.warning("No TITLE line in analysis response, using default.")
        return DEFAULT_TITLE
    return value


def parse_analysis(raw: str) -> AnalysisResult:
    """
    Parses the marker-structured analysis text into an AnalysisResult.

    Never raises: each of the three sections is extracted independently and
    falls back to a fixed default when it is missing or empty.
    """
    raw = raw or ""
    return AnalysisResult(
        visual_elements=_extract_visual_elements(raw),
        style_options=_extract_style_options(raw),
        suggested_title=_extract_title(raw),
    )


def _response_parts(response: Any) -> List[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


def extract_image(response: Any) -> Tuple[bytes, str]:
    """Returns (bytes, mime_type) of the first inline image part in a generation response."""
    for part in _response_parts(response):
        inline_data = getattr(part, "inline_data", None)
        if not inline_data or not inline_data.data or not inline_data.mime_type:
            continue
        data = inline_data.data
        if isinstance(data, str):
            # Raw REST payloads carry base64 text; the SDK already decodes it.
            try:
                data = base64.b64decode(data, validate=True)
            except binascii.Error:
                logger.warning(f"Skipping {inline_data.mime_type} part with undecodable base64 data.")
                continue
        return data, inline_data.mime_type

    raise NoImageInResponseError("Gemini generation returned no image data.")
