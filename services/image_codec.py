import asyncio
import base64
import mimetypes
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

from core.exceptions import ReadFailure
from models.image_edit import ImageArtifact

DEFAULT_MIME_TYPE = "application/octet-stream"

ImageSource = Union[str, Path, BinaryIO]


def build_data_url(mime_type: str, base64_data: str) -> str:
    return f"data:{mime_type};base64,{base64_data}"


def split_data_url(data_url: str) -> Tuple[str, str]:
    """Split a data URL (e.g., "data:image/png;base64,iVBORw0KGg...") into mime type and base64 data"""
    if not data_url.startswith("data:") or "," not in data_url:
        raise ValueError("Invalid data URL format - must be a data: URL")

    header, base64_data = data_url.split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Invalid data URL format - payload must be base64 encoded")

    mime_type = header[len("data:"):].split(";")[0]
    return mime_type, base64_data


def strip_data_url_prefix(data_url: str) -> str:
    """Return the transport payload, i.e. everything after the first comma"""
    return data_url.split(",", 1)[1] if "," in data_url else ""


def mime_type_from_data_url(data_url: str) -> Optional[str]:
    if not data_url.startswith("data:"):
        return None
    header = data_url.split(",", 1)[0]
    mime_type = header.split(";")[0].split(":", 1)[1]
    return mime_type or None


def extension_for_mime_type(mime_type: Optional[str], default: str = "png") -> str:
    """"image/webp" -> "webp"; anything without a subtype falls back to the default"""
    if not mime_type or "/" not in mime_type:
        return default
    return mime_type.split("/", 1)[1] or default


def decode_data_url(data_url: str) -> bytes:
    _, base64_data = split_data_url(data_url)
    return base64.b64decode(base64_data)


def _read_bytes(source: ImageSource):
    if isinstance(source, (str, Path)):
        with open(source, "rb") as handle:
            return handle.read()
    return source.read()


def _declared_mime_type(source: ImageSource, mime_type: Optional[str]) -> str:
    if mime_type:
        return mime_type

    name = source if isinstance(source, (str, Path)) else getattr(source, "name", None)
    if isinstance(name, (str, Path)):
        guessed, _ = mimetypes.guess_type(str(name))
        if guessed:
            return guessed

    return DEFAULT_MIME_TYPE


async def file_to_data_url(source: ImageSource, mime_type: Optional[str] = None) -> ImageArtifact:
    """Read a binary image resource and encode it as a data URL"""
    try:
        content = await asyncio.to_thread(_read_bytes, source)
    except Exception as error:
        raise ReadFailure("Failed to read file.", error) from error

    if not isinstance(content, (bytes, bytearray)):
        raise ReadFailure(
            "Failed to read file as data URL.",
            TypeError(f"expected bytes, got {type(content).__name__}"),
        )

    declared = _declared_mime_type(source, mime_type)
    encoded = base64.b64encode(bytes(content)).decode("ascii")

    return ImageArtifact(data_url=build_data_url(declared, encoded), mime_type=declared)
