"""
Artifact capture.

Reads the learning artifact a session will transform: a local file or a
URL. The captured artifact is kept base64-encoded with its MIME type, the
shape the generation boundary expects.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
from dataclasses import dataclass
from pathlib import Path

import httpx
from loguru import logger

from reformat.core.errors import InputError

INLINE_MIME_PREFIXES = ("image/",)
INLINE_MIME_TYPES = ("application/pdf",)
TEXT_MIME_PREFIX = "text/"


@dataclass(frozen=True)
class Artifact:
    """A captured upload: base64 payload + MIME type."""
    data: str
    mime_type: str
    source: str = ""

    @property
    def is_inline(self) -> bool:
        """Sent to the generator as inline binary data (images, PDFs)."""
        return self.mime_type.startswith(INLINE_MIME_PREFIXES) or self.mime_type in INLINE_MIME_TYPES

    @property
    def is_text(self) -> bool:
        return self.mime_type.startswith(TEXT_MIME_PREFIX)

    @property
    def size_bytes(self) -> int:
        """Decoded size, without decoding."""
        return len(self.data) * 3 // 4 - self.data[-2:].count("=")

    def decoded_text(self) -> str:
        """Text content for text artifacts, inlined into the prompt."""
        try:
            return base64.b64decode(self.data).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise InputError(f"Artifact {self.source or ''} is not readable text: {e}") from e


def is_supported(mime_type: str) -> bool:
    return (
        mime_type.startswith(INLINE_MIME_PREFIXES)
        or mime_type in INLINE_MIME_TYPES
        or mime_type.startswith(TEXT_MIME_PREFIX)
    )


def from_bytes(raw: bytes, mime_type: str, source: str = "", max_bytes: int | None = None) -> Artifact:
    """Wrap raw bytes, rejecting empty, oversized, or unsupported input."""
    mime_type = (mime_type or "").split(";")[0].strip().lower()
    if not is_supported(mime_type):
        raise InputError(f"Unsupported file type '{mime_type or 'unknown'}'. Please use an image, a PDF, or text.")
    if not raw:
        raise InputError(f"Artifact {source} is empty")
    if max_bytes is not None and len(raw) > max_bytes:
        raise InputError(f"Artifact {source} is {len(raw)} bytes; the limit is {max_bytes}")
    return Artifact(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type, source=source)


def load_artifact(path: Path | str, max_bytes: int | None = None) -> Artifact:
    """Capture a local file."""
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise InputError(f"Could not read {path}: {e}") from e
    logger.info(f"Captured {path.name} ({mime_type}, {len(raw)} bytes)")
    return from_bytes(raw, mime_type or "", source=str(path), max_bytes=max_bytes)


def fetch_artifact(url: str, timeout: float = 15.0, max_bytes: int | None = None) -> Artifact:
    """Capture a document by URL."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Artifact fetch failed for {url}: {e}")
        raise InputError("Could not load URL directly. Please download the file and open it instead.") from e

    mime_type = response.headers.get("content-type", "")
    if not mime_type or mime_type.startswith("application/octet-stream"):
        mime_type = mimetypes.guess_type(url)[0] or mime_type
    logger.info(f"Fetched {url} ({mime_type}, {len(response.content)} bytes)")
    return from_bytes(response.content, mime_type, source=url, max_bytes=max_bytes)
