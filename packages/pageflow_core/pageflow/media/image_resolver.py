"""
Image resolution: turns a source reference into a decoded bitmap.

Handles data URIs, bare base64 payloads, local files and http(s) URLs.
Every failure surfaces as :class:`ResourceError`; callers decide whether
to skip the image.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import hashlib
import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol

import httpx
from PIL import Image, UnidentifiedImageError

from ..exceptions import ResourceError

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w/+.-]*)(?P<params>(;[\w=.-]+)*?)(?P<b64>;base64)?,(?P<payload>.*)$", re.DOTALL)
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/=\s]+$")


@dataclass(slots=True, frozen=True)
class PhysicalImage:
    """Decoded image, normalised to PNG bytes."""

    data: bytes
    width: int
    height: int
    source: str = ""

    @property
    def digest(self) -> str:
        return hashlib.sha256(self.data).hexdigest()

    def __repr__(self) -> str:
        return f"PhysicalImage({self.width}x{self.height}, source={self.source[:40]!r})"


class ImageResolver(Protocol):
    async def resolve(self, reference: str) -> PhysicalImage: ...


def decode_image(data: bytes, source: str = "") -> PhysicalImage:
    """Decode raw image bytes with Pillow and re-encode them as PNG."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            width, height = img.size
            if img.mode not in ("RGB", "RGBA", "L", "LA", "P"):
                img = img.convert("RGBA")
            buffer = io.BytesIO()
            img.save(buffer, format="PNG")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise ResourceError("Failed to decode image", str(exc), source=source) from exc
    if width <= 0 or height <= 0:
        raise ResourceError("Image has no pixels", f"{width}x{height}", source=source)
    return PhysicalImage(data=buffer.getvalue(), width=width, height=height, source=source)


def decode_data_reference(reference: str) -> bytes:
    """Return the payload of a ``data:`` URI or a bare base64 string."""
    match = _DATA_URI_RE.match(reference.strip())
    try:
        if match:
            payload = match.group("payload")
            if match.group("b64"):
                return base64.b64decode(payload, validate=False)
            return payload.encode("latin-1")
        return base64.b64decode(reference, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ResourceError("Invalid base64 image data", str(exc), source=reference[:40]) from exc


def is_data_reference(reference: str) -> bool:
    stripped = reference.strip()
    if stripped.startswith("data:"):
        return True
    return len(stripped) > 64 and bool(_BASE64_RE.match(stripped[:256]))


class DefaultImageResolver:
    """Resolver used when the caller does not supply one.

    Only one resolution is in flight at a time; successful results are
    cached per reference so repeated logos are fetched once. The cache
    holds at most ``max_cached`` images and drops the oldest entry first.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        base_path: Optional[Path] = None,
        client: Optional[httpx.AsyncClient] = None,
        max_cached: int = 64,
    ):
        self.timeout = timeout
        self.max_cached = max(1, int(max_cached))
        self.base_path = Path(base_path) if base_path else None
        self._client = client
        self._cache: Dict[str, PhysicalImage] = {}
        self._gate = asyncio.Lock()

    async def resolve(self, reference: str) -> PhysicalImage:
        if not reference or not reference.strip():
            raise ResourceError("Empty image reference")
        async with self._gate:
            cached = self._cache.get(reference)
            if cached is not None:
                return cached
            try:
                if self.timeout is not None:
                    image = await asyncio.wait_for(self._load(reference), self.timeout)
                else:
                    image = await self._load(reference)
            except asyncio.TimeoutError as exc:
                raise ResourceError(
                    "Timed out resolving image", f"{self.timeout}s", source=reference
                ) from exc
            self._cache[reference] = image
            while len(self._cache) > self.max_cached:
                del self._cache[next(iter(self._cache))]
            return image

    async def _load(self, reference: str) -> PhysicalImage:
        if reference.startswith(("http://", "https://")):
            data = await self._fetch(reference)
            return decode_image(data, source=reference)
        if is_data_reference(reference):
            return decode_image(decode_data_reference(reference), source=reference[:64])
        return decode_image(self._read_file(reference), source=reference)

    async def _fetch(self, url: str) -> bytes:
        logger.debug(f"Fetching image {url}")
        try:
            if self._client is not None:
                response = await self._client.get(url, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ResourceError("Failed to load image", str(exc), source=url) from exc
        return response.content

    def _read_file(self, reference: str) -> bytes:
        path = Path(reference)
        if self.base_path is not None and not path.is_absolute():
            path = self.base_path / path
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ResourceError("Failed to read image file", str(exc), source=str(path)) from exc
