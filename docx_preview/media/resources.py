"""
File backed resources: images, embedded fonts and embedded HTML parts.

The renderer walk is synchronous. Every resource it needs is recorded as a
``PendingResource``; ``gather_resources`` awaits all of them at a single
join point, applies the loaded values and drops the slots of the ones that
failed. Decoding runs in worker threads through ``asyncio.to_thread``.
"""

import asyncio
import base64
import io
import logging
import mimetypes
import posixpath
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from lxml import etree
from PIL import Image, UnidentifiedImageError

from ..exceptions import DocxPreviewError, ResourceError
from ..models.document import WordDocument
from ..options import DEFAULT_OPTIONS, Options
from .font_obfuscation import load_embedded_font

logger = logging.getLogger(__name__)

# Formats browsers display that Pillow does not identify
_EXTENSION_TYPES = {
    ".svg": "image/svg+xml",
    ".emf": "image/emf",
    ".wmf": "image/wmf",
}


@dataclass(eq=False)
class PendingResource:
    """
    A resource requested during the walk.

    Attributes:
        load: Awaitable producing the value (URL, data URI or text)
        apply: Writes the value into the output
        slot: Output node removed when loading fails (None for stylesheet-only resources)
        label: Description for diagnostics
    """

    load: Awaitable[str]
    apply: Callable[[str], None]
    slot: Optional[etree._Element] = None
    label: str = ""


def data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def identify_image(data: bytes, path: str = "") -> str:
    """
    MIME type of image data.

    Raster formats are identified and verified with Pillow; vector formats
    Pillow cannot open fall back to the part extension.

    Raises:
        ResourceError: If the data is not an image
    """
    extension = posixpath.splitext(path)[1].lower()
    if extension == ".svg":
        return _EXTENSION_TYPES[extension]
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            image.verify()
    except Image.DecompressionBombError as e:
        raise ResourceError(f"Image {path} exceeds the pixel limit", str(e)) from e
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        if extension in _EXTENSION_TYPES and data:
            return _EXTENSION_TYPES[extension]
        raise ResourceError(f"Cannot decode image {path}", str(e)) from e
    mime_type = Image.MIME.get(image_format or "")
    if mime_type is None:
        mime_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return mime_type


class ResourceResolver:
    """
    Loads resources of one conversion.

    Each part is read and decoded once; concurrent requests share the load.
    When ``use_data_uris`` is off, image bytes are kept in ``assets`` keyed by
    package path, so a caller can write them next to the output.
    """

    def __init__(self, document: WordDocument, options: Options = DEFAULT_OPTIONS):
        self.document = document
        self.options = options
        self.assets: Dict[str, bytes] = {}
        self._tasks: Dict[tuple, asyncio.Future] = {}

    def _shared(self, key: tuple, factory: Callable[[], Awaitable[str]]) -> Awaitable[str]:
        async def run() -> str:
            task = self._tasks.get(key)
            if task is None:
                task = asyncio.ensure_future(factory())
                self._tasks[key] = task
            return await task
        return run()

    def _read(self, path: Optional[str]) -> bytes:
        package = self.document.package
        data = package.read_part(path) if package is not None and path else None
        if data is None:
            raise ResourceError("Missing part", path or "<no target>")
        return data

    def image(self, rel_id: Optional[str], part: Optional[str] = None) -> Awaitable[str]:
        """URL of the image targeted by rel_id in part."""
        path = self.document.find_part_by_rel_id(rel_id, part)
        return self._shared(("image", path), lambda: self._load_image(rel_id, path))

    async def _load_image(self, rel_id: Optional[str], path: Optional[str]) -> str:
        if path is None:
            raise ResourceError("Unresolved image relationship", rel_id)
        data = self._read(path)
        mime_type = await asyncio.to_thread(identify_image, data, path)
        if self.options.use_data_uris:
            return await asyncio.to_thread(data_uri, data, mime_type)
        self.assets[path] = data
        return path

    def font(self, rel_id: str, key: Optional[str], part: Optional[str]) -> Awaitable[str]:
        """Data URI of an embedded font, deobfuscated with its key."""
        path = self.document.find_part_by_rel_id(rel_id, part)
        return self._shared(("font", path, key), lambda: self._load_font(rel_id, path, key))

    async def _load_font(self, rel_id: str, path: Optional[str], key: Optional[str]) -> str:
        if path is None:
            raise ResourceError("Unresolved font relationship", rel_id)
        data = self._read(path)
        if key:
            data = await asyncio.to_thread(load_embedded_font, data, key)
        mime_type = "font/otf" if data[:4] == b"OTTO" else "font/ttf"
        return await asyncio.to_thread(data_uri, data, mime_type)

    def html_part(self, rel_id: Optional[str], part: Optional[str] = None) -> Awaitable[str]:
        """Text of an embedded HTML part (``altChunk``)."""
        path = self.document.find_part_by_rel_id(rel_id, part)
        return self._shared(("html", path), lambda: self._load_text(rel_id, path))

    async def _load_text(self, rel_id: Optional[str], path: Optional[str]) -> str:
        if path is None:
            raise ResourceError("Unresolved embedded part relationship", rel_id)
        data = self._read(path)
        return await asyncio.to_thread(_decode_text, data)


def _decode_text(data: bytes) -> str:
    for encoding in ("utf-8-sig", "utf-16"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def remove_slot(node: etree._Element) -> None:
    """Remove a node from its parent, keeping its tail text."""
    parent = node.getparent()
    if parent is None:
        return
    if node.tail:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + node.tail
        else:
            parent.text = (parent.text or "") + node.tail
    parent.remove(node)


async def gather_resources(pending: List[PendingResource], debug: bool = False) -> int:
    """
    Await every pending resource at once and apply the results.

    Failed resources have their slot removed. Output order does not depend
    on completion order since every value is applied to its own slot.

    Returns:
        Number of resources that failed
    """
    if not pending:
        return 0
    results = await asyncio.gather(*(item.load for item in pending), return_exceptions=True)
    failed = 0
    for item, result in zip(pending, results):
        if isinstance(result, (DocxPreviewError, OSError, ValueError)):
            failed += 1
            if debug:
                logger.warning(f"Resource {item.label} omitted: {result}")
            if item.slot is not None:
                remove_slot(item.slot)
        elif isinstance(result, BaseException):
            raise result
        else:
            item.apply(result)
    logger.debug(f"Resolved {len(pending) - failed} of {len(pending)} resources")
    return failed
