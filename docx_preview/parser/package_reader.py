"""
Package reader for DOCX files.

Exposes the parts of the zip container by name: raw bytes, parsed XML and
relationship manifests. Absent parts are reported as None, never raised.
"""

import io
import logging
import posixpath
import zipfile
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Union

from lxml import etree

from ..exceptions import PackageError, ParsingError
from ..options import DEFAULT_OPTIONS, Options
from ..utils.xml_utils import parse_xml
from .relationships import Relationships

logger = logging.getLogger(__name__)

PackageSource = Union[bytes, bytearray, str, Path, BinaryIO]


def normalize_part_name(name: str) -> str:
    """Normalize a part name: forward slashes, no leading slash."""
    return name.replace("\\", "/").lstrip("/")


def rels_part_name(part_name: str) -> str:
    """Path of the relationship manifest of a part (``word/_rels/document.xml.rels``)."""
    part_name = normalize_part_name(part_name)
    folder, base = posixpath.split(part_name)
    return posixpath.join(folder, "_rels", f"{base}.rels")


class OpenXmlPackage:
    """
    Reads parts from a DOCX (zip) container.

    Part lookup is case-insensitive, matching how Office resolves names.
    """

    def __init__(self, archive: zipfile.ZipFile, options: Options = DEFAULT_OPTIONS):
        """
        Initialize the package.

        Args:
            archive: Open zip archive
            options: Conversion options
        """
        self._archive = archive
        self.options = options
        self._names: Dict[str, str] = {}
        for info in archive.infolist():
            if info.is_dir():
                continue
            self._names[normalize_part_name(info.filename).lower()] = info.filename
        self._xml_cache: Dict[str, etree._Element] = {}

    @classmethod
    def load(cls, source: PackageSource, options: Options = DEFAULT_OPTIONS) -> "OpenXmlPackage":
        """
        Open a package from bytes, a path or a binary stream.

        Args:
            source: Package data
            options: Conversion options

        Returns:
            Package

        Raises:
            PackageError: If the data is not a zip archive
        """
        try:
            if isinstance(source, (bytes, bytearray)):
                archive = zipfile.ZipFile(io.BytesIO(bytes(source)))
            elif isinstance(source, (str, Path)):
                archive = zipfile.ZipFile(Path(source))
            else:
                archive = zipfile.ZipFile(source)
        except (zipfile.BadZipFile, OSError, ValueError) as e:
            raise PackageError("Invalid DOCX package", str(e)) from e

        logger.debug(f"Opened package with {len(archive.namelist())} entries")
        return cls(archive, options)

    def close(self) -> None:
        self._archive.close()

    @property
    def closed(self) -> bool:
        return self._archive.fp is None

    def __enter__(self) -> "OpenXmlPackage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def list_parts(self) -> List[str]:
        """Normalized names of all parts."""
        return [normalize_part_name(name) for name in self._names.values()]

    def exists(self, name: str) -> bool:
        return normalize_part_name(name).lower() in self._names

    def read_part(self, name: Optional[str]) -> Optional[bytes]:
        """
        Read the raw bytes of a part.

        Args:
            name: Part name

        Returns:
            Content, or None if the part is absent

        Raises:
            PackageError: If the archive entry cannot be decompressed
        """
        if not name:
            return None
        entry = self._names.get(normalize_part_name(name).lower())
        if entry is None:
            return None
        try:
            return self._archive.read(entry)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            raise PackageError(f"Cannot read part {name}", str(e)) from e

    def read_part_xml(self, name: Optional[str]) -> Optional[etree._Element]:
        """
        Read and parse an XML part.

        Args:
            name: Part name

        Returns:
            Root element, or None if the part is absent

        Raises:
            ParsingError: If the part is not well-formed XML
        """
        if not name:
            return None
        key = normalize_part_name(name).lower()
        if key in self._xml_cache:
            return self._xml_cache[key]
        data = self.read_part(name)
        if data is None:
            return None
        try:
            root = parse_xml(data, trim_declaration=self.options.trim_xml_declaration)
        except etree.XMLSyntaxError as e:
            raise ParsingError(f"Malformed XML in {name}", str(e)) from e
        self._xml_cache[key] = root
        return root

    def load_relationships(self, part_name: str = "") -> Relationships:
        """
        Load the relationship manifest of a part.

        An empty part name loads the package relationships (``_rels/.rels``).
        A missing manifest gives an empty one.
        """
        path = rels_part_name(part_name) if part_name else "_rels/.rels"
        root = self.read_part_xml(path)
        return Relationships.from_xml(normalize_part_name(part_name), root)
