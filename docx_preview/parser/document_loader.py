"""
Package loader.

Loads the parts of a package in dependency order and assembles the
``WordDocument``. Only a missing or malformed main document is fatal; every
other part degrades to "absent" with a warning.
"""

import logging
from typing import Callable, Optional, TypeVar

from lxml import etree

from ..exceptions import DocxPreviewError, ParsingError
from ..models.document import WordDocument
from ..options import DEFAULT_OPTIONS, Options
from ..utils.element_types import DomType
from .document_parser import DocumentParser
from .font_parser import parse_font_table
from .numbering_parser import NumberingParser, resolve_style_links
from .package_reader import OpenXmlPackage
from .relationships import Relationships, RelationshipTypes
from .settings_parser import parse_core_properties, parse_settings
from .style_parser import StyleParser
from .theme_parser import parse_theme

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAIN_PART = "word/document.xml"


class DocumentLoader:
    """
    Builds a ``WordDocument`` out of an ``OpenXmlPackage``.

    Order: package relationships, main part relationships, styles, numbering,
    settings, theme, main document, headers, footers, notes, comments, font table.
    """

    def __init__(self, package: OpenXmlPackage, options: Options = DEFAULT_OPTIONS):
        self.package = package
        self.options = options
        self.parser = DocumentParser(options)
        self.document: Optional[WordDocument] = None

    def load(self) -> WordDocument:
        """
        Load the package.

        Returns:
            Parsed document

        Raises:
            ParsingError: If the main document part is missing or malformed
        """
        package_rels = self.package.load_relationships("")
        main_part = self._main_part(package_rels)
        main_rels = self.package.load_relationships(main_part)

        # The model is assembled in place; the main tree is filled in below
        document = WordDocument(main_part=main_part, document=None, package=self.package,
                                warnings=self.parser.warnings)
        self.document = document
        document.relationships[""] = package_rels
        document.relationships[main_part] = main_rels

        core_rel = package_rels.first_of_type(RelationshipTypes.CORE_PROPERTIES)
        if core_rel is not None:
            core = self._load_part(package_rels.target_path(core_rel.id), parse_core_properties, "core properties")
            if core is not None:
                document.core_properties = core

        self._load_styles(main_rels)
        self._load_numbering(main_rels)
        settings = self._load_related(main_rels, RelationshipTypes.SETTINGS, "settings", parse_settings)
        if settings is not None:
            document.settings = settings
        document.theme = self._load_related(main_rels, RelationshipTypes.THEME, "theme", parse_theme)

        document.document = self._load_main_document(main_part, main_rels)

        self._load_headers_footers(main_rels)
        self._load_notes(main_rels)
        comments = self._load_related(main_rels, RelationshipTypes.COMMENTS, "comments", self.parser.parse_comments)
        if comments is not None:
            document.comments = comments
        fonts = self._load_related(main_rels, RelationshipTypes.FONT_TABLE, "fontTable", parse_font_table)
        if fonts is not None:
            document.fonts = fonts

        for message in document.styles.validate():
            document.add_warning(message)
        for message in resolve_style_links(document.numbering, document.styles):
            document.add_warning(message)

        logger.info(f"Loaded {main_part}: {len(document.styles)} styles, "
                    f"{len(document.headers)} headers, {len(document.footers)} footers, "
                    f"{len(document.warnings)} warnings")
        return document

    def _main_part(self, package_rels: Relationships) -> str:
        rel = (package_rels.first_of_type(RelationshipTypes.OFFICE_DOCUMENT)
               or package_rels.first_of_type(RelationshipTypes.STRICT_OFFICE_DOCUMENT))
        if rel is not None:
            return package_rels.target_path(rel.id) or DEFAULT_MAIN_PART
        if self.package.exists(DEFAULT_MAIN_PART):
            self.parser.warnings.append("package relationships do not name a main document")
            return DEFAULT_MAIN_PART
        raise ParsingError("Main document part is missing", "no officeDocument relationship")

    def _load_main_document(self, main_part: str, main_rels: Relationships):
        root = self.package.read_part_xml(main_part)
        if root is None:
            raise ParsingError("Main document part is missing", main_part)
        self.parser.rel_ids = []
        result = self.parser.parse_document(root)
        self._check_rel_ids(main_part, main_rels)
        return result

    def _load_styles(self, main_rels: Relationships) -> None:
        catalog = self._load_related(main_rels, RelationshipTypes.STYLES, "styles",
                                     StyleParser(self.parser).parse)
        if catalog is not None:
            self.document.styles = catalog

    def _load_numbering(self, main_rels: Relationships) -> None:
        catalog = self._load_related(main_rels, RelationshipTypes.NUMBERING, "numbering",
                                     NumberingParser(self.parser).parse)
        if catalog is not None:
            self.document.numbering = catalog

    def _load_headers_footers(self, main_rels: Relationships) -> None:
        for rel_type, dom_type, target in ((RelationshipTypes.HEADER, DomType.HEADER, self.document.headers),
                                           (RelationshipTypes.FOOTER, DomType.FOOTER, self.document.footers)):
            for rel in main_rels.by_type(rel_type):
                path = main_rels.target_path(rel.id)
                tree = self._load_part(path, lambda root: self.parser.parse_header_footer(root, dom_type),
                                       dom_type.value)
                if tree is not None:
                    target[path] = tree

    def _load_notes(self, main_rels: Relationships) -> None:
        footnotes = self._load_related(main_rels, RelationshipTypes.FOOTNOTES, "footnotes",
                                       lambda root: self.parser.parse_notes(root, DomType.FOOTNOTE))
        if footnotes is not None:
            self.document.footnotes = footnotes
        endnotes = self._load_related(main_rels, RelationshipTypes.ENDNOTES, "endnotes",
                                      lambda root: self.parser.parse_notes(root, DomType.ENDNOTE))
        if endnotes is not None:
            self.document.endnotes = endnotes

    def _load_related(self, main_rels: Relationships, rel_type: str, kind: str,
                      parse: Callable[[etree._Element], T]) -> Optional[T]:
        rel = main_rels.first_of_type(rel_type)
        if rel is None:
            return None
        path = main_rels.target_path(rel.id)
        result = self._load_part(path, parse, kind)
        if result is not None and path:
            self.document.parts[kind] = path
        return result

    def _load_part(self, path: Optional[str], parse: Callable[[etree._Element], T], kind: str) -> Optional[T]:
        """
        Load one optional part and its relationships.

        Failures are recorded as warnings and give None.
        """
        if not path:
            return None
        try:
            root = self.package.read_part_xml(path)
            if root is None:
                self.document.add_warning(f"{kind} part {path} is missing")
                return None
            rels = self.package.load_relationships(path)
            self.document.relationships[path] = rels
            self.parser.rel_ids = []
            result = parse(root)
            self._check_rel_ids(path, rels)
            return result
        except DocxPreviewError as e:
            self._absorb(kind, path, e)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            self._absorb(kind, path, e)
        return None

    def _absorb(self, kind: str, path: str, error: Exception) -> None:
        message = f"failed to load {kind} part {path}: {error}"
        if self.options.debug:
            logger.warning(message, exc_info=True)
        self.document.add_warning(message)

    def _check_rel_ids(self, part: str, rels: Relationships) -> None:
        for rel_id in self.parser.rel_ids:
            if rel_id not in rels:
                self.document.add_warning(f"dangling relationship {rel_id} in {part}")
        self.parser.rel_ids = []


def load_document(package: OpenXmlPackage, options: Options = DEFAULT_OPTIONS) -> WordDocument:
    """Load a package into a ``WordDocument``."""
    return DocumentLoader(package, options).load()
