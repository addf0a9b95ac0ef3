"""Custom exceptions for docx-preview."""

from typing import Optional


class DocxPreviewError(Exception):
    """Base exception for docx-preview errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class PackageError(DocxPreviewError):
    """Exception raised when the package is not a readable archive."""

    pass


class ParsingError(DocxPreviewError):
    """Exception raised when a part cannot be parsed."""

    pass


class StyleError(DocxPreviewError):
    """Exception raised during style catalog validation."""

    pass


class FontError(DocxPreviewError):
    """Exception raised when an embedded font cannot be deobfuscated."""

    pass


class ResourceError(DocxPreviewError):
    """Exception raised when a referenced resource cannot be loaded or decoded."""

    pass


class RenderingError(DocxPreviewError):
    """Exception raised during HTML rendering."""

    pass
