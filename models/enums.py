"""Enumeration types for DocumentGen API models."""

from enum import Enum


class OutputFormat(str, Enum):
    """Formats a document can be generated in."""

    PDF = "PDF"
    HTML = "HTML"
    DOCX = "DOCX"

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @property
    def extension(self) -> str:
        return self.value.lower()


_CONTENT_TYPES = {
    OutputFormat.PDF: "application/pdf",
    OutputFormat.HTML: "text/html",
    OutputFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class PageSize(str, Enum):
    """Paper sizes understood by the PDF export."""

    A4 = "A4"
    LETTER = "Letter"
    LEGAL = "Legal"


class PageOrientation(str, Enum):
    """Page orientation."""

    PORTRAIT = "Portrait"
    LANDSCAPE = "Landscape"


class PlanTier(str, Enum):
    """Service plans, lowest first."""

    FREE = "free"
    STARTER = "starter"
    GROWTH = "growth"
    SCALE = "scale"
