"""Document request and result models for DocumentGen API."""

from enum import Enum
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import OutputFormat, PageOrientation, PageSize


def _coerce_enum(enum_cls: Type[Enum], value: Any) -> Any:
    """Match enum values and names case-insensitively; leave anything else to pydantic."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        for member in enum_cls:
            if lowered in (str(member.value).lower(), member.name.lower()):
                return member
    return value


class _CamelModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PageMargins(_CamelModel):
    """Page margins as CSS length strings."""

    top: str = Field(default="1cm", description="Top margin")
    right: str = Field(default="1cm", description="Right margin")
    bottom: str = Field(default="1cm", description="Bottom margin")
    left: str = Field(default="1cm", description="Left margin")

    def as_css(self) -> str:
        return f"{self.top} {self.right} {self.bottom} {self.left}"


class DocumentOptions(_CamelModel):
    """Layout options applied when wrapping and exporting a document."""

    file_name: Optional[str] = Field(default=None, description="Download file name")
    page_size: PageSize = Field(default=PageSize.A4, description="Paper size")
    orientation: PageOrientation = Field(
        default=PageOrientation.PORTRAIT, description="Page orientation"
    )
    margins: PageMargins = Field(default_factory=PageMargins, description="Page margins")

    @field_validator("page_size", mode="before")
    @classmethod
    def parse_page_size(cls, v: Any) -> Any:
        return _coerce_enum(PageSize, v)

    @field_validator("orientation", mode="before")
    @classmethod
    def parse_orientation(cls, v: Any) -> Any:
        return _coerce_enum(PageOrientation, v)


class DocumentRequest(_CamelModel):
    """A request to generate one document."""

    template_id: Optional[str] = Field(
        default=None, description="Identifier of a stored template"
    )
    template_content: Optional[str] = Field(
        default=None, description="Inline template source"
    )
    data: Dict[str, Any] = Field(
        default_factory=dict, description="Values bound into the template"
    )
    format: OutputFormat = Field(default=OutputFormat.PDF, description="Output format")
    options: DocumentOptions = Field(
        default_factory=DocumentOptions, description="Layout options"
    )

    @field_validator("format", mode="before")
    @classmethod
    def parse_format(cls, v: Any) -> Any:
        return _coerce_enum(OutputFormat, v)

    @field_validator("data", "options", mode="before")
    @classmethod
    def none_to_default(cls, v: Any) -> Any:
        if v is None:
            return {}
        return v

    @property
    def has_template_source(self) -> bool:
        return bool(self.template_content) or bool(self.template_id)

    def file_name(self) -> str:
        """Explicit file name, or ``document.<format>``."""
        return self.options.file_name or f"document.{self.format.extension}"


class RenderedDocument(BaseModel):
    """Generated document bytes plus how to serve them."""

    content: bytes = Field(..., description="Document payload")
    content_type: str = Field(..., description="MIME type derived from the format")
    file_name: str = Field(..., description="Suggested download name")

    model_config = ConfigDict(frozen=True)
