"""Template rendering for DocumentGen API.

Templates are Jinja2 source evaluated in a sandboxed environment. Request data
is bound as top-level variables; missing fields render as empty text. A handful
of document helpers are available both as functions and filters:

    {{ format_currency(total, 'EUR') }}   {{ total | format_currency }}
    {{ format_date(issued, '%d %B %Y') }} {{ issued | format_date }}
    {{ barcode(order.code) }}

Output that is not already a full HTML document is wrapped in a minimal
document shell whose ``@page`` rule carries the page size, orientation and
margins from the request options.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from jinja2 import ChainableUndefined, TemplateError, TemplateSyntaxError, is_undefined
from jinja2.sandbox import SandboxedEnvironment

from models import DocumentOptions
from utils import create_contextual_logger
from .exceptions import TemplateRenderError

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

DOCTYPE_PREFIX = "<!doctype"


def _is_blank(value: Any) -> bool:
    return value is None or is_undefined(value) or value == ""


def format_currency(amount: Any, currency: str = "USD") -> str:
    """Format ``amount`` with two decimals and the currency's symbol."""
    if _is_blank(amount):
        return ""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"format_currency expects a number, got {amount!r}") from None
    code = (currency or "USD").upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{symbol}{value:,.2f}"
    return f"{code} {value:,.2f}"


def format_date(value: Any, pattern: str = "%Y-%m-%d") -> str:
    """Format a date, datetime or ISO-8601 string with a strftime pattern."""
    if _is_blank(value):
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"format_date cannot parse {value!r} as an ISO-8601 date") from None
    if not isinstance(value, (date, datetime)):
        raise ValueError(f"format_date expects a date, got {type(value).__name__}")
    return value.strftime(pattern)


def barcode(text: Any) -> str:
    """Placeholder marker, not an encoded barcode."""
    return f"[BARCODE: {'' if _is_blank(text) else text}]"


def is_full_document(markup: str) -> bool:
    return markup.lstrip().lower().startswith(DOCTYPE_PREFIX)


def wrap_in_document(content: str, options: DocumentOptions) -> str:
    """Embed ``content`` in the default HTML shell."""
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset='utf-8'>
    <style>
        @page {{
            size: {options.page_size.value} {options.orientation.value.lower()};
            margin: {options.margins.as_css()};
        }}
        body {{
            font-family: Arial, sans-serif;
            line-height: 1.6;
            color: #333;
        }}
        table {{
            width: 100%;
            border-collapse: collapse;
            margin: 20px 0;
        }}
        th, td {{
            border: 1px solid #ddd;
            padding: 8px;
            text-align: left;
        }}
        th {{
            background-color: #f4f4f4;
            font-weight: bold;
        }}
        .invoice-header {{
            display: flex;
            justify-content: space-between;
            margin-bottom: 30px;
        }}
        .text-right {{ text-align: right; }}
        .mt-4 {{ margin-top: 2rem; }}
        .mb-4 {{ margin-bottom: 2rem; }}
    </style>
</head>
<body>
    {content}
</body>
</html>"""


def ensure_document(markup: str, options: DocumentOptions) -> str:
    """Wrap ``markup`` unless it already starts with a doctype."""
    if is_full_document(markup):
        return markup
    return wrap_in_document(markup, options)


class TemplateRenderer:
    """Renders template source plus data into an HTML document."""

    def __init__(self) -> None:
        self.logger = create_contextual_logger(__name__, service="template_renderer")
        self.environment = SandboxedEnvironment(autoescape=True, undefined=ChainableUndefined)
        helpers = {
            "format_currency": format_currency,
            "format_date": format_date,
            "barcode": barcode,
        }
        self.environment.globals.update(helpers)
        self.environment.filters.update(helpers)

    def render(
        self,
        template_source: str,
        data: Optional[Mapping[str, Any]] = None,
        options: Optional[DocumentOptions] = None,
    ) -> str:
        try:
            template = self.environment.from_string(template_source)
        except TemplateSyntaxError as e:
            raise TemplateRenderError(
                f"Template syntax error on line {e.lineno}: {e.message}"
            ) from e

        try:
            markup = template.render(dict(data or {}))
        except TemplateError as e:
            raise TemplateRenderError(f"Template rendering failed: {e}") from e
        except (TypeError, ValueError, ArithmeticError) as e:
            raise TemplateRenderError(f"Template rendering failed: {e}") from e

        self.logger.debug("Template rendered", markup_length=len(markup))
        return ensure_document(markup, options or DocumentOptions())
