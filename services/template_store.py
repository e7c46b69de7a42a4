"""Built-in sample templates, looked up by identifier."""

from typing import Dict, List

from .exceptions import TemplateNotFound

INVOICE_TEMPLATE = """
<div class='invoice-header'>
    <div>
        <h1>INVOICE</h1>
        <p>Invoice #: {{ invoice.number }}</p>
        <p>Date: {{ invoice.date | format_date('%B %d, %Y') }}</p>
    </div>
    <div class='text-right'>
        <h2>{{ company.name }}</h2>
        <p>{{ company.address }}</p>
        <p>{{ company.city }}, {{ company.state }} {{ company.zip }}</p>
    </div>
</div>

<div class='mb-4'>
    <h3>Bill To:</h3>
    <p>{{ customer.name }}</p>
    <p>{{ customer.address }}</p>
    <p>{{ customer.city }}, {{ customer.state }} {{ customer.zip }}</p>
</div>

<table>
    <thead>
        <tr>
            <th>Description</th>
            <th>Quantity</th>
            <th>Unit Price</th>
            <th>Total</th>
        </tr>
    </thead>
    <tbody>
        {% for item in items %}
        <tr>
            <td>{{ item.description }}</td>
            <td>{{ item.quantity }}</td>
            <td>{{ item.unitPrice | format_currency }}</td>
            <td>{{ (item.quantity * item.unitPrice) | format_currency }}</td>
        </tr>
        {% endfor %}
    </tbody>
    <tfoot>
        <tr>
            <td colspan='3' class='text-right'><strong>Subtotal:</strong></td>
            <td><strong>{{ invoice.subtotal | format_currency }}</strong></td>
        </tr>
        <tr>
            <td colspan='3' class='text-right'><strong>Tax ({{ invoice.taxRate }}%):</strong></td>
            <td><strong>{{ invoice.tax | format_currency }}</strong></td>
        </tr>
        <tr>
            <td colspan='3' class='text-right'><strong>Total:</strong></td>
            <td><strong>{{ invoice.total | format_currency }}</strong></td>
        </tr>
    </tfoot>
</table>

<div class='mt-4'>
    <p><strong>Terms:</strong> {{ invoice.terms }}</p>
    <p><strong>Thank you for your business!</strong></p>
</div>
"""

RECEIPT_TEMPLATE = """
<div style='text-align: center; margin-bottom: 30px;'>
    <h1>{{ company.name }}</h1>
    <p>{{ company.address }}</p>
    <p>Tel: {{ company.phone }}</p>
    <hr>
    <h2>RECEIPT</h2>
    <p>{{ receipt.date | format_date('%m/%d/%Y %I:%M %p') }}</p>
    <p>Receipt #: {{ receipt.number }}</p>
</div>

<table style='width: 100%;'>
    {% for item in items %}
    <tr>
        <td>{{ item.name }}</td>
        <td style='text-align: right;'>{{ item.price | format_currency }}</td>
    </tr>
    {% endfor %}
</table>

<hr>

<table style='width: 100%;'>
    <tr>
        <td><strong>Subtotal:</strong></td>
        <td style='text-align: right;'>{{ receipt.subtotal | format_currency }}</td>
    </tr>
    <tr>
        <td><strong>Tax:</strong></td>
        <td style='text-align: right;'>{{ receipt.tax | format_currency }}</td>
    </tr>
    <tr>
        <td><strong>TOTAL:</strong></td>
        <td style='text-align: right;'><strong>{{ receipt.total | format_currency }}</strong></td>
    </tr>
</table>

<div style='text-align: center; margin-top: 30px;'>
    <p>Thank you for your purchase!</p>
    {% if receipt.barcode %}
    <p>{{ barcode(receipt.barcode) }}</p>
    {% endif %}
</div>
"""

_TEMPLATES: Dict[str, str] = {
    "invoice": INVOICE_TEMPLATE,
    "receipt": RECEIPT_TEMPLATE,
}


def lookup_template(template_id: str) -> str:
    """Template source for ``template_id`` or ``TemplateNotFound``."""
    try:
        return _TEMPLATES[template_id]
    except KeyError:
        raise TemplateNotFound(template_id) from None


def list_templates() -> List[str]:
    return sorted(_TEMPLATES)
