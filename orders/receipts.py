import io

from django.conf import settings
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


def build_receipt(order):
    """Render a PDF receipt for ``order`` and return it as a rewound buffer."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=30,
        leftMargin=30,
        topMargin=30,
        bottomMargin=18
    )

    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'ReceiptTitle',
        fontName='Helvetica-Bold',
        fontSize=20,
        leading=24,
        alignment=1,  # 0=left, 1=center
        textColor=colors.red,
    )
    elements.append(Paragraph("Payment Receipt", title_style))
    elements.append(Spacer(1, 20))

    common_style = TableStyle([
        ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 11),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ('TOPPADDING', (0, 0), (-1, -1), 4),
        ('BOX', (0, 0), (-1, -1), 0.25, colors.grey),
        ('INNERGRID', (0, 0), (-1, -1), 0.25, colors.grey),
    ])

    shipping = order.shippingAddress or {}
    order_info = [
        ['Order Number:', order.orderNumber],
        ['Date:', order.createdAt.strftime('%Y-%m-%d %H:%M')],
        ['Status:', order.get_status_display()],
        ['Payment Status:', order.get_paymentStatus_display()],
        ['Payment Reference:', order.paymentIntentId or 'N/A'],
        ['Name:', shipping.get('name', '')],
        ['Ship To:', f"{shipping.get('address', '')}, {shipping.get('city', '')}"],
    ]
    order_table = Table(order_info, hAlign='LEFT', colWidths=[140, 350])
    order_table.setStyle(common_style)

    elements.append(Paragraph("<strong>Order Details</strong>", styles['Heading3']))
    elements.append(Spacer(1, 6))
    elements.append(order_table)
    elements.append(Spacer(1, 20))

    currency = settings.CURRENCY
    item_data = [['Product', 'Quantity', 'Price', 'Subtotal']]
    for item in order.items:
        name = item['name'] if not item.get('variant') else f"{item['name']} ({item['variant']})"
        item_data.append([name, str(item['quantity']), f"{item['price']}", f"{item['lineTotal']}"])

    summary_rows = [
        ['Subtotal', '', '', f"{order.subtotal}"],
        ['Shipping', '', '', f"{order.shippingCost}"],
        ['Tax', '', '', f"{order.tax}"],
        ['Discount' + (f" ({order.couponCode})" if order.couponCode else ''), '', '', f"-{order.discount}"],
        [f'Total ({currency})', '', '', f"{order.total}"],
    ]
    item_data += summary_rows

    item_table = Table(item_data, hAlign='LEFT', colWidths=[200, 60, 70, 80])
    item_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.lightblue),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 11),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ('TOPPADDING', (0, 0), (-1, -1), 4),
        ('BOX', (0, 0), (-1, -1), 0.25, colors.grey),
        ('INNERGRID', (0, 0), (-1, -len(summary_rows) - 1), 0.25, colors.grey),
        ('BACKGROUND', (0, -1), (-1, -1), colors.lightgrey),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
    ]))

    elements.append(Paragraph("<strong>Order Items</strong>", styles['Heading3']))
    elements.append(Spacer(1, 6))
    elements.append(item_table)
    elements.append(Spacer(1, 40))
    elements.append(Paragraph("<i>Thank you for your purchase!</i>", styles['Italic']))

    doc.build(elements)
    buffer.seek(0)
    return buffer
