"""
Генерация PDF чека по заказу
"""
import io
import logging
import os

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

logger = logging.getLogger(__name__)

_FONT_NAME_REG = 'Shop-Regular'
_FONT_NAME_BOLD = 'Shop-Bold'

# TTF с кириллицей, иначе вместо букв будут квадраты
_font_candidates = [
    ('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', '/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf'),
    ('/usr/share/fonts/dejavu/DejaVuSans.ttf', '/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf'),
    (r'C:\Windows\Fonts\arial.ttf', r'C:\Windows\Fonts\arialbd.ttf'),
]


def _register_fonts():
    for regular, bold in _font_candidates:
        if not (os.path.exists(regular) and os.path.exists(bold)):
            continue
        pdfmetrics.registerFont(TTFont(_FONT_NAME_REG, regular))
        pdfmetrics.registerFont(TTFont(_FONT_NAME_BOLD, bold))
        logger.info(f"[PDF] fonts registered: regular={regular}, bold={bold}")
        return _FONT_NAME_REG, _FONT_NAME_BOLD

    # Helvetica не содержит кириллицы, но PDF всё равно соберётся
    logger.warning("[PDF] TTF fonts not found, falling back to Helvetica")
    return 'Helvetica', 'Helvetica-Bold'


_DEFAULT_TTF, _BOLD_TTF = _register_fonts()


class OrderReceiptGenerator:
    """Генератор PDF чека для заказа"""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            'ReceiptTitle',
            parent=self.styles['Heading1'],
            fontName=_BOLD_TTF,
            fontSize=22,
            textColor=colors.HexColor('#5a3e1b'),
            spaceAfter=20,
            alignment=1  # Center
        )
        self.heading_style = ParagraphStyle(
            'ReceiptHeading',
            parent=self.styles['Heading2'],
            fontName=_BOLD_TTF,
            fontSize=14,
            textColor=colors.HexColor('#7a5a2f'),
            spaceAfter=10,
            spaceBefore=10
        )
        self.text_style = ParagraphStyle(
            'ReceiptText',
            parent=self.styles['Normal'],
            fontName=_DEFAULT_TTF,
            fontSize=10,
            leading=12,
        )

    def _p(self, text):
        return Paragraph(str(text), self.text_style)

    def generate(self, order):
        """Возвращает bytes готового PDF"""
        buffer = io.BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=0.5*inch,
            leftMargin=0.5*inch,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch,
            title=f"Order {order.order_id}",
        )

        elements = [
            Paragraph(f"Чек по заказу #{order.order_id}", self.title_style),
            Spacer(1, 0.2*inch),
        ]

        info_data = [
            [self._p('Номер заказа:'), self._p(order.order_id)],
            [self._p('Дата:'), self._p(order.order_date.strftime('%d.%m.%Y %H:%M'))],
            [self._p('Покупатель:'), self._p(order.user.username)],
            [self._p('Email:'), self._p(order.user.email)],
            [self._p('Телефон:'), self._p(order.user.phone_number or 'Не указан')],
        ]
        info_table = Table(info_data, colWidths=[2*inch, 4*inch])
        info_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#f3ece2')),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ('GRID', (0, 0), (-1, -1), 1, colors.grey),
        ]))
        elements.append(info_table)
        elements.append(Spacer(1, 0.3*inch))

        elements.append(Paragraph("Состав заказа", self.heading_style))
        items_data = [[self._p('Товар'), self._p('Опция'), self._p('Кол-во'), self._p('Сумма')]]
        for item in order.items.all():
            items_data.append([
                self._p(item.option.product.product_name),
                self._p(item.option.option_name),
                self._p(item.quantity),
                self._p(f'{item.price} ₽'),
            ])
        items_data.append(['', '', self._p('Итого:'), self._p(f'{order.total_price} ₽')])

        items_table = Table(items_data, colWidths=[2.6*inch, 2*inch, 0.9*inch, 1.3*inch])
        items_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#7a5a2f')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (2, 0), (-1, -1), 'RIGHT'),
            ('GRID', (0, 0), (-1, -2), 1, colors.grey),
            ('LINEABOVE', (0, -1), (-1, -1), 1.5, colors.black),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ]))
        elements.append(items_table)

        doc.build(elements)
        pdf = buffer.getvalue()
        buffer.close()

        logger.info(f"[PDF] Чек для заказа {order.order_id}: {len(pdf)} байт")
        return pdf
