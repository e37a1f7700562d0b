"""
Paginated invoice renderer (ReportLab canvas).

Positions are expressed top-down from the page's top edge, the way the layout
was designed, and converted to PDF coordinates only when drawing.
"""
import io
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from motoshop.services.invoice_pdf.image_resolver import ImageResolver, split_refs
from motoshop.services.invoice_pdf.models import RenderedDocument, ServiceRow
from motoshop.services.invoice_pdf.utils.date_format import localize_date

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

# service blocks
DESC_WIDTH = 360
DESC_LEADING = 12
LINE_BLOCK = 34
PAGE_BREAK_Y = 700
DESC_BOTTOM_LIMIT = 770
LIST_TOP_Y = 220

# image grid
IMAGE_WIDTH = 240
IMAGE_HEIGHT = 140
IMAGES_PER_ROW = 2
IMAGE_SPACING = 20
IMAGE_ROW_GAP = 12
IMAGE_BOTTOM_LIMIT = 780

# footer
FOOTER_TAGLINE_Y = 780
FOOTER_PAGE_Y = 792

TOTALS_HEIGHT = 30

GREY_BACKDROP = colors.HexColor('#dddddd')
DIVIDER = colors.HexColor('#eeeeee')
MUTED = colors.HexColor('#555555')
DATE_GREY = colors.HexColor('#444444')
FOOTER_GREY = colors.HexColor('#777777')


def _baseline(y, size):
    """Top-down text top -> PDF baseline."""
    return PAGE_HEIGHT - y - size * 0.8


def _money(amount: Decimal) -> str:
    return f"$ {amount:.2f}"


class NumberedCanvas(canvas.Canvas):
    """Canvas that buffers pages and stamps 'Página X de N' on save"""

    def __init__(self, *args, tagline='', **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []
        self.tagline = tagline
        self.page_count = 0

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        num_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_page_footer(num_pages)
            canvas.Canvas.showPage(self)
        self.page_count = num_pages
        canvas.Canvas.save(self)

    def draw_page_footer(self, page_count):
        self.saveState()
        self.setFont('Helvetica', 8)
        self.setFillColor(FOOTER_GREY)
        center = MARGIN + CONTENT_WIDTH / 2.0
        if self.tagline:
            self.drawCentredString(center, _baseline(FOOTER_TAGLINE_Y, 8), self.tagline)
        self.drawCentredString(center, _baseline(FOOTER_PAGE_Y, 8),
                               f"Página {self._pageNumber} de {page_count}")
        self.restoreState()


class DocumentLayoutEngine:
    def __init__(self, shop_name: str, tagline: str = '', logo_path: Optional[str] = None,
                 image_resolver: Optional[ImageResolver] = None):
        self.shop_name = shop_name
        self.tagline = tagline
        self.logo_path = logo_path
        self.image_resolver = image_resolver

    def render(self, rows: Sequence[ServiceRow], today: Optional[date] = None,
               invoice_id: Optional[str] = None) -> RenderedDocument:
        """
        Lay out the invoice for ``rows`` (already in billing order) and return
        the PDF bytes with page count, grand total and per-service image counts.

        Client and moto details come from the first row.
        """
        if not rows:
            raise ValueError("Cannot render an invoice without services")
        today = today or date.today()

        buffer = io.BytesIO()
        c = NumberedCanvas(buffer, pagesize=A4, tagline=self.tagline)
        c.setTitle(f"{self.shop_name} - {invoice_id}" if invoice_id else self.shop_name)
        c.setAuthor(self.shop_name)

        self._draw_header(c, today, invoice_id)
        self._draw_parties(c, rows[0])

        y = LIST_TOP_Y
        self._text(c, MARGIN, y - 14, 'Detalle de servicios', 'Helvetica-Bold', 12)

        grand_total = Decimal('0')
        images_drawn: List[int] = []
        slots: List[tuple] = []
        for idx, row in enumerate(rows):
            grand_total += row.cost
            y = self._draw_service(c, idx, row, y)

            if y > PAGE_BREAK_Y and idx < len(rows) - 1:
                y = self._new_page(c)

            drawn, y = self._draw_images(c, row, y, slots)
            images_drawn.append(drawn)

        self._draw_totals(c, grand_total, y)

        c.showPage()
        c.save()

        return RenderedDocument(
            content=buffer.getvalue(),
            page_count=c.page_count,
            total=grand_total,
            images_drawn=images_drawn,
            image_slots=slots,
        )

    def _text(self, c, x, y, text, font='Helvetica', size=10, color=colors.black):
        c.setFont(font, size)
        c.setFillColor(color)
        c.drawString(x, _baseline(y, size), text)

    def _new_page(self, c):
        c.showPage()
        return MARGIN

    def _draw_header(self, c, today, invoice_id):
        if self.logo_path:
            try:
                logo = ImageReader(self.logo_path)
                iw, ih = logo.getSize()
                width = 100
                height = width * ih / float(iw)
                c.saveState()
                c.setFillColor(GREY_BACKDROP)
                c.rect(50, PAGE_HEIGHT - 45 - 72, 120, 72, stroke=0, fill=1)
                c.drawImage(logo, 60, PAGE_HEIGHT - 55 - height, width=width, height=height, mask='auto')
                c.restoreState()
            except Exception as e:
                logger.warning(f"Logo draw failed: {e}")

        self._text(c, 190, 55, self.shop_name, 'Helvetica-Bold', 20)
        self._text(c, 190, 80, f"Fecha: {localize_date(today)}")
        if invoice_id:
            self._text(c, 190, 95, f"Factura: {invoice_id}", size=9, color=MUTED)

        c.setStrokeColor(DIVIDER)
        c.line(MARGIN, PAGE_HEIGHT - 125, PAGE_WIDTH - MARGIN, PAGE_HEIGHT - 125)

    def _draw_parties(self, c, first: ServiceRow):
        self._text(c, 50, 135, 'Cliente:', 'Helvetica-Bold', 11)
        self._text(c, 50, 152, first.client_name or '-')
        self._text(c, 50, 168, f"Teléfono: {first.phone or '-'}", size=9, color=MUTED)
        self._text(c, 50, 182, f"Dirección: {first.address or '-'}", size=9, color=MUTED)

        self._text(c, 360, 135, 'Moto:', 'Helvetica-Bold', 11)
        self._text(c, 360, 152, f"{first.brand or '-'} {first.model or '-'}")
        self._text(c, 360, 168, f"Placa: {first.plate or '-'}", size=9, color=MUTED)

    def _draw_service(self, c, idx, row: ServiceRow, y):
        lines = simpleSplit(f"{idx + 1}. {row.description or '-'}", 'Helvetica', 10, DESC_WIDTH)
        top = y
        start_page = c.getPageNumber()

        self._text(c, 420, top, f"Fecha: {localize_date(row.date)}", size=9, color=DATE_GREY)
        self._text(c, 420, top + 14, f"Precio: {_money(row.cost)}")

        # long descriptions continue on the next page
        for line in lines:
            if y + DESC_LEADING > DESC_BOTTOM_LIMIT:
                y = self._new_page(c)
            self._text(c, MARGIN, y, line)
            y += DESC_LEADING

        if c.getPageNumber() != start_page:
            return y + 10
        return max(top + LINE_BLOCK, y + 10)

    def _load_images(self, row: ServiceRow) -> List[ImageReader]:
        refs = split_refs(row.image_path)
        if not refs or self.image_resolver is None:
            return []
        readers = []
        for ref, data in zip(refs, self.image_resolver.resolve_all(refs)):
            if not data:
                continue
            try:
                reader = ImageReader(io.BytesIO(data))
                reader.getSize()
            except Exception as e:
                logger.warning(f"Skipping unreadable image {ref} for service {row.service_id}: {e}")
                continue
            readers.append(reader)
        return readers

    def _draw_images(self, c, row: ServiceRow, y, slots):
        """Two-column grid below the service block; failed images leave no gap."""
        col = 0
        drawn = 0
        for reader in self._load_images(row):
            if col == 0 and y + IMAGE_HEIGHT + 20 > IMAGE_BOTTOM_LIMIT:
                y = self._new_page(c)
            x = MARGIN + col * (IMAGE_WIDTH + IMAGE_SPACING)
            try:
                c.drawImage(reader, x, PAGE_HEIGHT - y - IMAGE_HEIGHT,
                            width=IMAGE_WIDTH, height=IMAGE_HEIGHT, mask='auto')
                drawn += 1
                slots.append((row.service_id, c.getPageNumber(), x, y))
            except Exception as e:
                logger.warning(f"Draw grid image failed for service {row.service_id}: {e}")
            col += 1
            if col >= IMAGES_PER_ROW:
                col = 0
                y += IMAGE_HEIGHT + IMAGE_ROW_GAP
        if col != 0:
            y += IMAGE_HEIGHT + IMAGE_ROW_GAP
        return drawn, y

    def _draw_totals(self, c, grand_total, y):
        if y + TOTALS_HEIGHT > FOOTER_TAGLINE_Y - 10:
            y = self._new_page(c)
        c.setStrokeColor(GREY_BACKDROP)
        c.line(360, PAGE_HEIGHT - (y + 4), PAGE_WIDTH - MARGIN, PAGE_HEIGHT - (y + 4))
        self._text(c, 360, y + 12, 'Total:', 'Helvetica-Bold', 12)
        self._text(c, 450, y + 8, _money(grand_total), 'Helvetica-Bold', 16)
