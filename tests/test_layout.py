"""
Tests for the invoice layout engine
"""
import io
from datetime import date
from decimal import Decimal

import pytest
from PIL import Image
from reportlab.lib.utils import simpleSplit

from motoshop.services.invoice_pdf.layout import (
    DocumentLayoutEngine,
    DESC_WIDTH,
    IMAGE_SPACING,
    IMAGE_WIDTH,
    MARGIN,
    PAGE_HEIGHT,
)
from motoshop.services.invoice_pdf.models import ServiceRow


def png_bytes(color='red', size=(8, 6)):
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format='PNG')
    return buffer.getvalue()


class DictResolver:
    """Resolver stand-in: reference -> bytes from a dict, missing -> None."""

    def __init__(self, images):
        self.images = images

    def resolve_all(self, refs):
        return [self.images.get(ref) for ref in refs]


def make_row(service_id, cost='10.00', description='Cambio de aceite', image_path=None):
    return ServiceRow(
        service_id=service_id,
        moto_id=7,
        description=description,
        date='2024-01-06',
        cost=cost,
        image_path=image_path,
        brand='Yamaha',
        model='FZ',
        plate='ABC12D',
        client_name='Ana Moreira',
        phone='3001234567',
        address='Calle 1 # 2-3',
    )


@pytest.fixture
def engine():
    return DocumentLayoutEngine(
        shop_name='Taller de Motos Moreira Racing',
        tagline='Gracias por confiar en nosotros',
        image_resolver=DictResolver({
            'a.png': png_bytes('red'),
            'c.png': png_bytes('blue'),
            'broken.png': b'this is not an image',
        }),
    )


class TestDocumentLayoutEngine:

    def test_total_is_sum_of_costs(self, engine):
        rows = [make_row(5, '120.50'), make_row(9, '45.00')]
        document = engine.render(rows, today=date(2024, 1, 6), invoice_id='historial.pdf')
        assert document.content.startswith(b'%PDF')
        assert document.total == Decimal('165.50')
        assert document.total_display == '$ 165.50'
        assert document.page_count == 1

    def test_no_rows_is_an_error(self, engine):
        with pytest.raises(ValueError):
            engine.render([])

    def test_failed_image_takes_no_slot(self, engine):
        """Images 1 and 3 sit side by side when image 2 cannot be resolved"""
        rows = [make_row(1, image_path='a.png, https://bad.example.com/b.png ,c.png')]
        document = engine.render(rows, today=date(2024, 1, 6))
        assert document.images_drawn == [2]
        (sid1, page1, x1, top1), (sid2, page2, x2, top2) = document.image_slots
        assert (sid1, sid2) == (1, 1)
        assert page1 == page2 == 1
        assert top1 == top2
        assert x1 == MARGIN
        assert x2 == MARGIN + IMAGE_WIDTH + IMAGE_SPACING

    def test_unreadable_image_bytes_are_skipped(self, engine):
        rows = [make_row(1, image_path='broken.png,a.png')]
        document = engine.render(rows)
        assert document.images_drawn == [1]
        assert document.image_slots[0][2] == MARGIN

    def test_service_list_paginates(self, engine):
        assert engine.render([make_row(i) for i in range(1, 15)]).page_count == 1
        assert engine.render([make_row(i) for i in range(1, 21)]).page_count == 2

    def test_image_grid_breaks_page_before_new_row(self, engine):
        refs = ','.join(['a.png'] * 8)
        document = engine.render([make_row(1, image_path=refs)])
        assert document.images_drawn == [8]
        assert document.page_count == 2
        pages = [slot[1] for slot in document.image_slots]
        assert pages == [1, 1, 1, 1, 1, 1, 2, 2]
        assert document.image_slots[6][3] == MARGIN

    def test_long_description_wraps(self, engine):
        long_text = 'Revisión completa de frenos, cambio de pastillas y purga del sistema. ' * 6
        document = engine.render([make_row(1, description=long_text), make_row(2)])
        assert document.page_count == 1
        assert document.total == Decimal('20.00')

    def test_logo_is_optional_and_failure_tolerant(self, tmp_path):
        logo = tmp_path / 'logo.png'
        logo.write_bytes(png_bytes('white', (200, 120)))
        with_logo = DocumentLayoutEngine('Shop', logo_path=str(logo)).render([make_row(1)])
        broken = tmp_path / 'broken.png'
        broken.write_bytes(b'nope')
        with_broken = DocumentLayoutEngine('Shop', logo_path=str(broken)).render([make_row(1)])
        assert with_logo.page_count == 1
        assert with_broken.page_count == 1


class RecordingEngine(DocumentLayoutEngine):
    """Keeps every text call as (page, pdf baseline, text)."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.drawn = []

    def _text(self, c, x, y, text, font='Helvetica', size=10, **kwargs):
        self.drawn.append((c.getPageNumber(), PAGE_HEIGHT - y - size * 0.8, text))
        return super()._text(c, x, y, text, font, size, **kwargs)


class TestPageFlow:

    def test_very_long_description_flows_onto_new_pages(self):
        description = ' '.join(['reparación'] * 1200)
        engine = RecordingEngine('Shop')
        document = engine.render([make_row(1, description=description), make_row(2)])

        expected = simpleSplit(f"1. {description}", 'Helvetica', 10, DESC_WIDTH)
        drawn = [(page, baseline) for page, baseline, text in engine.drawn if text in expected]
        assert len(drawn) == len(expected)
        # every line stays above the footer band
        assert all(baseline > PAGE_HEIGHT - 780 for _, baseline in drawn)
        assert document.page_count >= 3

        # the following service starts below the last description line
        second = [entry for entry in engine.drawn if entry[2].startswith('2. ')]
        assert second and second[0][0] >= drawn[-1][0]
        assert all(baseline > 0 for _, baseline, _ in engine.drawn)

    def test_last_service_past_break_line_adds_no_page(self, engine):
        # 15 one-line services leave the cursor at 730, beyond the 700 break line
        document = engine.render([make_row(i) for i in range(1, 16)])
        assert document.page_count == 1
        assert document.total == Decimal('150.00')

    def test_break_when_more_services_follow(self, engine):
        document = engine.render([make_row(i) for i in range(1, 17)])
        assert document.page_count == 2

    def test_renders_do_not_share_image_slots(self, engine):
        first = engine.render([make_row(1, image_path='a.png')])
        second = engine.render([make_row(2, image_path='a.png,c.png')])
        assert [slot[0] for slot in first.image_slots] == [1]
        assert [slot[0] for slot in second.image_slots] == [2, 2]
