import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional

from flask import current_app

from motoshop.database import DataGateway
from motoshop.models.invoice_line import InvoiceLine
from motoshop.services.errors import (
    InvalidRequest, NotFound, PersistenceFailure, RenderFailure, ServiceError,
)
from motoshop.services.invoice_pdf.document_store import DocumentStore
from motoshop.services.invoice_pdf.image_resolver import ImageResolver
from motoshop.services.invoice_pdf.layout import DocumentLayoutEngine
from motoshop.services.invoice_pdf.models import (
    ByMoto, ByServiceList, BySingleService, RenderedDocument, ServiceRow,
)
from motoshop.services.invoice_pdf.utils.logo_path import Logo
from motoshop.utils.timezone_utils import display_today

logger = logging.getLogger(__name__)

# inner joins: services without a moto, or motos without a client, are never billed
SERVICE_ROWS_SQL = """
    SELECT s.id AS service_id, s.moto_id, s.description, s.date, s.cost, s.image_path,
           m.brand, m.model, m.plate,
           c.name AS client_name, c.phone, c.address
    FROM service s
    JOIN moto m ON s.moto_id = m.id
    JOIN client c ON m.client_id = c.id
    WHERE {where}
    ORDER BY s.id
"""

INSERT_LINE_SQL = (
    "INSERT INTO invoice_line (service_id, date, amount, document_path) "
    "VALUES (:service_id, :date, :amount, :document_path)"
)


@dataclass
class GeneratedInvoice:
    name: str
    path: Path
    document: RenderedDocument
    rows: List[ServiceRow]
    lines_written: int


class InvoiceLedger:
    """Appends one invoice line per billed service, each insert committed on its own."""

    def __init__(self, gateway: Optional[DataGateway] = None):
        self.gateway = gateway or DataGateway()

    def record(self, rows: List[ServiceRow], billed_on: date, document_path: str) -> int:
        written = 0
        for row in rows:
            try:
                self.gateway.execute(INSERT_LINE_SQL, {
                    'service_id': row.service_id,
                    'date': billed_on.isoformat(),
                    'amount': str(row.cost),
                    'document_path': document_path,
                })
            except Exception as e:
                logging.error(
                    f"Error saving invoice line for service {row.service_id} "
                    f"({written} of {len(rows)} saved): {e}", exc_info=True)
                raise PersistenceFailure(
                    "error saving invoice records", detail=str(e), inserted=written)
            written += 1
        return written


class InvoiceService:
    @staticmethod
    def resolve_services(render_request, gateway: Optional[DataGateway] = None) -> List[ServiceRow]:
        gateway = gateway or DataGateway()
        if isinstance(render_request, BySingleService):
            where, params = "s.id = :service_id", {'service_id': render_request.service_id}
        elif isinstance(render_request, ByMoto):
            where, params = "m.id = :moto_id", {'moto_id': render_request.moto_id}
        elif isinstance(render_request, ByServiceList):
            placeholders, params = DataGateway.in_clause('service_id', render_request.service_ids)
            where = f"s.id IN ({placeholders})"
        else:
            raise InvalidRequest('Provide serviceId or motoId or serviceIds')

        try:
            rows = gateway.query(SERVICE_ROWS_SQL.format(where=where), params)
        except Exception as e:
            logging.error(f"Error fetching services for invoice: {e}", exc_info=True)
            raise ServiceError("Could not fetch services. Please try again later.", status_code=500)

        logger.info(f"Found services for invoice: {len(rows)}")
        return [ServiceRow(**row) for row in rows]

    @staticmethod
    def build_engine(app=None) -> DocumentLayoutEngine:
        app = app or current_app
        return DocumentLayoutEngine(
            shop_name=app.config['SHOP_NAME'],
            tagline=app.config.get('SHOP_TAGLINE', ''),
            logo_path=Logo.safe_logo_path(app.config.get('LOGO_PATH')),
            image_resolver=ImageResolver.from_app(app),
        )

    @staticmethod
    def generate(render_request, gateway: Optional[DataGateway] = None,
                 store: Optional[DocumentStore] = None,
                 engine: Optional[DocumentLayoutEngine] = None,
                 today: Optional[date] = None) -> GeneratedInvoice:
        """
        Resolve the requested services, render and store one document, then
        write one invoice line per service pointing at it.

        Raises NotFound when nothing matches (no document, no lines),
        RenderFailure when the document cannot be produced or stored, and
        PersistenceFailure (carrying the stored document name) when the
        ledger write fails part-way.
        """
        gateway = gateway or DataGateway()
        rows = InvoiceService.resolve_services(render_request, gateway)
        if not rows:
            raise NotFound('service(s) not found')

        store = store or DocumentStore.from_app()
        engine = engine or InvoiceService.build_engine()
        today = today or display_today()

        try:
            name = store.reserve()
        except OSError as e:
            logging.error(f"Could not reserve invoice filename: {e}", exc_info=True)
            raise RenderFailure("error generating pdf", detail=str(e))

        try:
            document = engine.render(rows, today=today, invoice_id=name)
            path = store.write(name, document.content)
        except Exception as e:
            logging.error(f"Error generating invoice document {name}: {e}", exc_info=True)
            store.discard(name)
            raise RenderFailure("error generating pdf", detail=str(e))

        logger.info(
            f"Invoice {name}: {len(rows)} service(s), {document.page_count} page(s), "
            f"total {document.total_display}")

        try:
            written = InvoiceLedger(gateway).record(rows, today, str(path))
        except PersistenceFailure as pf:
            pf.document = name
            raise

        return GeneratedInvoice(name=name, path=path, document=document, rows=rows,
                                lines_written=written)

    @staticmethod
    def get_all(document: Optional[str] = None):
        try:
            query = InvoiceLine.query
            if document:
                query = query.filter(InvoiceLine.document_path.like(f"%/{document}"))
            return query.order_by(InvoiceLine.id.desc()).all()
        except Exception as e:
            logging.error(f"Error fetching invoice lines: {e}", exc_info=True)
            raise ServiceError("Could not fetch invoices. Please try again later.", status_code=500)

    @staticmethod
    def document_path(name: str, store: Optional[DocumentStore] = None) -> Path:
        store = store or DocumentStore.from_app()
        path = store.path_for(name)
        if path is None or not path.is_file():
            raise NotFound('document not found')
        return path
