from flask import Blueprint, request, jsonify, send_file, url_for
from marshmallow import ValidationError
from motoshop.services.invoice_service import InvoiceService
from motoshop.services.errors import PersistenceFailure, RenderFailure, ServiceError
from motoshop.schemas.render_request_schema import RenderRequestSchema
from motoshop.schemas.invoice_line_schema import InvoiceLineSchema
from motoshop.extensions import db, limiter
import logging

invoice_bp = Blueprint('invoice', __name__)
render_request_schema = RenderRequestSchema()
line_schema_many = InvoiceLineSchema(many=True, session=db.session)


def _first_message(messages):
    """Flatten marshmallow's nested error messages into one line."""
    if isinstance(messages, dict):
        parts = []
        for field, value in messages.items():
            text = _first_message(value)
            parts.append(text if field == '_schema' else f"{field}: {text}")
        return '; '.join(parts)
    if isinstance(messages, list):
        return ', '.join(_first_message(m) for m in messages)
    return str(messages)


@invoice_bp.route('/invoices', methods=['POST'])
@limiter.limit("30 per minute")
def create_invoice():
    """Render one PDF for the selected services and bill each of them."""
    payload = request.get_json(silent=True)
    logging.info(f"POST /invoices called with body: {payload}")
    try:
        render_request = render_request_schema.load(payload if payload is not None else {})
    except ValidationError as err:
        return jsonify({'error': _first_message(err.messages), 'details': err.messages}), 400

    try:
        invoice = InvoiceService.generate(render_request)
    except PersistenceFailure as pf:
        body = {'error': pf.message, 'detail': pf.detail, 'document': pf.document}
        if pf.document:
            body['download_url'] = url_for('invoice.download_document', filename=pf.document)
        return jsonify(body), pf.status_code
    except RenderFailure as rf:
        return jsonify({'error': rf.message, 'detail': rf.detail}), rf.status_code
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in create_invoice: {e}", exc_info=True)
        return jsonify({'error': 'error generating invoice', 'detail': str(e)}), 500

    response = send_file(
        invoice.path,
        mimetype='application/pdf',
        as_attachment=True,
        download_name=invoice.name,
    )
    response.headers['X-Invoice-Document'] = invoice.name
    response.headers['X-Invoice-Total'] = invoice.document.total_display
    response.headers['X-Invoice-Pages'] = str(invoice.document.page_count)
    response.headers['X-Invoice-Lines'] = str(invoice.lines_written)
    return response


@invoice_bp.route('/invoices', methods=['GET'])
def list_invoice_lines():
    try:
        lines = InvoiceService.get_all(document=request.args.get('document'))
        return jsonify(line_schema_many.dump(lines)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in list_invoice_lines: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500


@invoice_bp.route('/invoices/documents/<filename>', methods=['GET'])
def download_document(filename):
    try:
        path = InvoiceService.document_path(filename)
        return send_file(path, mimetype='application/pdf', as_attachment=True, download_name=filename)
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in download_document: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500
