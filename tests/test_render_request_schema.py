"""
Tests for POST /invoices body validation
"""
import pytest
from marshmallow import ValidationError

from motoshop.schemas.render_request_schema import RenderRequestSchema
from motoshop.services.invoice_pdf.models import ByMoto, ByServiceList, BySingleService

schema = RenderRequestSchema()


class TestRenderRequestSchema:

    def test_single_service(self):
        assert schema.load({'serviceId': 3}) == BySingleService(service_id=3)

    def test_moto(self):
        assert schema.load({'motoId': 7}) == ByMoto(moto_id=7)

    def test_service_list(self):
        assert schema.load({'serviceIds': [5, 9]}) == ByServiceList(service_ids=[5, 9])

    def test_priority_order(self):
        assert schema.load({'serviceIds': [1], 'motoId': 2, 'serviceId': 3}) == BySingleService(service_id=3)
        assert schema.load({'serviceIds': [1], 'motoId': 2}) == ByMoto(moto_id=2)

    def test_null_selectors_are_ignored(self):
        assert schema.load({'serviceId': None, 'motoId': 4}) == ByMoto(moto_id=4)

    def test_legacy_spanish_keys(self):
        assert schema.load({'id_servicio': 11}) == BySingleService(service_id=11)
        assert schema.load({'id_moto': 12}) == ByMoto(moto_id=12)
        assert schema.load({'id_servicios': [13, 14]}) == ByServiceList(service_ids=[13, 14])

    def test_numeric_strings_accepted(self):
        assert schema.load({'serviceId': '8'}) == BySingleService(service_id=8)

    def test_unknown_keys_ignored(self):
        assert schema.load({'motoId': 1, 'notes': 'x'}) == ByMoto(moto_id=1)

    @pytest.mark.parametrize('payload', [
        {},
        {'serviceIds': []},
        {'serviceId': None, 'motoId': None, 'serviceIds': None},
        {'serviceId': 'abc'},
        {'serviceIds': 'abc'},
        {'serviceIds': [1, 'x']},
        {'serviceId': 0},
        {'motoId': -4},
    ])
    def test_invalid_payloads(self, payload):
        with pytest.raises(ValidationError):
            schema.load(payload)

    def test_missing_selector_message(self):
        with pytest.raises(ValidationError) as exc_info:
            schema.load({})
        assert 'Provide serviceId or motoId or serviceIds' in str(exc_info.value.messages)

    def test_non_object_body(self):
        with pytest.raises(ValidationError):
            schema.load([1, 2, 3])
