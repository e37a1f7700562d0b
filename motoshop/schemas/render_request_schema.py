from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, post_load
from pydantic import ValidationError as PydanticValidationError

from motoshop.services.invoice_pdf.models.render_request import BySingleService, ByMoto, ByServiceList

# keys accepted from older clients
_ALIASES = {
    'id_servicio': 'serviceId',
    'id_moto': 'motoId',
    'id_servicios': 'serviceIds',
}


class RenderRequestSchema(Schema):
    """
    POST /invoices body -> BySingleService | ByMoto | ByServiceList.

    Selectors are honored in priority order serviceId, motoId, serviceIds.
    """
    class Meta:
        unknown = EXCLUDE

    serviceId = fields.Integer(allow_none=True, strict=False)
    motoId = fields.Integer(allow_none=True, strict=False)
    serviceIds = fields.List(fields.Integer(), allow_none=True)

    @pre_load
    def apply_aliases(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for old, new in _ALIASES.items():
            if old in data and new not in data:
                data[new] = data.pop(old)
            else:
                data.pop(old, None)
        return data

    @post_load
    def to_render_request(self, data, **kwargs):
        try:
            if data.get('serviceId') is not None:
                return BySingleService(service_id=data['serviceId'])
            if data.get('motoId') is not None:
                return ByMoto(moto_id=data['motoId'])
            if data.get('serviceIds'):
                return ByServiceList(service_ids=data['serviceIds'])
        except PydanticValidationError as e:
            raise ValidationError({'selector': [err['msg'] for err in e.errors()]})
        raise ValidationError('Provide serviceId or motoId or serviceIds')
