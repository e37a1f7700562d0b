from motoshop.models.client import Client
from motoshop.models.moto import Moto
from motoshop.models.service_record import ServiceRecord
from motoshop.models.invoice_line import InvoiceLine

__all__ = ['Client', 'Moto', 'ServiceRecord', 'InvoiceLine']
