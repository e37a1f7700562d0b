"""
Data models for the invoice document pipeline
"""

from .render_request import BySingleService, ByMoto, ByServiceList, RenderRequest
from .service_row import ServiceRow
from .rendered_document import RenderedDocument

__all__ = ["BySingleService", "ByMoto", "ByServiceList", "RenderRequest", "ServiceRow", "RenderedDocument"]
