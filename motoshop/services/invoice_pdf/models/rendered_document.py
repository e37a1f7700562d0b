"""
Rendered invoice document
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Tuple


@dataclass
class RenderedDocument:
    content: bytes
    page_count: int
    total: Decimal
    # images actually drawn per service, in row order
    images_drawn: List[int] = field(default_factory=list)
    # (service_id, page, x, top) for every placed image
    image_slots: List[Tuple[int, int, float, float]] = field(default_factory=list)

    @property
    def total_display(self) -> str:
        return f"$ {self.total:.2f}"
