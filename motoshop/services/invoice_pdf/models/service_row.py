"""
Service row joined with its moto and the moto's client
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ServiceRow(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    service_id: int
    moto_id: int
    description: str = ""
    # left as delivered by the driver; the layout engine localizes it
    date: Any = None
    cost: Decimal = Decimal("0")
    image_path: Optional[str] = None

    brand: Optional[str] = None
    model: Optional[str] = None
    plate: Optional[str] = None

    client_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("cost", mode="before")
    @classmethod
    def _cost_from_db(cls, value):
        if value is None:
            return Decimal("0")
        return Decimal(str(value))

