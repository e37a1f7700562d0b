"""
Render request: which service rows go into one invoice document.

Exactly one of three variants; the HTTP body is converted into one of them at
the API boundary (see motoshop.schemas.render_request_schema).
"""

from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field


class BySingleService(BaseModel):
    model_config = ConfigDict(frozen=True)
    service_id: int = Field(gt=0)


class ByMoto(BaseModel):
    model_config = ConfigDict(frozen=True)
    moto_id: int = Field(gt=0)


class ByServiceList(BaseModel):
    model_config = ConfigDict(frozen=True)
    service_ids: List[int] = Field(min_length=1)


RenderRequest = Union[BySingleService, ByMoto, ByServiceList]
