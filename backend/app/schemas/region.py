from datetime import datetime

from pydantic import BaseModel, Field


class RegionBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    code: str = Field(..., min_length=2, max_length=10)


class RegionResponse(RegionBase):
    id: str
    coefficient: float = 1.0

    model_config = {"from_attributes": True}


class CoefficientResponse(BaseModel):
    region_id: str
    year: int
    total_points: float
    coefficient: float
    recalculated_at: datetime
