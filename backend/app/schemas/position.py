from pydantic import BaseModel, Field


class PositionCreate(BaseModel):
    tournament_id: str
    team_id: str
    position: int = Field(..., ge=1)


class PositionUpdate(BaseModel):
    position: int = Field(..., ge=1)


class PositionResponse(BaseModel):
    id: str
    tournament_id: str
    team_id: str
    position: int
    points: float

    model_config = {"from_attributes": True}
