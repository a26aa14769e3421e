from typing import Literal, Optional

from pydantic import (
    AliasGenerator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

Tier = Literal["CE1", "CE2", "REGIONAL"]

# Unknown keys are rejected; camelCase names (ce1Points, temporalWeights, ...)
# are accepted on input, output always uses the field names.
CONFIG_INPUT = ConfigDict(
    extra="forbid",
    populate_by_name=True,
    alias_generator=AliasGenerator(validation_alias=to_camel),
)

# FEDV points tables, position -> points
DEFAULT_CE1_POINTS = {
    1: 1000,
    2: 850,
    3: 725,
    4: 625,
    5: 520,
    6: 450,
    7: 380,
    8: 320,
    9: 270,
    10: 230,
    11: 195,
    12: 165,
    13: 140,
    14: 120,
    15: 105,
    16: 90,
    17: 75,
    18: 65,
    19: 55,
    20: 46,
    21: 39,
    22: 34,
    23: 30,
    24: 27,
}

DEFAULT_CE2_POINTS = {
    1: 230,
    2: 195,
    3: 165,
    4: 140,
    5: 120,
    6: 103,
    7: 86,
    8: 74,
    9: 63,
    10: 54,
    11: 46,
    12: 39,
    13: 34,
    14: 29,
    15: 25,
    16: 21,
    17: 18,
    18: 15,
    19: 13,
    20: 11,
    21: 9,
    22: 8,
    23: 7,
    24: 6,
}

DEFAULT_REGIONAL_POINTS = {
    1: 140,
    2: 120,
    3: 100,
    4: 85,
    5: 72,
    6: 60,
    7: 50,
    8: 42,
    9: 35,
    10: 30,
    11: 25,
    12: 21,
    13: 18,
    14: 15,
    15: 13,
    16: 11,
    17: 9,
    18: 8,
    19: 7,
    20: 6,
    21: 5,
    22: 4,
    23: 3,
    24: 2,
}

# Years before the current season -> multiplier
DEFAULT_TEMPORAL_WEIGHTS = {
    0: 1.0,
    1: 0.8,
    2: 0.5,
    3: 0.2,
}


def _check_points_table(table: dict[int, int]) -> dict[int, int]:
    if not table:
        raise ValueError("points table must not be empty")

    previous = None
    for position in sorted(table):
        points = table[position]
        if position < 1:
            raise ValueError(f"position {position} must be >= 1")
        if points <= 0:
            raise ValueError(f"points for position {position} must be > 0")
        if previous is not None and points >= previous:
            raise ValueError(
                f"points must strictly decrease with position (position {position})"
            )
        previous = points

    return table


class RegionalCoefficientConfig(BaseModel):
    """Clamped linear map from a region's aggregate points to its multiplier."""

    floor: float = Field(0.8, gt=0)
    ceiling: float = Field(1.2, gt=0)
    increment: float = Field(0.01, gt=0)

    model_config = ConfigDict(frozen=True, **CONFIG_INPUT)

    @model_validator(mode="after")
    def check_bounds(self) -> "RegionalCoefficientConfig":
        if self.floor >= self.ceiling:
            raise ValueError("floor must be lower than ceiling")
        return self


class RankingConfig(BaseModel):
    """
    Full configuration snapshot for one ranking computation.

    Administrators may replace any of the tables; the defaults are the
    official FEDV values. Freezing blocks field reassignment only: the
    tables are plain dicts and must not be mutated in place. Changes go
    through `merge_ranking_config`, which re-validates.
    """

    ce1_points: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_CE1_POINTS))
    ce2_points: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_CE2_POINTS))
    regional_points: dict[int, int] = Field(
        default_factory=lambda: dict(DEFAULT_REGIONAL_POINTS)
    )
    temporal_weights: dict[int, float] = Field(
        default_factory=lambda: dict(DEFAULT_TEMPORAL_WEIGHTS)
    )
    regional_coefficient: RegionalCoefficientConfig = Field(
        default_factory=RegionalCoefficientConfig
    )

    model_config = ConfigDict(frozen=True, **CONFIG_INPUT)

    @field_validator("ce1_points", "ce2_points", "regional_points")
    @classmethod
    def check_points_table(cls, value: dict[int, int]) -> dict[int, int]:
        return _check_points_table(value)

    @field_validator("temporal_weights")
    @classmethod
    def check_temporal_weights(cls, value: dict[int, float]) -> dict[int, float]:
        previous = None
        for offset in sorted(value):
            weight = value[offset]
            if offset < 0:
                raise ValueError(f"year offset {offset} must be >= 0")
            if not 0 <= weight <= 1:
                raise ValueError("temporal weights must be between 0 and 1")
            if previous is not None and weight > previous:
                raise ValueError("temporal weights must not increase with age")
            previous = weight
        return value


class RankingConfigUpdate(BaseModel):
    """Partial update; omitted sections keep their current value."""

    ce1_points: Optional[dict[int, int]] = None
    ce2_points: Optional[dict[int, int]] = None
    regional_points: Optional[dict[int, int]] = None
    temporal_weights: Optional[dict[int, float]] = None
    regional_coefficient: Optional[RegionalCoefficientConfig] = None

    model_config = CONFIG_INPUT


class ConfigValidationReport(BaseModel):
    is_valid: bool
    errors: list[str] = []
    warnings: list[str] = []
    message: str


class ConfigBackup(BaseModel):
    timestamp: str
    configuration: Optional[RankingConfig] = None
    version: str = "1.0.0"


class ConfigRestore(BaseModel):
    configuration: RankingConfig
