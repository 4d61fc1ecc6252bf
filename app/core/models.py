import datetime
import enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.dates import is_valid_date_key


class ShiftCategory(str, enum.Enum):
    """Coarse shift classification shown in the calendar."""

    DAY = "Day"
    NIGHT = "Night"
    OFF = "Off"


class OffsetRotation(BaseModel):
    """Shared base pattern, shifted by a per-crew number of days."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["offset"] = "offset"
    base_pattern: tuple[str, ...]
    anchor: datetime.date
    offset_days: int = 0


class IndependentRotation(BaseModel):
    """Crew-specific pattern with its own anchor date."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["independent"] = "independent"
    pattern: tuple[str, ...]
    anchor: datetime.date


RotationConfig = Annotated[OffsetRotation | IndependentRotation, Field(discriminator="kind")]


class CrewConfig(BaseModel):
    """User override of a crew's rotation."""

    pattern: list[str] = Field(default_factory=list)
    anchor: datetime.date | None = None

    def has_entries(self) -> bool:
        return any(label and label.strip() for label in self.pattern)


class CustomHoliday(BaseModel):
    """Inclusive range of date keys marked as personal holidays."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _valid_key(cls, value: str) -> str:
        if not is_valid_date_key(value):
            raise ValueError(f"Invalid date key: {value!r}")
        return value

    def contains(self, key: str) -> bool:
        # Zero-padded keys sort chronologically
        return self.start <= key <= self.end


class WorkLocation(BaseModel):
    """Saved work site used by the overtime check."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    radius_meters: float = Field(default=200.0, gt=0)
    enabled: bool = True
