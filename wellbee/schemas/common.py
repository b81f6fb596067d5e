import re
from pydantic import BaseModel, field_validator, model_validator
from pydantic.alias_generators import to_camel

HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class CamelModel(BaseModel):
    """Wire models use camelCase keys; Python code uses snake_case."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class TimeSlot(CamelModel):
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def zero_padded_hhmm(cls, v: str) -> str:
        if not HHMM_RE.match(v):
            raise ValueError("time must be a zero-padded HH:MM string")
        return v

    @model_validator(mode="after")
    def start_before_end(self) -> "TimeSlot":
        if self.start >= self.end:
            raise ValueError("slot start must be before slot end")
        return self


class WorkingHours(TimeSlot):
    pass
