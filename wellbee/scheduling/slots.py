"""
Candidate appointment slots derived from a doctor's working hours.

Slots are fixed-width, start exactly at the working-hours start and must fit
entirely before the working-hours end; a trailing partial slot is dropped.
Day-of-week filtering belongs to the availability validator, not here.
"""
from datetime import date
from typing import Iterable, Iterator, List, Optional

from wellbee.core.config import settings
from wellbee.schemas.common import TimeSlot

DEFAULT_GRANULARITY_MINUTES = 15


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def to_hhmm(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def generate_slots(
    working_hours_start: str,
    working_hours_end: str,
    granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES,
) -> Iterator[TimeSlot]:
    if granularity_minutes <= 0:
        raise ValueError("granularity_minutes must be positive")
    current = to_minutes(working_hours_start)
    end = to_minutes(working_hours_end)
    while current + granularity_minutes <= end:
        yield TimeSlot(start=to_hhmm(current), end=to_hhmm(current + granularity_minutes))
        current += granularity_minutes


class SlotCalculator:
    def __init__(self, granularity_minutes: Optional[int] = None):
        self.granularity_minutes = granularity_minutes or settings.SLOT_GRANULARITY_MINUTES

    def slots_for(self, doctor, day: Optional[date] = None) -> Iterator[TimeSlot]:
        # The date does not change the result; weekday rules live in AvailabilityValidator
        return generate_slots(doctor.working_hours_start, doctor.working_hours_end, self.granularity_minutes)

    def open_slots(self, doctor, day: date, booked_starts: Iterable[str]) -> List[TimeSlot]:
        taken = set(booked_starts)
        return [slot for slot in self.slots_for(doctor, day) if slot.start not in taken]
