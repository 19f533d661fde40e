"""Attendance model definitions."""

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictInt, model_validator
from pydantic.alias_generators import to_camel

from school_records.repository import Repository
from school_records.store import CollectionStore

COLLECTION = 'attendance'

VALID_DAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')


class AttendanceRequest(BaseModel):
    """Full replacement of one user's attendance-by-day mapping."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: StrictInt | None = None
    attendance: dict[str, Any] | None = None

    @model_validator(mode='after')
    def validate_attendance(self) -> 'AttendanceRequest':
        if not self.user_id or self.attendance is None:
            raise ValueError('userId and attendance object are required')
        for day, present in self.attendance.items():
            if day not in VALID_DAYS or not isinstance(present, bool):
                raise ValueError('Attendance must contain valid days with boolean values')
        return self


def attendance(store: CollectionStore) -> Repository:
    return Repository(store, COLLECTION, label='Attendance')
