"""Class routine model definitions."""

from pydantic import BaseModel, ConfigDict, StrictInt, model_validator
from pydantic.alias_generators import to_camel

from school_records.repository import Repository
from school_records.store import CollectionStore

COLLECTION = 'routines'


class RoutineRequest(BaseModel):
    """One timetable slot: a subject taught to a section by a teacher."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    section: str | None = None
    day: str | None = None
    time: str | None = None
    subject: str | None = None
    teacher_id: StrictInt | None = None

    @model_validator(mode='after')
    def validate_fields(self) -> 'RoutineRequest':
        if not all([self.section, self.day, self.time, self.subject, self.teacher_id]):
            raise ValueError('All fields are required')
        return self

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


def routines(store: CollectionStore) -> Repository:
    return Repository(store, COLLECTION, label='Routine')
