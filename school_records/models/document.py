"""Shared document model definitions."""

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from school_records.core.clock import isoformat, utcnow
from school_records.repository import Repository
from school_records.store import CollectionStore

COLLECTION = 'documents'


class FileRecordRequest(BaseModel):
    """Metadata for a file already stored by the upload service.

    ``file_name`` is an opaque reference; the file bytes are never opened here.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: str | None = None
    description: str | None = None

    @model_validator(mode='after')
    def validate_file_reference(self) -> 'FileRecordRequest':
        if not self.file_name or not self.file_name.strip():
            raise ValueError('No file uploaded')
        self.file_name = self.file_name.strip()
        return self

    def to_record(self, uploaded_by: int) -> dict:
        return {
            'fileName': self.file_name,
            'uploadedBy': uploaded_by,
            'uploadDate': isoformat(utcnow()),
            'description': self.description or '',
        }


def documents(store: CollectionStore) -> Repository:
    return Repository(store, COLLECTION, label='Document')
