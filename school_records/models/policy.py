"""Policy / notice model definitions."""

import os

from school_records.repository import Repository
from school_records.store import CollectionStore

COLLECTION = 'policies'

ALLOWED_EXTENSIONS = ('.pdf', '.docx')


def is_allowed_file(file_name: str | None) -> bool:
    return os.path.splitext(file_name or '')[1].lower() in ALLOWED_EXTENSIONS


def policies(store: CollectionStore) -> Repository:
    return Repository(store, COLLECTION, label='Policy')
