from fastapi import APIRouter, Depends, status

from school_records.auth.dependencies import get_current_principal
from school_records.auth.policy import Action, Resource, enforce
from school_records.models.document import FileRecordRequest, documents
from school_records.models.user import Principal
from school_records.store import CollectionStore, get_store

router = APIRouter(tags=['documents'])


@router.post('', status_code=status.HTTP_201_CREATED)
def create_document(
    data: FileRecordRequest,
    principal: Principal = Depends(get_current_principal),
    store: CollectionStore = Depends(get_store),
):
    enforce(principal, Action.CREATE, Resource.DOCUMENTS)
    return documents(store).create(data.to_record(uploaded_by=principal.id))


@router.get('')
def list_documents(store: CollectionStore = Depends(get_store)):
    enforce(None, Action.READ, Resource.DOCUMENTS)
    return documents(store).find_all()


@router.get('/{document_id}')
def get_document(document_id: int, store: CollectionStore = Depends(get_store)):
    enforce(None, Action.READ, Resource.DOCUMENTS)
    return documents(store).find_by_id(document_id)
