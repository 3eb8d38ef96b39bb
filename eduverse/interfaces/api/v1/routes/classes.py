from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eduverse.application.services.class_service import create_class, list_classes_with_counts, serialize_class
from eduverse.infrastructure.db.session import get_db
from eduverse.interfaces.api.v1.dependencies.auth import require_authenticated, require_capability
from eduverse.interfaces.api.v1.schemas.school_class import SchoolClassCreate, SchoolClassResponse

router = APIRouter(prefix="/classes", tags=["classes"])


@router.get("", response_model=list[SchoolClassResponse], dependencies=[Depends(require_authenticated)])
def get_classes(db: Session = Depends(get_db)):
    return [serialize_class(school_class, count) for school_class, count in list_classes_with_counts(db)]


@router.post(
    "",
    response_model=SchoolClassResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_capability("manages_users"))],
)
def create_class_endpoint(payload: SchoolClassCreate, db: Session = Depends(get_db)):
    return serialize_class(create_class(db=db, payload=payload))
