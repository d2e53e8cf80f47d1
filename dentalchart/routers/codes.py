from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import CodeNotFoundError
from ..providers.sql import SqlCodeCatalog
from ..schemas.notation import DentalCodeResponse

router = APIRouter(prefix="/api/dental-codes", tags=["dental-codes"])


@router.get("", response_model=List[DentalCodeResponse])
def search_codes(
    search: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return SqlCodeCatalog(db).search(search or "", limit=limit)


@router.get("/{code}", response_model=DentalCodeResponse)
def get_code(code: str, db: Session = Depends(get_db)):
    ref = SqlCodeCatalog(db).exact(code)
    if ref is None:
        raise HTTPException(status_code=404, detail=CodeNotFoundError(code).message)
    return ref
