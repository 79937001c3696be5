from typing import List

from fastapi import APIRouter, Depends

from ..schemas import TermRead
from ..security import route_guard
from ..services.catalog import CatalogService
from .departments import get_catalog_service


router = APIRouter(prefix="/terms", tags=["terms"], dependencies=[Depends(route_guard)])


@router.get("", response_model=List[TermRead])
def list_terms(service: CatalogService = Depends(get_catalog_service)):
    return service.list_terms()


@router.get("/year/{year}", response_model=List[TermRead])
def list_terms_by_year(year: int, service: CatalogService = Depends(get_catalog_service)):
    return service.list_terms_by_year(year)


@router.get("/{term_code}", response_model=TermRead)
def get_term(term_code: str, service: CatalogService = Depends(get_catalog_service)):
    return service.get_term(term_code)
