from typing import List

from fastapi import APIRouter, Depends

from ..db import get_session
from ..schemas import DepartmentDetail, DepartmentRead
from ..security import route_guard
from ..services.catalog import CatalogService


router = APIRouter(prefix="/departments", tags=["departments"], dependencies=[Depends(route_guard)])


def get_catalog_service(session=Depends(get_session)) -> CatalogService:
    return CatalogService(session)


@router.get("", response_model=List[DepartmentRead])
def list_departments(service: CatalogService = Depends(get_catalog_service)):
    return service.list_departments()


@router.get("/{department_id}", response_model=DepartmentDetail)
def get_department(department_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_department(department_id)
