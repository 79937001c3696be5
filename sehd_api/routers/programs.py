from typing import List

from fastapi import APIRouter, Depends

from ..schemas import ProgramRead, ProgramWithDepartment
from ..security import route_guard
from ..services.catalog import CatalogService
from .departments import get_catalog_service


router = APIRouter(prefix="/programs", tags=["programs"], dependencies=[Depends(route_guard)])


@router.get("", response_model=List[ProgramWithDepartment])
def list_programs(service: CatalogService = Depends(get_catalog_service)):
    return service.list_programs()


@router.get("/department/{department_code}", response_model=List[ProgramRead])
def list_programs_by_department(department_code: str, service: CatalogService = Depends(get_catalog_service)):
    return service.list_programs_by_department(department_code)


@router.get("/type/{program_type}", response_model=List[ProgramRead])
def list_programs_by_type(program_type: str, service: CatalogService = Depends(get_catalog_service)):
    return service.list_programs_by_type(program_type)
