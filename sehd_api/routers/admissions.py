from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..db import get_session
from ..errors import NotFoundError
from ..exporters import XLSX_MEDIA_TYPE, export_admissions_excel
from ..schemas import (
    AdmissionCounters,
    AdmissionCreate,
    AdmissionRecordRead,
    AdmissionSummary,
    AdmissionView,
)
from ..security import route_guard
from ..services.admissions import AdmissionService


router = APIRouter(prefix="/admissionsdata", tags=["admissions"], dependencies=[Depends(route_guard)])


def get_admission_service(session=Depends(get_session)) -> AdmissionService:
    return AdmissionService(session)


class FilterParams:
    def __init__(
        self,
        term: Optional[str] = None,
        department: Optional[str] = None,
        program: Optional[str] = None,
        academic_career: Optional[str] = Query(default=None, alias="academicCareer"),
        admit_type: Optional[str] = Query(default=None, alias="admitType"),
    ):
        self.term = term
        self.department = department
        self.program = program
        self.academic_career = academic_career
        self.admit_type = admit_type

    def apply(self, service: AdmissionService) -> List[AdmissionView]:
        return service.filter(
            term=self.term,
            department=self.department,
            program=self.program,
            academic_career=self.academic_career,
            admit_type=self.admit_type,
        )


@router.get("", response_model=List[AdmissionView])
def list_admission_data(service: AdmissionService = Depends(get_admission_service)):
    return service.list_all()


@router.get("/term/{term_code}", response_model=List[AdmissionView])
def list_by_term(term_code: str, service: AdmissionService = Depends(get_admission_service)):
    return service.list_by_term(term_code)


@router.get("/academic-year/{academic_year}", response_model=List[AdmissionView])
def list_by_academic_year(academic_year: str, service: AdmissionService = Depends(get_admission_service)):
    return service.list_by_academic_year(academic_year)


@router.get("/filter", response_model=List[AdmissionView])
def filter_admission_data(
    params: FilterParams = Depends(),
    service: AdmissionService = Depends(get_admission_service),
):
    return params.apply(service)


@router.get("/summary/{term_code}", response_model=AdmissionSummary)
def get_summary(
    term_code: str,
    department: Optional[str] = None,
    program: Optional[str] = None,
    service: AdmissionService = Depends(get_admission_service),
):
    return service.summary(term_code, department=department, program=program)


@router.get("/export")
def export_admission_data(
    params: FilterParams = Depends(),
    service: AdmissionService = Depends(get_admission_service),
):
    content = export_admissions_excel(params.apply(service))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="admissions.xlsx"'},
    )


@router.post("", response_model=AdmissionRecordRead)
def create_admission_data(payload: AdmissionCreate, service: AdmissionService = Depends(get_admission_service)):
    return service.create(payload)


@router.put("/{admission_id}", response_model=AdmissionRecordRead)
def update_admission_data(
    admission_id: int,
    payload: AdmissionCounters,
    service: AdmissionService = Depends(get_admission_service),
):
    return service.update(admission_id, payload)


@router.delete("/{admission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_admission_data(admission_id: int, service: AdmissionService = Depends(get_admission_service)):
    if not service.delete(admission_id):
        raise NotFoundError(f"Admission data with ID {admission_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
