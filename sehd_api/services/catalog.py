from typing import List

from sqlmodel import Session, select

from ..errors import NotFoundError
from ..models import AcademicProgram, AcademicTerm, Department
from ..schemas import DepartmentDetail, DepartmentRef, ProgramRead, ProgramWithDepartment


class CatalogService:
    """Read access to departments, programs and terms."""

    def __init__(self, session: Session):
        self.session = session

    def list_departments(self) -> List[Department]:
        statement = select(Department).where(Department.is_active == True).order_by(Department.name)  # noqa: E712
        return self.session.exec(statement).all()

    def get_department(self, department_id: int) -> DepartmentDetail:
        department = self.session.get(Department, department_id)
        if department is None:
            raise NotFoundError(f"Department with ID {department_id} not found")
        programs = self.session.exec(
            select(AcademicProgram)
            .where(AcademicProgram.department_id == department.id)
            .order_by(AcademicProgram.description)
        ).all()
        detail = DepartmentDetail.model_validate(department)
        detail.programs = [ProgramRead.model_validate(program) for program in programs]
        return detail

    def _active_programs(self):
        return (
            select(AcademicProgram, Department)
            .join(Department, AcademicProgram.department_id == Department.id)
            .where(AcademicProgram.is_active == True)  # noqa: E712
        )

    def list_programs(self) -> List[ProgramWithDepartment]:
        rows = self.session.exec(
            self._active_programs().order_by(Department.name, AcademicProgram.description)
        ).all()
        return [
            ProgramWithDepartment(
                id=program.id,
                code=program.code,
                description=program.description,
                program_type=program.program_type,
                department=DepartmentRef.model_validate(department),
            )
            for program, department in rows
        ]

    def list_programs_by_department(self, department_code: str) -> List[AcademicProgram]:
        rows = self.session.exec(
            self._active_programs()
            .where(Department.code == department_code)
            .order_by(AcademicProgram.description)
        ).all()
        return [program for program, _ in rows]

    def list_programs_by_type(self, program_type: str) -> List[AcademicProgram]:
        rows = self.session.exec(
            self._active_programs()
            .where(AcademicProgram.program_type == program_type)
            .order_by(Department.name, AcademicProgram.description)
        ).all()
        return [program for program, _ in rows]

    def list_terms(self) -> List[AcademicTerm]:
        statement = select(AcademicTerm).order_by(AcademicTerm.year.desc(), AcademicTerm.season.desc())
        return self.session.exec(statement).all()

    def get_term(self, term_code: str) -> AcademicTerm:
        term = self.session.exec(select(AcademicTerm).where(AcademicTerm.code == term_code)).first()
        if term is None:
            raise NotFoundError(f"Term '{term_code}' not found")
        return term

    def list_terms_by_year(self, year: int) -> List[AcademicTerm]:
        statement = select(AcademicTerm).where(AcademicTerm.year == year).order_by(AcademicTerm.season)
        return self.session.exec(statement).all()
