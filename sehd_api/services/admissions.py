"""Admission record queries, filtering, term summaries and writes.

Every read goes through a single join of AdmissionRecord with its term,
program and the program's department, and is projected onto the flat
``AdmissionView`` DTO. Derived fields (department code, program type and
academic year) are resolved here rather than on the entities.
"""

import logging
import re
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import AcademicProgram, AcademicTerm, AdmissionRecord, Department, utcnow
from ..schemas import AdmissionCounters, AdmissionCreate, AdmissionSummary, AdmissionView


logger = logging.getLogger(__name__)

ALL = "All"
ACADEMIC_YEAR_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}")
COUNTER_FIELDS = (
    "total_applied",
    "total_admitted",
    "total_denied",
    "total_gross_deposited",
    "total_net_deposited",
)


def academic_year_label(term_year: int) -> str:
    """Academic year that ends in ``term_year``: 2024 -> "2023-24"."""
    return f"{term_year - 1}-{str(term_year)[2:]}"


def parse_academic_year(academic_year: str) -> int:
    """Return the calendar year a "YYYY-YY" label ends in: "2023-24" -> 2024."""
    value = (academic_year or "").strip()
    if not ACADEMIC_YEAR_PATTERN.fullmatch(value):
        raise ValidationError(f"Invalid academic year '{academic_year}', expected YYYY-YY")
    return int(value[-2:]) + 2000


def _is_constraint(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def _percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def to_view(
    record: AdmissionRecord,
    term: AcademicTerm,
    program: AcademicProgram,
    department: Department,
) -> AdmissionView:
    return AdmissionView(
        id=record.id,
        academic_career_description=record.academic_career,
        academic_plan_code=program.code,
        academic_plan_description=program.description,
        admit_type_description=record.admit_type,
        department=department.code,
        program=program.program_type,
        total_applied=record.total_applied,
        total_admitted=record.total_admitted,
        total_denied=record.total_denied,
        total_gross_deposited=record.total_gross_deposited,
        total_net_deposited=record.total_net_deposited,
        term=term.code,
        academic_year=academic_year_label(term.year),
    )


class AdmissionService:
    def __init__(self, session: Session):
        self.session = session

    def _joined(self):
        return (
            select(AdmissionRecord, AcademicTerm, AcademicProgram, Department)
            .join(AcademicTerm, AdmissionRecord.term_id == AcademicTerm.id)
            .join(AcademicProgram, AdmissionRecord.program_id == AcademicProgram.id)
            .join(Department, AcademicProgram.department_id == Department.id)
        )

    def _views(self, statement) -> List[AdmissionView]:
        rows: List[Tuple[AdmissionRecord, AcademicTerm, AcademicProgram, Department]] = self.session.exec(
            statement.order_by(AdmissionRecord.id)
        ).all()
        return [to_view(*row) for row in rows]

    def list_all(self) -> List[AdmissionView]:
        return self._views(self._joined())

    def list_by_term(self, term_code: str) -> List[AdmissionView]:
        return self._views(self._joined().where(AcademicTerm.code == term_code))

    def list_by_academic_year(self, academic_year: str) -> List[AdmissionView]:
        year = parse_academic_year(academic_year)
        return self._views(self._joined().where(AcademicTerm.year == year))

    def filter(
        self,
        term: Optional[str] = None,
        department: Optional[str] = None,
        program: Optional[str] = None,
        academic_career: Optional[str] = None,
        admit_type: Optional[str] = None,
    ) -> List[AdmissionView]:
        """Narrow the joined rows by every supplied value.

        Empty values and the literal "All" impose no constraint. ``program``
        matches the program type, which is what the view exposes as
        ``program``.
        """
        statement = self._joined()
        if _is_constraint(term):
            statement = statement.where(AcademicTerm.code == term)
        if _is_constraint(department):
            statement = statement.where(Department.code == department)
        if _is_constraint(program):
            statement = statement.where(AcademicProgram.program_type == program)
        if _is_constraint(academic_career):
            statement = statement.where(AdmissionRecord.academic_career == academic_career)
        if _is_constraint(admit_type):
            statement = statement.where(AdmissionRecord.admit_type == admit_type)
        return self._views(statement)

    def summary(
        self,
        term_code: str,
        department: Optional[str] = None,
        program: Optional[str] = None,
    ) -> AdmissionSummary:
        statement = (
            select(
                func.count(AdmissionRecord.id),
                *[func.coalesce(func.sum(getattr(AdmissionRecord, name)), 0) for name in COUNTER_FIELDS],
            )
            .select_from(AdmissionRecord)
            .join(AcademicTerm, AdmissionRecord.term_id == AcademicTerm.id)
            .join(AcademicProgram, AdmissionRecord.program_id == AcademicProgram.id)
            .join(Department, AcademicProgram.department_id == Department.id)
            .where(AcademicTerm.code == term_code)
        )
        if _is_constraint(department):
            statement = statement.where(Department.code == department)
        if _is_constraint(program):
            statement = statement.where(AcademicProgram.program_type == program)

        count, applied, admitted, denied, gross, net = self.session.exec(statement).one()
        if not count:
            raise NotFoundError(f"No data found for term: {term_code}")

        return AdmissionSummary(
            term=term_code,
            department=department if _is_constraint(department) else None,
            program=program if _is_constraint(program) else None,
            total_applied=applied,
            total_admitted=admitted,
            total_denied=denied,
            total_gross_deposited=gross,
            total_net_deposited=net,
            admission_rate=_percentage(admitted, applied),
            denial_rate=_percentage(denied, applied),
            deposit_rate=_percentage(net, admitted),
        )

    def get(self, admission_id: int) -> AdmissionRecord:
        record = self.session.get(AdmissionRecord, admission_id)
        if record is None:
            raise NotFoundError(f"Admission data with ID {admission_id} not found")
        return record

    def create(self, payload: AdmissionCreate) -> AdmissionRecord:
        if self.session.get(AcademicTerm, payload.term_id) is None:
            raise NotFoundError(f"Term with ID {payload.term_id} not found")
        if self.session.get(AcademicProgram, payload.program_id) is None:
            raise NotFoundError(f"Program with ID {payload.program_id} not found")

        record = AdmissionRecord(
            term_id=payload.term_id,
            program_id=payload.program_id,
            academic_career=payload.academic_career.value,
            admit_type=payload.admit_type.value,
            **{name: getattr(payload, name) for name in COUNTER_FIELDS},
        )
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info(
                "Rejected duplicate admission record term=%s program=%s admit_type=%s",
                payload.term_id,
                payload.program_id,
                payload.admit_type.value,
            )
            raise ConflictError(
                "Admission data already exists for this term, program and admit type"
            )
        self.session.refresh(record)
        return record

    def update(self, admission_id: int, counters: AdmissionCounters) -> AdmissionRecord:
        """Overwrite the five counters; term, program and admit type never change."""
        record = self.get(admission_id)
        for name in COUNTER_FIELDS:
            setattr(record, name, getattr(counters, name))
        record.modified_at = utcnow()
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def delete(self, admission_id: int) -> bool:
        record = self.session.get(AdmissionRecord, admission_id)
        if record is None:
            return False
        self.session.delete(record)
        self.session.commit()
        return True
