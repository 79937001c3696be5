from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlmodel import Session, select

from .db import engine
from .models import (
    AcademicCareerEnum,
    AcademicProgram,
    AcademicTerm,
    AdmissionRecord,
    AdmitTypeEnum,
    Department,
    EnrollmentGoal,
    ProgramTypeEnum,
    TermSeasonEnum,
    User,
    UserRoleEnum,
)
from .security import hash_password


logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@miami.edu"
DEFAULT_ADMIN_PASSWORD = "admin123"

DEFAULT_USERS = [
    {
        "email": DEFAULT_ADMIN_EMAIL,
        "password": DEFAULT_ADMIN_PASSWORD,
        "first_name": "Admin",
        "last_name": "User",
        "role": UserRoleEnum.admin,
    },
    {
        "email": "staff@miami.edu",
        "password": "staff123",
        "first_name": "Staff",
        "last_name": "Member",
        "role": UserRoleEnum.staff,
    },
    {
        "email": "viewer@miami.edu",
        "password": "viewer123",
        "first_name": "Dashboard",
        "last_name": "Viewer",
        "role": UserRoleEnum.viewer,
    },
]

DEPARTMENTS = [
    ("KIN", "Kinesiology"),
    ("EPS", "Educational & Psychological Studies"),
    ("TAL", "Teaching and Learning"),
    ("Undeclared", "Undeclared"),
]

PROGRAMS = [
    ("EXPS_BSEXP", "Exercise Physiology", ProgramTypeEnum.bachelors, "KIN"),
    ("SADM_BSED", "Sport Administration", ProgramTypeEnum.bachelors, "KIN"),
    ("CAPS_BSED", "Community&AppliedPsych Studies", ProgramTypeEnum.bachelors, "EPS"),
    ("ELEDS_BSED", "Elementary Ed Special Ed", ProgramTypeEnum.bachelors, "TAL"),
    ("DASI_BS", "Data Analytics Social Impact", ProgramTypeEnum.bachelors, "EPS"),
    ("ED_BSED_UN", "Undeclared Education", ProgramTypeEnum.bachelors, "Undeclared"),
]

SEASONS = (TermSeasonEnum.spring, TermSeasonEnum.summer, TermSeasonEnum.fall)
TERM_YEARS = (2022, 2023, 2024)

# (term, program, career, admit type, applied, admitted, denied, gross, net)
ADMISSION_RECORDS = [
    ("Fall24", "EXPS_BSEXP", AcademicCareerEnum.undergraduate, AdmitTypeEnum.new_student, 595, 124, 204, 41, 38),
    ("Fall24", "EXPS_BSEXP", AcademicCareerEnum.undergraduate, AdmitTypeEnum.transfer_student, 38, 19, 0, 12, 9),
    ("Spring24", "SADM_BSED", AcademicCareerEnum.undergraduate, AdmitTypeEnum.new_student, 34, 28, 0, 9, 6),
    ("Fall23", "CAPS_BSED", AcademicCareerEnum.undergraduate, AdmitTypeEnum.new_student, 212, 97, 61, 30, 27),
]

# (program, term, goal year, target, actual, notes)
ENROLLMENT_GOALS = [
    ("EXPS_BSEXP", "Fall24", 2024, 40, 38, "New student cohort"),
    ("SADM_BSED", "Spring24", 2024, 10, 6, None),
]


def _ensure_user(session: Session, spec: dict) -> User:
    # Existing accounts are left as operators configured them
    existing = session.exec(select(User).where(User.email == spec["email"])).first()
    if existing:
        return existing
    user = User(
        email=spec["email"],
        password_hash=hash_password(spec["password"]),
        first_name=spec["first_name"],
        last_name=spec["last_name"],
        role=spec["role"].value,
        is_active=True,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def ensure_default_users(session: Optional[Session] = None) -> Dict[str, User]:
    """Create the admin, staff and viewer accounts used by the dashboard."""
    owns_session = session is None
    session = session or Session(engine)
    try:
        return {spec["email"]: _ensure_user(session, spec) for spec in DEFAULT_USERS}
    finally:
        if owns_session:
            session.close()


def _ensure_departments(session: Session) -> Dict[str, Department]:
    mapping: Dict[str, Department] = {}
    for code, name in DEPARTMENTS:
        department = session.exec(select(Department).where(Department.code == code)).first()
        if not department:
            department = Department(code=code, name=name)
            session.add(department)
            session.commit()
            session.refresh(department)
        mapping[code] = department
    return mapping


def _ensure_terms(session: Session) -> Dict[str, AcademicTerm]:
    mapping: Dict[str, AcademicTerm] = {}
    for year in TERM_YEARS:
        for season in SEASONS:
            code = f"{season.value}{str(year)[2:]}"
            term = session.exec(select(AcademicTerm).where(AcademicTerm.code == code)).first()
            if not term:
                term = AcademicTerm(code=code, name=f"{season.value} {year}", year=year, season=season.value)
                session.add(term)
                session.commit()
                session.refresh(term)
            mapping[code] = term
    return mapping


def _ensure_programs(session: Session, department_map: Dict[str, Department]) -> Dict[str, AcademicProgram]:
    mapping: Dict[str, AcademicProgram] = {}
    for code, description, program_type, department_code in PROGRAMS:
        program = session.exec(select(AcademicProgram).where(AcademicProgram.code == code)).first()
        if not program:
            program = AcademicProgram(
                code=code,
                description=description,
                program_type=program_type.value,
                department_id=department_map[department_code].id,
            )
            session.add(program)
            session.commit()
            session.refresh(program)
        mapping[code] = program
    return mapping


def _ensure_admission_records(
    session: Session,
    term_map: Dict[str, AcademicTerm],
    program_map: Dict[str, AcademicProgram],
) -> None:
    for term_code, program_code, career, admit_type, applied, admitted, denied, gross, net in ADMISSION_RECORDS:
        term = term_map[term_code]
        program = program_map[program_code]
        existing = session.exec(
            select(AdmissionRecord).where(
                AdmissionRecord.term_id == term.id,
                AdmissionRecord.program_id == program.id,
                AdmissionRecord.admit_type == admit_type.value,
            )
        ).first()
        if existing:
            continue
        session.add(
            AdmissionRecord(
                term_id=term.id,
                program_id=program.id,
                academic_career=career.value,
                admit_type=admit_type.value,
                total_applied=applied,
                total_admitted=admitted,
                total_denied=denied,
                total_gross_deposited=gross,
                total_net_deposited=net,
            )
        )
        session.commit()


def _ensure_enrollment_goals(
    session: Session,
    term_map: Dict[str, AcademicTerm],
    program_map: Dict[str, AcademicProgram],
) -> None:
    for program_code, term_code, goal_year, target, actual, notes in ENROLLMENT_GOALS:
        program = program_map[program_code]
        term = term_map[term_code]
        existing = session.exec(
            select(EnrollmentGoal).where(
                EnrollmentGoal.program_id == program.id,
                EnrollmentGoal.term_id == term.id,
            )
        ).first()
        if existing:
            continue
        session.add(
            EnrollmentGoal(
                program_id=program.id,
                term_id=term.id,
                goal_year=goal_year,
                target_enrollment=target,
                actual_enrollment=actual,
                notes=notes,
            )
        )
        session.commit()


def ensure_demo_data(session: Optional[Session] = None) -> None:
    """Load departments, terms, programs, admission figures and users."""
    owns_session = session is None
    session = session or Session(engine)
    try:
        department_map = _ensure_departments(session)
        term_map = _ensure_terms(session)
        program_map = _ensure_programs(session, department_map)
        _ensure_admission_records(session, term_map, program_map)
        _ensure_enrollment_goals(session, term_map, program_map)
        ensure_default_users(session)
    finally:
        if owns_session:
            session.close()
    logger.info("Demo data ensured")


if __name__ == "__main__":
    ensure_demo_data()
