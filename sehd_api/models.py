from datetime import datetime, date, timezone
from typing import Optional
from enum import Enum
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    # Naive UTC, matching what SQLite round-trips
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Closed value sets; columns store the plain string value
class ProgramTypeEnum(str, Enum):
    bachelors = "Bachelor's"
    masters = "Master's"
    doctoral = "Doctoral"
    certificate = "Certificate"


class TermSeasonEnum(str, Enum):
    spring = "Spring"
    summer = "Summer"
    fall = "Fall"


class AcademicCareerEnum(str, Enum):
    undergraduate = "Undergraduate"
    graduate = "Graduate"


class AdmitTypeEnum(str, Enum):
    new_student = "New Student"
    transfer_student = "Transfer Student"


class UserRoleEnum(str, Enum):
    admin = "admin"
    staff = "staff"
    viewer = "viewer"


class Timestamped(SQLModel):
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    modified_at: datetime = Field(default_factory=utcnow, nullable=False)


class Department(Timestamped, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True, max_length=10)
    name: str = Field(max_length=100)
    is_active: bool = Field(default=True)


class AcademicProgram(Timestamped, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True, max_length=20)
    description: str = Field(max_length=200)
    program_type: str = Field(index=True, max_length=20)  # see ProgramTypeEnum
    department_id: int = Field(foreign_key="department.id", index=True, ondelete="RESTRICT")
    is_active: bool = Field(default=True)


class AcademicTerm(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True, max_length=20)  # e.g. Fall24
    name: str = Field(max_length=50)
    year: int = Field(index=True)
    season: str = Field(max_length=10)  # see TermSeasonEnum
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime = Field(default_factory=utcnow, nullable=False)


class AdmissionRecord(Timestamped, table=True):
    __table_args__ = (
        UniqueConstraint("term_id", "program_id", "admit_type", name="uq_admission_term_program_admit_type"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    term_id: int = Field(foreign_key="academicterm.id", index=True, ondelete="RESTRICT")
    program_id: int = Field(foreign_key="academicprogram.id", index=True, ondelete="RESTRICT")
    academic_career: str = Field(max_length=20)
    admit_type: str = Field(max_length=30)
    total_applied: int = Field(default=0)
    total_admitted: int = Field(default=0)
    total_denied: int = Field(default=0)
    total_gross_deposited: int = Field(default=0)
    total_net_deposited: int = Field(default=0)


class EnrollmentGoal(Timestamped, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    program_id: int = Field(foreign_key="academicprogram.id", index=True, ondelete="RESTRICT")
    term_id: int = Field(foreign_key="academicterm.id", index=True, ondelete="RESTRICT")
    goal_year: int
    target_enrollment: Optional[int] = None
    actual_enrollment: Optional[int] = None
    notes: Optional[str] = Field(default=None, max_length=500)


class User(Timestamped, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True, max_length=100)
    password_hash: str = Field(max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)
    role: str = Field(index=True, max_length=20)  # see UserRoleEnum
    is_active: bool = Field(default=True)
    last_login: Optional[datetime] = None
