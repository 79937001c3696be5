"""Request and response shapes shared by services and routers.

Responses are serialized in camelCase to stay compatible with the dashboard
client; requests accept either camelCase or snake_case field names.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import AcademicCareerEnum, AdmitTypeEnum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class LoginRequest(CamelModel):
    email: str = Field(min_length=3, max_length=100, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=1)


class UserProfile(CamelModel):
    user_id: int = Field(alias="userID")
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    is_active: bool = True
    last_login: Optional[datetime] = None
    full_name: str = ""


class LoginUser(CamelModel):
    user_id: int = Field(alias="userID")
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    full_name: str = ""


class LoginResponse(CamelModel):
    token: str
    user: LoginUser


class TokenClaims(BaseModel):
    user_id: int
    email: str
    name: str = ""
    role: str


class AdmissionView(CamelModel):
    """Flat, denormalized projection of an admission record."""

    id: int
    academic_career_description: str
    academic_plan_code: str
    academic_plan_description: str
    admit_type_description: str
    department: str
    program: str
    total_applied: int
    total_admitted: int
    total_denied: int
    total_gross_deposited: int
    total_net_deposited: int
    term: str
    academic_year: str


class AdmissionSummary(CamelModel):
    term: str
    department: Optional[str] = None
    program: Optional[str] = None
    total_applied: int = 0
    total_admitted: int = 0
    total_denied: int = 0
    total_gross_deposited: int = 0
    total_net_deposited: int = 0
    admission_rate: float = 0.0
    denial_rate: float = 0.0
    deposit_rate: float = 0.0


class AdmissionCounters(CamelModel):
    total_applied: int = Field(ge=0)
    total_admitted: int = Field(ge=0)
    total_denied: int = Field(ge=0)
    total_gross_deposited: int = Field(ge=0)
    total_net_deposited: int = Field(ge=0)


class AdmissionCreate(AdmissionCounters):
    term_id: int = Field(alias="termID")
    program_id: int = Field(alias="programID")
    academic_career: AcademicCareerEnum
    admit_type: AdmitTypeEnum


class AdmissionRecordRead(CamelModel):
    id: int
    term_id: int = Field(alias="termID")
    program_id: int = Field(alias="programID")
    academic_career: str
    admit_type: str
    total_applied: int
    total_admitted: int
    total_denied: int
    total_gross_deposited: int
    total_net_deposited: int
    created_at: datetime
    modified_at: datetime


class DepartmentRead(CamelModel):
    id: int
    code: str
    name: str
    is_active: bool
    created_at: datetime
    modified_at: datetime


class DepartmentRef(CamelModel):
    id: int
    code: str
    name: str


class ProgramRead(CamelModel):
    id: int
    code: str
    description: str
    program_type: str
    department_id: int = Field(alias="departmentID")
    is_active: bool


class ProgramWithDepartment(CamelModel):
    id: int
    code: str
    description: str
    program_type: str
    department: DepartmentRef


class DepartmentDetail(DepartmentRead):
    programs: List[ProgramRead] = Field(default_factory=list)


class TermRead(CamelModel):
    id: int
    code: str
    name: str
    year: int
    season: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
