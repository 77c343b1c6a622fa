"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Field names are snake_case in Python and camelCase on the wire and in
MongoDB (alias generator), so documents round-trip without renaming.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    def to_document(self, partial: bool = False) -> dict:
        """Dump for MongoDB. partial=True keeps only fields the client sent."""
        if partial:
            return self.model_dump(by_alias=True, exclude_unset=True)
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================
# ENUMS
# ============================================================

class StudyLevel(str, Enum):
    undergraduate = "Undergraduate"
    postgraduate = "Postgraduate"
    doctorate = "Doctorate"
    certificate = "Certificate"
    diploma = "Diploma"


STUDY_LEVELS = [level.value for level in StudyLevel]


class UniversityType(str, Enum):
    public = "Public"
    private = "Private"


class LeadStatus(str, Enum):
    new = "new"
    contacted = "contacted"
    converted = "converted"
    closed = "closed"


class BlogContentType(str, Enum):
    heading = "heading"
    paragraph = "paragraph"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

class AdminResponse(BaseModel):
    email: str
    role: str


# ============================================================
# COUNTRY SCHEMAS
# ============================================================

class CountryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = None
    code: Optional[str] = Field(None, max_length=3)
    flag: Optional[str] = None
    flag_image_id: Optional[str] = None
    image_id: Optional[str] = None
    description: Optional[str] = None
    cost_of_living: Optional[str] = None
    visa_requirements: Optional[str] = None
    scholarships_available: Optional[str] = None
    currency: Optional[str] = None
    language: Optional[str] = None
    timezone: Optional[str] = None
    published: bool = True

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

class CountryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = None
    code: Optional[str] = Field(None, max_length=3)
    flag: Optional[str] = None
    flag_image_id: Optional[str] = None
    image_id: Optional[str] = None
    description: Optional[str] = None
    cost_of_living: Optional[str] = None
    visa_requirements: Optional[str] = None
    scholarships_available: Optional[str] = None
    currency: Optional[str] = None
    language: Optional[str] = None
    timezone: Optional[str] = None
    published: Optional[bool] = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v


# ============================================================
# UNIVERSITY SCHEMAS
# ============================================================

def _check_established(v: Optional[int]) -> Optional[int]:
    if v is not None and not 1000 <= v <= date.today().year:
        raise ValueError(f"must be between 1000 and {date.today().year}")
    return v


class UniversityCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    country_id: str
    location: str = Field(..., min_length=1)
    type: UniversityType
    slug: Optional[str] = None
    website: Optional[str] = None
    image_id: Optional[str] = None
    description: Optional[str] = None
    ranking: Optional[int] = Field(None, ge=1)
    established: Optional[int] = None
    campus_size: Optional[str] = None
    student_population: Optional[str] = None
    international_students: Optional[str] = None
    accommodation: Optional[str] = None
    facilities: List[str] = []
    tags: List[str] = []
    published: bool = True

    @field_validator("established")
    @classmethod
    def check_established(cls, v: Optional[int]) -> Optional[int]:
        return _check_established(v)

class UniversityUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    country_id: Optional[str] = None
    location: Optional[str] = None
    type: Optional[UniversityType] = None
    slug: Optional[str] = None
    website: Optional[str] = None
    image_id: Optional[str] = None
    description: Optional[str] = None
    ranking: Optional[int] = Field(None, ge=1)
    established: Optional[int] = None
    campus_size: Optional[str] = None
    student_population: Optional[str] = None
    international_students: Optional[str] = None
    accommodation: Optional[str] = None
    facilities: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    published: Optional[bool] = None

    @field_validator("established")
    @classmethod
    def check_established(cls, v: Optional[int]) -> Optional[int]:
        return _check_established(v)


# ============================================================
# COURSE SCHEMAS
# ============================================================

class CourseCreate(CamelModel):
    university_id: str
    country_id: str
    program_name: str = Field(..., min_length=1)
    study_level: StudyLevel
    campus: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1)
    open_intakes: str = Field(..., min_length=1)
    intake_year: str = Field(..., min_length=1)
    entry_requirements: str = Field(..., min_length=1)
    ielts_score: float = Field(..., ge=0, le=9)
    ielts_no_band_less_than: float = Field(..., ge=0, le=9)
    pte_score: Optional[float] = Field(None, ge=0, le=90)
    pte_no_band_less_than: Optional[float] = Field(None, ge=0, le=90)
    toefl_score: Optional[float] = Field(None, ge=0, le=120)
    duolingo: Optional[float] = Field(None, ge=0, le=160)
    gmat_score: Optional[float] = Field(None, ge=200, le=800)
    gre_score: Optional[float] = Field(None, ge=260, le=340)
    yearly_tuition_fees: str = Field(..., min_length=1)
    currency: str = "USD"
    application_deadline: Optional[str] = None
    work_experience: Optional[str] = None
    scholarships: List[str] = []
    career_prospects: List[str] = []
    accreditation: List[str] = []
    specializations: List[str] = []
    slug: Optional[str] = None
    published: bool = True

class CourseUpdate(CamelModel):
    university_id: Optional[str] = None
    country_id: Optional[str] = None
    program_name: Optional[str] = Field(None, min_length=1)
    study_level: Optional[StudyLevel] = None
    campus: Optional[str] = None
    duration: Optional[str] = None
    open_intakes: Optional[str] = None
    intake_year: Optional[str] = None
    entry_requirements: Optional[str] = None
    ielts_score: Optional[float] = Field(None, ge=0, le=9)
    ielts_no_band_less_than: Optional[float] = Field(None, ge=0, le=9)
    pte_score: Optional[float] = Field(None, ge=0, le=90)
    pte_no_band_less_than: Optional[float] = Field(None, ge=0, le=90)
    toefl_score: Optional[float] = Field(None, ge=0, le=120)
    duolingo: Optional[float] = Field(None, ge=0, le=160)
    gmat_score: Optional[float] = Field(None, ge=200, le=800)
    gre_score: Optional[float] = Field(None, ge=260, le=340)
    yearly_tuition_fees: Optional[str] = None
    currency: Optional[str] = None
    application_deadline: Optional[str] = None
    work_experience: Optional[str] = None
    scholarships: Optional[List[str]] = None
    career_prospects: Optional[List[str]] = None
    accreditation: Optional[List[str]] = None
    specializations: Optional[List[str]] = None
    slug: Optional[str] = None
    published: Optional[bool] = None


# Required fields checked before model validation, in this order,
# so the error names the first missing one.
COURSE_REQUIRED_FIELDS = [
    "universityId", "countryId", "programName", "studyLevel", "campus",
    "duration", "openIntakes", "intakeYear", "entryRequirements",
    "ieltsScore", "ieltsNoBandLessThan", "yearlyTuitionFees",
]


# ============================================================
# BULK IMPORT SCHEMAS
# ============================================================

class BulkImportResult(BaseModel):
    success: int = 0
    failed: int = 0
    errors: List[str] = []

class BulkImportResponse(BaseModel):
    result: BulkImportResult


# ============================================================
# BLOG SCHEMAS
# ============================================================

class BlogContent(CamelModel):
    type: BlogContentType
    text: str = Field(..., min_length=1)

class BlogPostCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=300)
    excerpt: str = Field(..., min_length=1)
    content: List[BlogContent] = Field(..., min_length=1)
    image_id: Optional[str] = None
    author: str = Field(..., min_length=1)
    author_role: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    published: bool = False

class BlogPostUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    excerpt: Optional[str] = None
    content: Optional[List[BlogContent]] = None
    image_id: Optional[str] = None
    author: Optional[str] = None
    author_role: Optional[str] = None
    category: Optional[str] = None
    published: Optional[bool] = None

BLOG_REQUIRED_FIELDS = ["title", "excerpt", "content", "author", "authorRole", "category"]

class BlogCategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)

class BlogCategoryResponse(BaseModel):
    id: str
    name: str


# ============================================================
# LEAD SCHEMAS
# ============================================================

class LeadCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=20)
    country: Optional[str] = None
    university: Optional[str] = None
    program: Optional[str] = None
    qualification: Optional[str] = None
    ielts_score: Optional[str] = None
    message: Optional[str] = None

class LeadStatusUpdate(CamelModel):
    status: LeadStatus


# ============================================================
# COMMON SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str

class ConvertLeadResponse(BaseModel):
    success: bool
