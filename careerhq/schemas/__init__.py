"""
Schemas module - Request/Response schemas for API endpoints.
"""

from careerhq.schemas.schemas import (
    CountryCreate, CountryUpdate,
    UniversityCreate, UniversityUpdate,
    CourseCreate, CourseUpdate, StudyLevel, STUDY_LEVELS,
    BlogPostCreate, BlogPostUpdate, BlogCategoryCreate,
    LeadCreate, LeadStatusUpdate, LeadStatus,
    BulkImportResult, BulkImportResponse,
    MessageResponse,
)
