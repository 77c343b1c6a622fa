"""
Course Routes

GET /courses - List courses with filters and pagination
POST /courses - Create course (admin)
POST /courses/bulk-import - Import spreadsheet rows as JSON (admin)
POST /courses/bulk-import/csv - Import an uploaded CSV sheet (admin)
GET /courses/{course_id} - Get course by id or slug
PUT /courses/{course_id} - Update course (admin)
DELETE /courses/{course_id} - Delete course (admin)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from careerhq.core.auth import get_current_admin, get_optional_admin
from careerhq.core.errors import BadRequestError
from careerhq.db.mongodb import MongoStore, get_store
from careerhq.schemas.schemas import (
    COURSE_REQUIRED_FIELDS, BulkImportResponse, CourseCreate, CourseUpdate, MessageResponse
)
from careerhq.services.bulk_import import BulkCourseImporter, parse_course_csv
from careerhq.services.mongo_service import CourseService, pagination, serialize_doc
from careerhq.services.resolver import find_or_404
from careerhq.utils.file_upload import read_json_object, read_sheet, require_fields, validate_payload

router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get("")
async def list_courses(
    country_id: Optional[str] = Query(None, alias="countryId"),
    university_id: Optional[str] = Query(None, alias="universityId"),
    study_level: Optional[str] = Query(None, alias="studyLevel"),
    search: Optional[str] = None,
    populate: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    include_unpublished: bool = Query(False, alias="includeUnpublished"),
    store: MongoStore = Depends(get_store),
    admin: Optional[dict] = Depends(get_optional_admin),
):
    """List courses sorted by program name."""
    service = CourseService(store)
    courses, total = service.list(
        country_id=country_id,
        university_id=university_id,
        study_level=study_level,
        search=search,
        include_unpublished=include_unpublished and admin is not None,
        page=page,
        limit=limit,
    )
    render = service.populate if populate else serialize_doc
    return {"courses": [render(c) for c in courses], "pagination": pagination(page, limit, total)}


@router.post("", status_code=201)
async def create_course(
    request: Request,
    store: MongoStore = Depends(get_store),
    admin: dict = Depends(get_current_admin),
):
    """
    Create a course.

    The university must exist and belong to the given country.
    """
    data = await read_json_object(request)
    require_fields(data, COURSE_REQUIRED_FIELDS)
    course = validate_payload(CourseCreate, data).to_document()

    service = CourseService(store)
    created = service.create(course)
    return {"course": service.populate(created)}


@router.post("/bulk-import", response_model=BulkImportResponse)
async def bulk_import_courses(
    request: Request,
    store: MongoStore = Depends(get_store),
    admin: dict = Depends(get_current_admin),
):
    """
    Import rows of {universityName, countryName, programName, ...}.

    Missing countries and universities are created on the fly. Every row is
    reported; one bad row never aborts the batch.
    """
    data = await read_json_object(request)
    rows = data.get("courses")
    if not isinstance(rows, list) or not rows:
        raise BadRequestError("No courses data provided")

    result = BulkCourseImporter(store).run(rows)
    return BulkImportResponse(result=result)


@router.post("/bulk-import/csv", response_model=BulkImportResponse)
async def bulk_import_courses_csv(
    file: UploadFile = File(...),
    store: MongoStore = Depends(get_store),
    admin: dict = Depends(get_current_admin),
):
    """Same as /bulk-import, reading rows from an uploaded CSV sheet."""
    rows = parse_course_csv(await read_sheet(file))
    if not rows:
        raise BadRequestError("No courses data provided")

    result = BulkCourseImporter(store).run(rows)
    return BulkImportResponse(result=result)


@router.get("/{course_id}")
async def get_course(
    course_id: str,
    store: MongoStore = Depends(get_store),
    admin: Optional[dict] = Depends(get_optional_admin),
):
    """Get a course by ObjectId or slug, with university and country embedded."""
    service = CourseService(store)
    course = find_or_404(service, course_id, public=admin is None)
    return {"course": service.populate(course)}


@router.put("/{course_id}")
async def update_course(
    course_id: str,
    request: Request,
    store: MongoStore = Depends(get_store),
    admin: dict = Depends(get_current_admin),
):
    service = CourseService(store)
    existing = find_or_404(service, course_id, public=False)

    data = await read_json_object(request)
    changes = validate_payload(CourseUpdate, data).to_document(partial=True)

    updated = service.update(existing, changes)
    return {"course": service.populate(updated)}


@router.delete("/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: str,
    store: MongoStore = Depends(get_store),
    admin: dict = Depends(get_current_admin),
):
    service = CourseService(store)
    course = find_or_404(service, course_id, public=False)
    service.delete(course["_id"])
    return MessageResponse(message="Course deleted successfully")
