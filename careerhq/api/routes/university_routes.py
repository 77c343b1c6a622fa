"""
University Routes

GET /universities - List universities (filter by country, optional populate)
POST /universities - Create university (admin, JSON or multipart with imageFile)
GET /universities/{university_id} - Get university by id or slug
PUT /universities/{university_id} - Update university (admin)
DELETE /universities/{university_id} - Delete university and its image (admin)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from careerhq.core.auth import get_current_admin, get_optional_admin
from careerhq.db.mongodb import MongoStore, get_store
from careerhq.schemas.schemas import MessageResponse, UniversityCreate, UniversityUpdate
from careerhq.services.media_service import FOLDERS, MediaService, get_media_service
from careerhq.services.mongo_service import UniversityService, serialize_doc
from careerhq.services.resolver import find_or_404
from careerhq.utils.file_upload import read_form_payload, require_fields, validate_payload

router = APIRouter(prefix="/universities", tags=["Universities"])


@router.get("")
async def list_universities(
    country_id: Optional[str] = Query(None, alias="countryId"),
    populate: bool = False,
    limit: Optional[int] = Query(None, ge=1),
    include_unpublished: bool = Query(False, alias="includeUnpublished"),
    store: MongoStore = Depends(get_store),
    admin: Optional[dict] = Depends(get_optional_admin),
):
    """List universities by name. populate=true embeds the country and a published course count."""
    service = UniversityService(store)
    universities = service.list(
        country_id=country_id,
        include_unpublished=include_unpublished and admin is not None,
        limit=limit,
    )
    if populate:
        return {"universities": [service.populate(u, with_course_count=True) for u in universities]}
    return {"universities": [serialize_doc(u) for u in universities]}


@router.post("", status_code=201)
async def create_university(
    request: Request,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    """Create a university in an existing country."""
    data, files = await read_form_payload(request, ("imageFile",))
    require_fields(data, ["name", "countryId", "location", "type"])
    university = validate_payload(UniversityCreate, data).to_document()

    service = UniversityService(store)
    if files["imageFile"]:
        university["imageId"] = media.upload(files["imageFile"], FOLDERS["university_images"]).public_id

    created = service.create(university)
    return {"university": service.populate(created)}


@router.get("/{university_id}")
async def get_university(
    university_id: str,
    store: MongoStore = Depends(get_store),
    admin: Optional[dict] = Depends(get_optional_admin),
):
    """Get a university by ObjectId or slug, with its country embedded."""
    service = UniversityService(store)
    university = find_or_404(service, university_id, public=admin is None)
    return {"university": service.populate(university)}


@router.put("/{university_id}")
async def update_university(
    university_id: str,
    request: Request,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    """Update a university. Renaming regenerates the slug."""
    service = UniversityService(store)
    existing = find_or_404(service, university_id, public=False)

    data, files = await read_form_payload(request, ("imageFile",))
    changes = validate_payload(UniversityUpdate, data).to_document(partial=True)

    if files["imageFile"]:
        changes["imageId"] = media.replace(files["imageFile"], existing.get("imageId"), FOLDERS["university_images"])

    updated = service.update(existing, changes)
    return {"university": service.populate(updated)}


@router.delete("/{university_id}", response_model=MessageResponse)
async def delete_university(
    university_id: str,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    service = UniversityService(store)
    university = find_or_404(service, university_id, public=False)

    if university.get("imageId"):
        media.delete(university["imageId"])

    service.delete(university["_id"])
    return MessageResponse(message="University deleted successfully")
