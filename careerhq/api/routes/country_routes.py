"""
Country Routes

GET /countries - List countries (published only unless admin asks otherwise)
POST /countries - Create country (admin, JSON or multipart with images)
GET /countries/{country_id} - Get country by id or slug
PUT /countries/{country_id} - Update country (admin)
DELETE /countries/{country_id} - Delete country and its hosted images (admin)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from careerhq.core.auth import get_current_admin, get_optional_admin
from careerhq.db.mongodb import MongoStore, get_store
from careerhq.schemas.schemas import CountryCreate, CountryUpdate, MessageResponse
from careerhq.services.media_service import FOLDERS, MediaService, get_media_service
from careerhq.services.mongo_service import CountryService, serialize_doc
from careerhq.services.resolver import find_or_404
from careerhq.utils.file_upload import read_form_payload, require_fields, validate_payload

router = APIRouter(prefix="/countries", tags=["Countries"])

IMAGE_FIELDS = ("imageFile", "flagImageFile")


@router.get("")
async def list_countries(
    include_counts: bool = Query(False, alias="includeCounts"),
    include_unpublished: bool = Query(False, alias="includeUnpublished"),
    store: MongoStore = Depends(get_store),
    admin: Optional[dict] = Depends(get_optional_admin),
):
    """List countries sorted by name, optionally with published university/course counts."""
    service = CountryService(store)
    countries = service.list(include_unpublished=include_unpublished and admin is not None)
    if include_counts:
        return {"countries": [{**serialize_doc(c), **service.counts(c["_id"])} for c in countries]}
    return {"countries": [serialize_doc(c) for c in countries]}


@router.post("", status_code=201)
async def create_country(
    request: Request,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    """Create a country. Multipart requests may carry imageFile and flagImageFile."""
    data, files = await read_form_payload(request, IMAGE_FIELDS)
    require_fields(data, ["name"])
    country = validate_payload(CountryCreate, data).to_document()

    if files["imageFile"]:
        country["imageId"] = media.upload(files["imageFile"], FOLDERS["country_images"]).public_id
    if files["flagImageFile"]:
        country["flagImageId"] = media.upload(files["flagImageFile"], FOLDERS["country_flags"]).public_id

    created = CountryService(store).create(country)
    return {"country": serialize_doc(created)}


@router.get("/{country_id}")
async def get_country(
    country_id: str,
    store: MongoStore = Depends(get_store),
    admin: Optional[dict] = Depends(get_optional_admin),
):
    """Get a country by ObjectId or slug. Unpublished countries are hidden from the public."""
    country = find_or_404(CountryService(store), country_id, public=admin is None)
    return {"country": serialize_doc(country)}


@router.put("/{country_id}")
async def update_country(
    country_id: str,
    request: Request,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    """Update a country. New image files replace (and delete) the old ones."""
    service = CountryService(store)
    existing = find_or_404(service, country_id, public=False)

    data, files = await read_form_payload(request, IMAGE_FIELDS)
    changes = validate_payload(CountryUpdate, data).to_document(partial=True)

    if files["imageFile"]:
        changes["imageId"] = media.replace(files["imageFile"], existing.get("imageId"), FOLDERS["country_images"])
    if files["flagImageFile"]:
        changes["flagImageId"] = media.replace(
            files["flagImageFile"], existing.get("flagImageId"), FOLDERS["country_flags"]
        )

    updated = service.update(existing, changes)
    return {"country": serialize_doc(updated)}


@router.delete("/{country_id}", response_model=MessageResponse)
async def delete_country(
    country_id: str,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    """Delete a country. Universities and courses that reference it are left alone."""
    service = CountryService(store)
    country = find_or_404(service, country_id, public=False)

    for image_field in ("imageId", "flagImageId"):
        if country.get(image_field):
            media.delete(country[image_field])

    service.delete(country["_id"])
    return MessageResponse(message="Country deleted successfully")
