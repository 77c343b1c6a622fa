"""
Blog Routes

GET /blog - List posts (published only for the public)
POST /blog - Create post (admin, JSON or multipart with imageFile)
GET /blog/categories - Categories for the listing filter
POST /blog/categories - Create category (admin)
GET /blog/related/{post_id} - Posts related to a post
GET /blog/{post_id} - Get post
PUT /blog/{post_id} - Update post (admin)
DELETE /blog/{post_id} - Delete post and its cover image (admin)

Posts are addressed by ObjectId only; they have no slug.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from careerhq.core.auth import get_current_admin, get_optional_admin
from careerhq.core.errors import BadRequestError, NotFoundError
from careerhq.db.mongodb import MongoStore, get_store
from careerhq.schemas.schemas import (
    BLOG_REQUIRED_FIELDS, BlogCategoryCreate, BlogCategoryResponse, BlogPostCreate, BlogPostUpdate,
    MessageResponse
)
from careerhq.services.media_service import FOLDERS, MediaService, get_media_service
from careerhq.services.mongo_service import (
    BlogCategoryService, BlogPostService, pagination, serialize_post
)
from careerhq.services.resolver import is_object_id
from careerhq.utils.file_upload import read_form_payload, read_json_object, require_fields, validate_payload

router = APIRouter(prefix="/blog", tags=["Blog"])


def category_option(name: str) -> BlogCategoryResponse:
    """'Study Abroad' -> {id: 'study-abroad', name: 'Study Abroad'}"""
    return BlogCategoryResponse(id="-".join(name.lower().split()), name=name)


def get_post_or_404(service: BlogPostService, post_id: str, public: bool) -> dict:
    post = service.get_by_id(post_id)
    if post is None or (public and post.get("published") is not True):
        raise NotFoundError("Blog post not found")
    return post


@router.get("")
async def list_posts(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    include_unpublished: bool = Query(False, alias="includeUnpublished"),
    store: MongoStore = Depends(get_store),
    admin: Optional[dict] = Depends(get_optional_admin),
):
    """Newest first. category takes the listing id ("study-abroad") or the name."""
    posts, total = BlogPostService(store).list(
        category=category,
        search=search,
        include_unpublished=include_unpublished and admin is not None,
        page=page,
        limit=limit,
    )
    return {"posts": [serialize_post(p) for p in posts], "pagination": pagination(page, limit, total)}


@router.post("", status_code=201)
async def create_post(
    request: Request,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    """Create a post. A featured image (imageId or imageFile) is required."""
    data, files = await read_form_payload(request, ("imageFile",))
    require_fields(data, BLOG_REQUIRED_FIELDS)
    if not data.get("imageId") and not files["imageFile"]:
        raise BadRequestError("Featured image is required")
    post = validate_payload(BlogPostCreate, data).to_document()

    if files["imageFile"]:
        post["imageId"] = media.upload(files["imageFile"], FOLDERS["blog_images"]).public_id

    created = BlogPostService(store).create(post)
    return serialize_post(created)


@router.get("/categories", response_model=List[BlogCategoryResponse])
async def list_categories(store: MongoStore = Depends(get_store)):
    """
    "All" followed by every category in use or created by an admin.

    Empty values and stray ObjectId strings are left out; names differing
    only in case are listed once.
    """
    names = BlogPostService(store).categories() + BlogCategoryService(store).names()

    options = [BlogCategoryResponse(id="all", name="All")]
    seen = {"all"}
    for name in names:
        name = name.strip()
        if not name or is_object_id(name) or name.lower() in seen:
            continue
        seen.add(name.lower())
        options.append(category_option(name))
    return options


@router.post("/categories", response_model=BlogCategoryResponse, status_code=201)
async def create_category(
    request: Request,
    store: MongoStore = Depends(get_store),
    admin: dict = Depends(get_current_admin),
):
    data = await read_json_object(request)
    if not data.get("name"):
        raise BadRequestError("Category name is required")
    category = validate_payload(BlogCategoryCreate, data)

    created = BlogCategoryService(store).create(category.name)
    return category_option(created["name"])


@router.get("/related/{post_id}")
async def related_posts(
    post_id: str,
    limit: int = Query(3, ge=1, le=20),
    store: MongoStore = Depends(get_store),
):
    """Published posts in the same category, topped up with the latest others."""
    service = BlogPostService(store)
    post = get_post_or_404(service, post_id, public=False)
    return {"posts": [serialize_post(p) for p in service.related(post, limit=limit)]}


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    store: MongoStore = Depends(get_store),
    admin: Optional[dict] = Depends(get_optional_admin),
):
    post = get_post_or_404(BlogPostService(store), post_id, public=admin is None)
    return serialize_post(post)


@router.put("/{post_id}")
async def update_post(
    post_id: str,
    request: Request,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    """Update a post. A new imageFile replaces the old cover image."""
    service = BlogPostService(store)
    existing = get_post_or_404(service, post_id, public=False)

    data, files = await read_form_payload(request, ("imageFile",))
    changes = validate_payload(BlogPostUpdate, data).to_document(partial=True)

    if files["imageFile"]:
        changes["imageId"] = media.replace(files["imageFile"], existing.get("imageId"), FOLDERS["blog_images"])

    return serialize_post(service.update(existing, changes))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    store: MongoStore = Depends(get_store),
    media: MediaService = Depends(get_media_service),
    admin: dict = Depends(get_current_admin),
):
    service = BlogPostService(store)
    post = get_post_or_404(service, post_id, public=False)

    if post.get("imageId"):
        media.delete(post["imageId"])

    service.delete(post["_id"])
    return MessageResponse(message="Blog post deleted successfully")
