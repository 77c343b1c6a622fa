"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. countries        - Study destinations
2. universities     - Institutions, each belonging to one country
3. courses          - Programs, each belonging to one university (and its country)
4. blogposts        - Articles shown on /blog
5. blogcategories   - Categories created by admins ahead of any post
6. leads            - Enquiries captured from the public site

Services work on raw documents (ObjectId _id, ObjectId references).
Call serialize_doc() before handing a document to the client.
"""

import math
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection

from careerhq.core.errors import BadRequestError, ConflictError
from careerhq.db.mongodb import MongoStore
from careerhq.services.resolver import Resolution, exact_name_pattern, resolve_entity
from careerhq.utils.slug import slugify

PUBLISHED = {"published": {"$ne": False}}


# ============================================================
# HELPERS
# ============================================================

def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict with an 'id' key."""
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key == "_id":
            out["id"] = str(value)
        elif isinstance(value, ObjectId):
            out[key] = str(value)
        else:
            out[key] = value
    return out


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: Any, field: str) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise BadRequestError(f"Invalid {field}")
    return ObjectId(value)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def case_insensitive(pattern: str) -> dict:
    return {"$regex": pattern, "$options": "i"}


def pagination(page: int, limit: int, total: int) -> dict:
    return {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit) if limit else 0}


# ============================================================
# BASE SERVICE
# ============================================================

class DocumentService:
    """Shared CRUD over one collection."""

    collection_key = ""
    name_field = "name"
    label = "Document"
    # Fields an update may change but never clear
    required_fields: Tuple[str, ...] = ("slug", "published")

    def __init__(self, store: MongoStore):
        self.store = store
        self.collection: Collection = store.collection(self.collection_key)

    def resolve(self, slug_or_id: str) -> Resolution:
        return resolve_entity(self.collection, slug_or_id, self.name_field)

    def get_by_id(self, doc_id: Any) -> Optional[dict]:
        if isinstance(doc_id, str) and not ObjectId.is_valid(doc_id):
            return None
        return self.collection.find_one({"_id": ObjectId(doc_id) if isinstance(doc_id, str) else doc_id})

    def insert(self, data: dict) -> dict:
        now = utcnow()
        doc = {**data, "createdAt": now, "updatedAt": now}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def update_fields(self, doc_id: ObjectId, changes: dict) -> Optional[dict]:
        """
        $set the given values and $unset keys sent as null.

        Raises:
            BadRequestError: a required field was sent as null
        """
        cleared = [k for k, v in changes.items() if v is None]
        for field in cleared:
            if field in self.required_fields:
                raise BadRequestError(f"{field} cannot be empty")
        update: Dict[str, Any] = {"$set": {k: v for k, v in changes.items() if v is not None}}
        update["$set"]["updatedAt"] = utcnow()
        if cleared:
            update["$unset"] = {k: "" for k in cleared}
        return self.collection.find_one_and_update(
            {"_id": doc_id},
            update,
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, doc_id: ObjectId) -> bool:
        result = self.collection.delete_one({"_id": doc_id})
        return result.deleted_count > 0

    def apply_slug(self, data: dict, existing: Optional[dict] = None) -> dict:
        """Derive the slug from the name on create, on rename, or when missing."""
        name = data.get(self.name_field)
        if existing is None:
            data["slug"] = slugify(data.get("slug") or name or "")
        elif name is not None and name != existing.get(self.name_field):
            data["slug"] = slugify(name)
        elif data.get("slug"):
            data["slug"] = slugify(data["slug"])
        elif not existing.get("slug"):
            data["slug"] = slugify(existing.get(self.name_field) or "")
        return data


# ============================================================
# COUNTRIES
# ============================================================

class CountryService(DocumentService):
    collection_key = "countries"
    label = "Country"
    required_fields = ("name", "slug", "published")

    def list(self, include_unpublished: bool = False) -> List[dict]:
        query = {} if include_unpublished else PUBLISHED
        return list(self.collection.find(query).sort("name", ASCENDING))

    def find_by_name(self, name: str) -> Optional[dict]:
        return self.collection.find_one({"name": name})

    def name_taken(self, name: str, exclude_id: Optional[ObjectId] = None) -> bool:
        query = {"name": case_insensitive(exact_name_pattern(name))}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return self.collection.find_one(query) is not None

    def create(self, data: dict) -> dict:
        if self.name_taken(data["name"]):
            raise ConflictError("Country with this name already exists")
        return self.insert(self.apply_slug(data))

    def update(self, existing: dict, changes: dict) -> dict:
        new_name = changes.get("name")
        if new_name and new_name != existing["name"] and self.name_taken(new_name, exclude_id=existing["_id"]):
            raise ConflictError("Country with this name already exists")
        return self.update_fields(existing["_id"], self.apply_slug(changes, existing))

    def counts(self, country_id: ObjectId) -> Dict[str, int]:
        """Published universities and courses in a country."""
        return {
            "universities": self.store.collection("universities").count_documents({"countryId": country_id, **PUBLISHED}),
            "courses": self.store.collection("courses").count_documents({"countryId": country_id, **PUBLISHED}),
        }


# ============================================================
# UNIVERSITIES
# ============================================================

class UniversityService(DocumentService):
    collection_key = "universities"
    label = "University"
    required_fields = ("name", "countryId", "location", "type", "slug", "published")

    def list(self, country_id: Optional[str] = None, include_unpublished: bool = False,
             limit: Optional[int] = None) -> List[dict]:
        query = {} if include_unpublished else dict(PUBLISHED)
        if country_id:
            query["countryId"] = to_object_id(country_id, "countryId")
        cursor = self.collection.find(query).sort("name", ASCENDING)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def find_in_country(self, name: str, country_id: ObjectId) -> Optional[dict]:
        return self.collection.find_one({"name": name, "countryId": country_id})

    def slug_taken(self, slug: str, exclude_id: Optional[ObjectId] = None) -> bool:
        if not slug:
            return False
        query = {"slug": slug}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return self.collection.find_one(query) is not None

    def _require_country(self, country_id: Any) -> ObjectId:
        oid = to_object_id(country_id, "countryId")
        if CountryService(self.store).get_by_id(oid) is None:
            raise BadRequestError("Country not found")
        return oid

    def create(self, data: dict) -> dict:
        data["countryId"] = self._require_country(data.get("countryId"))
        if self.find_in_country(data["name"], data["countryId"]):
            raise ConflictError("University with this name already exists in this country")
        self.apply_slug(data)
        if self.slug_taken(data["slug"]):
            raise ConflictError("University with this slug already exists")
        return self.insert(data)

    def update(self, existing: dict, changes: dict) -> dict:
        if changes.get("countryId") is not None:
            changes["countryId"] = self._require_country(changes["countryId"])
        self.apply_slug(changes, existing)
        slug = changes.get("slug")
        if slug and slug != existing.get("slug") and self.slug_taken(slug, exclude_id=existing["_id"]):
            raise ConflictError("University with this slug already exists")
        return self.update_fields(existing["_id"], changes)

    def populate(self, doc: dict, with_course_count: bool = False) -> dict:
        """Serialize and embed the owning country ('country') like a join."""
        out = serialize_doc(doc)
        country = self.store.collection("countries").find_one(
            {"_id": doc.get("countryId")},
            {"name": 1, "code": 1, "flagImageId": 1},
        )
        out["country"] = serialize_doc(country)
        if with_course_count:
            out["courses"] = self.store.collection("courses").count_documents({"universityId": doc["_id"], **PUBLISHED})
        return out


# ============================================================
# COURSES
# ============================================================

class CourseService(DocumentService):
    collection_key = "courses"
    name_field = "programName"
    label = "Course"
    required_fields = (
        "universityId", "countryId", "programName", "studyLevel", "campus", "duration", "openIntakes",
        "intakeYear", "entryRequirements", "ieltsScore", "ieltsNoBandLessThan", "yearlyTuitionFees",
        "currency", "slug", "published",
    )

    def list(self, country_id: Optional[str] = None, university_id: Optional[str] = None,
             study_level: Optional[str] = None, search: Optional[str] = None,
             include_unpublished: bool = False, page: int = 1, limit: int = 20) -> Tuple[List[dict], int]:
        query: Dict[str, Any] = {} if include_unpublished else dict(PUBLISHED)
        if country_id:
            query["countryId"] = to_object_id(country_id, "countryId")
        if university_id:
            query["universityId"] = to_object_id(university_id, "universityId")
        if study_level:
            query["studyLevel"] = study_level
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"programName": case_insensitive(pattern)},
                {"entryRequirements": case_insensitive(pattern)},
                {"specializations": case_insensitive(pattern)},
            ]
        skip = (page - 1) * limit
        docs = list(self.collection.find(query).sort("programName", ASCENDING).skip(skip).limit(limit))
        return docs, self.collection.count_documents(query)

    def find_duplicate(self, university_id: ObjectId, program_name: str, study_level: str) -> Optional[dict]:
        return self.collection.find_one({
            "universityId": university_id,
            "programName": program_name,
            "studyLevel": study_level,
        })

    def _check_parents(self, university_id: Any, country_id: Any) -> Tuple[ObjectId, ObjectId]:
        uni_oid = to_object_id(university_id, "universityId")
        country_oid = to_object_id(country_id, "countryId")
        university = UniversityService(self.store).get_by_id(uni_oid)
        if university is None:
            raise BadRequestError("University not found")
        if CountryService(self.store).get_by_id(country_oid) is None:
            raise BadRequestError("Country not found")
        if university.get("countryId") != country_oid:
            raise BadRequestError("University does not belong to the specified country")
        return uni_oid, country_oid

    def create(self, data: dict) -> dict:
        data["universityId"], data["countryId"] = self._check_parents(data.get("universityId"), data.get("countryId"))
        return self.insert(self.apply_slug(data))

    def update(self, existing: dict, changes: dict) -> dict:
        if changes.get("universityId") is not None or changes.get("countryId") is not None:
            changes["universityId"], changes["countryId"] = self._check_parents(
                changes.get("universityId") or existing["universityId"],
                changes.get("countryId") or existing["countryId"],
            )
        return self.update_fields(existing["_id"], self.apply_slug(changes, existing))

    def populate(self, doc: dict) -> dict:
        """Serialize and embed 'university' and 'country' summaries."""
        out = serialize_doc(doc)
        university = self.store.collection("universities").find_one(
            {"_id": doc.get("universityId")},
            {"name": 1, "location": 1, "ranking": 1, "website": 1, "slug": 1},
        )
        country = self.store.collection("countries").find_one(
            {"_id": doc.get("countryId")},
            {"name": 1, "code": 1, "currency": 1, "flagImageId": 1, "slug": 1},
        )
        out["university"] = serialize_doc(university)
        out["country"] = serialize_doc(country)
        return out


# ============================================================
# BLOG POSTS
# ============================================================

WORDS_PER_MINUTE = 200


def calculate_read_time(content: Any) -> str:
    """'N min read' at 200 words per minute."""
    if not isinstance(content, list):
        return "5 min read"
    words = sum(len(block.get("text", "").split()) for block in content if isinstance(block, dict))
    return f"{max(1, math.ceil(words / WORDS_PER_MINUTE))} min read"


def display_date(day: Optional[date] = None) -> str:
    """'October 9, 2026'."""
    day = day or date.today()
    return f"{day:%B} {day.day}, {day.year}"


def serialize_post(doc: Optional[dict]) -> Optional[dict]:
    out = serialize_doc(doc)
    if out is not None:
        out["readTime"] = calculate_read_time(out.get("content"))
    return out


class BlogPostService(DocumentService):
    collection_key = "blog_posts"
    name_field = "title"
    label = "Blog post"
    required_fields = ("title", "excerpt", "content", "imageId", "author", "authorRole", "category", "published")

    def list(self, category: Optional[str] = None, search: Optional[str] = None,
             include_unpublished: bool = False, page: int = 1, limit: int = 10) -> Tuple[List[dict], int]:
        query: Dict[str, Any] = {}
        if category and category != "all":
            # Category ids come from the listing page: "study-abroad" -> "study abroad"
            query["category"] = case_insensitive(re.escape(category.replace("-", " ")))
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"title": case_insensitive(pattern)},
                {"excerpt": case_insensitive(pattern)},
                {"author": case_insensitive(pattern)},
                {"category": case_insensitive(pattern)},
            ]
        if not include_unpublished:
            query["published"] = True
        skip = (page - 1) * limit
        docs = list(self.collection.find(query).sort("createdAt", DESCENDING).skip(skip).limit(limit))
        return docs, self.collection.count_documents(query)

    def related(self, post: dict, limit: int = 3) -> List[dict]:
        """Same-category posts first, topped up with other recent posts."""
        posts = list(
            self.collection.find({
                "_id": {"$ne": post["_id"]},
                "category": post.get("category"),
                "published": True,
            }).sort("createdAt", DESCENDING).limit(limit)
        )
        if len(posts) < limit:
            seen = [post["_id"]] + [p["_id"] for p in posts]
            posts.extend(
                self.collection.find({"_id": {"$nin": seen}, "published": True})
                .sort("createdAt", DESCENDING)
                .limit(limit - len(posts))
            )
        return posts

    def categories(self) -> List[str]:
        return [c for c in self.collection.distinct("category") if isinstance(c, str)]

    def create(self, data: dict) -> dict:
        data["date"] = display_date()
        return self.insert(data)

    def update(self, existing: dict, changes: dict) -> dict:
        return self.update_fields(existing["_id"], changes)


class BlogCategoryService(DocumentService):
    collection_key = "blog_categories"
    label = "Category"

    def exists(self, name: str) -> bool:
        pattern = case_insensitive(exact_name_pattern(name))
        if self.collection.find_one({"name": pattern}):
            return True
        return self.store.collection("blog_posts").find_one({"category": pattern}) is not None

    def create(self, name: str) -> dict:
        if self.exists(name):
            raise ConflictError("Category already exists")
        return self.insert({"name": name})

    def names(self) -> List[str]:
        return [doc["name"] for doc in self.collection.find({}, {"name": 1}).sort("name", ASCENDING)]


# ============================================================
# LEADS
# ============================================================

class LeadService(DocumentService):
    collection_key = "leads"
    label = "Lead"
    required_fields = ("name", "email", "phone", "status")

    def create(self, data: dict) -> dict:
        data["status"] = "new"
        return self.insert(data)

    def list(self, status: Optional[str] = None, search: Optional[str] = None,
             page: int = 1, limit: int = 10) -> Tuple[List[dict], int]:
        query: Dict[str, Any] = {}
        if status and status != "all":
            query["status"] = status
        if search:
            pattern = re.escape(search)
            query["$or"] = [
                {"name": case_insensitive(pattern)},
                {"email": case_insensitive(pattern)},
                {"program": case_insensitive(pattern)},
            ]
        total = self.collection.count_documents(query)
        skip = (page - 1) * limit
        docs = list(self.collection.find(query).sort("createdAt", DESCENDING).skip(skip).limit(limit))
        return docs, total

    def set_status(self, lead: dict, status: str) -> dict:
        return self.update_fields(lead["_id"], {"status": status})
