"""
Entity Resolver - find a document by ObjectId, slug, or legacy name.

Public URLs carry either a MongoDB id or a slug. Records created before
slugs existed can still be reached through their name. Lookup order:

1. 24-hex candidate  -> _id
2. exact slug
3. name matching the candidate with each hyphen read as whitespace (case-insensitive)
4. name matching the raw candidate exactly (case-insensitive)

The first hit wins. Storage faults are not raised; they come back inside the
Resolution so the caller decides whether a fault means "not found".
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from careerhq.core.errors import BadRequestError, NotFoundError, StorageError

logger = logging.getLogger(__name__)

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


@dataclass
class Resolution:
    document: Optional[dict] = None
    error: Optional[StorageError] = None

    @property
    def found(self) -> bool:
        return self.document is not None

    def or_none(self) -> Optional[dict]:
        """Return the document, treating a storage fault as not found."""
        if self.error is not None:
            logger.error("Error finding entity by slug or ID: %s", self.error)
        return self.document


def is_object_id(value: str) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def hyphens_as_whitespace_pattern(candidate: str) -> str:
    """'new-york' -> '^new\\s+york$' with everything else escaped."""
    return "^" + r"\s+".join(re.escape(part) for part in candidate.split("-")) + "$"


def exact_name_pattern(candidate: str) -> str:
    return "^" + re.escape(candidate) + "$"


def resolve_entity(collection: Collection, slug_or_id: str, name_field: str = "name") -> Resolution:
    """
    Resolve a path parameter to exactly one document.

    Args:
        collection: collection to search
        slug_or_id: ObjectId hex string, slug, or legacy name fragment
        name_field: human-readable field used by the legacy fallbacks

    Raises:
        BadRequestError: empty or non-string candidate (before any query)
    """
    if not isinstance(slug_or_id, str) or not slug_or_id.strip():
        raise BadRequestError("Invalid identifier")

    try:
        if is_object_id(slug_or_id):
            doc = collection.find_one({"_id": ObjectId(slug_or_id)})
            if doc is not None:
                return Resolution(document=doc)

        doc = collection.find_one({"slug": slug_or_id})
        if doc is not None:
            return Resolution(document=doc)

        # Legacy records without a slug
        doc = collection.find_one({
            name_field: {"$regex": hyphens_as_whitespace_pattern(slug_or_id), "$options": "i"}
        })
        if doc is not None:
            return Resolution(document=doc)

        doc = collection.find_one({
            name_field: {"$regex": exact_name_pattern(slug_or_id), "$options": "i"}
        })
        return Resolution(document=doc)
    except PyMongoError as e:
        return Resolution(error=StorageError(str(e)))


def is_published(doc: dict) -> bool:
    """Only an explicit False hides a record; missing flag means published."""
    return doc.get("published") is not False


def find_or_404(service, slug_or_id: str, public: bool = True) -> dict:
    """
    Resolve through a collection service for an HTTP handler.

    Storage faults count as not found. With public=True an unpublished
    document is hidden too.

    Raises:
        NotFoundError: "<Entity> not found"
    """
    doc = service.resolve(slug_or_id).or_none()
    if doc is None or (public and not is_published(doc)):
        raise NotFoundError(f"{service.label} not found")
    return doc
