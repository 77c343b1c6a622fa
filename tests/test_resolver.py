import mongomock
import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from careerhq.core.errors import BadRequestError, NotFoundError
from careerhq.services.mongo_service import CountryService
from careerhq.services.resolver import find_or_404, hyphens_as_whitespace_pattern, resolve_entity


@pytest.fixture()
def universities():
    return mongomock.MongoClient()["careerhq_test"]["universities"]


class BrokenCollection:
    def find_one(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers available")


def test_valid_object_id_on_empty_collection_is_not_found(universities) -> None:
    resolution = resolve_entity(universities, "507f1f77bcf86cd799439011")
    assert not resolution.found
    assert resolution.error is None


def test_slug_match_ignores_name_casing(universities) -> None:
    universities.insert_one({"name": "HARVARD University", "slug": "harvard-university"})
    resolution = resolve_entity(universities, "harvard-university")
    assert resolution.found
    assert resolution.document["name"] == "HARVARD University"


def test_id_lookup_wins_over_matching_slug(universities) -> None:
    by_id = universities.insert_one({"name": "Oxford", "slug": "oxford"}).inserted_id
    universities.insert_one({"name": "Decoy", "slug": str(by_id)})

    resolution = resolve_entity(universities, str(by_id))
    assert resolution.document["_id"] == by_id


def test_unknown_id_falls_through_to_slug(universities) -> None:
    slug = str(ObjectId())
    universities.insert_one({"name": "Odd", "slug": slug})
    assert resolve_entity(universities, slug).document["name"] == "Odd"


def test_slug_is_tried_before_name(universities) -> None:
    universities.insert_one({"name": "new york", "slug": "nyu-old"})
    universities.insert_one({"name": "Elsewhere", "slug": "new-york"})
    assert resolve_entity(universities, "new-york").document["name"] == "Elsewhere"


def test_legacy_name_with_hyphens_as_spaces(universities) -> None:
    universities.insert_one({"name": "New   York University"})
    assert resolve_entity(universities, "new-york-university").document["name"] == "New   York University"


def test_legacy_name_containing_hyphens(universities) -> None:
    universities.insert_one({"name": "Rose-Hulman Institute"})
    assert resolve_entity(universities, "rose-hulman institute").found


def test_regex_characters_are_escaped(universities) -> None:
    universities.insert_one({"name": "Anything"})
    assert not resolve_entity(universities, ".*").found
    assert hyphens_as_whitespace_pattern("a.b-c") == r"^a\.b\s+c$"


def test_custom_name_field() -> None:
    courses = mongomock.MongoClient()["careerhq_test"]["courses"]
    courses.insert_one({"programName": "Data Science"})
    assert resolve_entity(courses, "data-science", name_field="programName").found


@pytest.mark.parametrize("candidate", ["", "   ", None, 12])
def test_empty_or_non_string_candidate_is_rejected(universities, candidate) -> None:
    with pytest.raises(BadRequestError):
        resolve_entity(universities, candidate)


def test_storage_fault_is_returned_not_raised() -> None:
    resolution = resolve_entity(BrokenCollection(), "oxford")
    assert not resolution.found
    assert resolution.error is not None
    assert resolution.or_none() is None


def test_find_or_404_hides_unpublished_from_public(store) -> None:
    service = CountryService(store)
    service.insert({"name": "Hidden", "slug": "hidden", "published": False})

    with pytest.raises(NotFoundError) as exc:
        find_or_404(service, "hidden")
    assert exc.value.message == "Country not found"

    assert find_or_404(service, "hidden", public=False)["name"] == "Hidden"


def test_find_or_404_treats_storage_fault_as_not_found(store) -> None:
    service = CountryService(store)
    service.collection = BrokenCollection()
    with pytest.raises(NotFoundError):
        find_or_404(service, "anything")
