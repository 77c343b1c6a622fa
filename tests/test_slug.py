import pytest

from careerhq.utils.slug import generate_website, slugify


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Harvard University", "harvard-university"),
        ("  New   York  ", "new-york"),
        ("MSc -- Data_Science!", "msc-data-science"),
        ("King's College London", "kings-college-london"),
        ("---", ""),
        ("", ""),
    ],
)
def test_slugify(text: str, expected: str) -> None:
    assert slugify(text) == expected


def test_slugify_non_string_yields_empty() -> None:
    assert slugify(None) == ""  # type: ignore[arg-type]
    assert slugify(42) == ""  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "text",
    ["Harvard University", "İstanbul Teknik", "a__b--c  d", "École Polytechnique (Paris)", "  -x- "],
)
def test_slugify_is_idempotent(text: str) -> None:
    once = slugify(text)
    assert slugify(once) == once


def test_generate_website() -> None:
    assert generate_website("New Tech") == "newtech.edu"
    assert generate_website("The Very Long University Name Of Somewhere") == "theverylonguniversit.edu"


def test_slugify_drops_non_ascii_letters() -> None:
    assert slugify("Côte d'Ivoire") == "cte-divoire"
    assert slugify("Université de Montréal") == "universit-de-montral"
