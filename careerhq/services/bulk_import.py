"""
Bulk Course Importer

Takes spreadsheet-style rows (all values loosely typed, usually strings) and
creates one course per row. Missing countries and universities are created
on the fly with placeholder details so admins can fill them in later.

Each row stands alone: a bad row is recorded in the result and the batch
moves on. Rows that succeeded stay committed whatever happens afterwards.

The find-or-create steps are check-then-insert without a transaction; two
imports racing on the same new country can both create it.
"""

import csv
import io
import logging
import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from careerhq.core.errors import summarize_validation_error
from careerhq.db.mongodb import MongoStore
from careerhq.schemas.schemas import STUDY_LEVELS, BulkImportResult, CourseCreate
from careerhq.services.mongo_service import CountryService, CourseService, UniversityService
from careerhq.utils.slug import generate_website

logger = logging.getLogger(__name__)

# name -> (code, currency, flag)
KNOWN_COUNTRIES = {
    "United States": ("US", "USD", "🇺🇸"),
    "United Kingdom": ("UK", "GBP", "🇬🇧"),
    "Canada": ("CA", "CAD", "🇨🇦"),
    "Australia": ("AU", "AUD", "🇦🇺"),
    "Germany": ("DE", "EUR", "🇩🇪"),
    "France": ("FR", "EUR", "🇫🇷"),
    "Ireland": ("IE", "EUR", "🇮🇪"),
    "New Zealand": ("NZ", "NZD", "🇳🇿"),
    "Netherlands": ("NL", "EUR", "🇳🇱"),
    "Switzerland": ("CH", "CHF", "🇨🇭"),
}
DEFAULT_FLAG = "🌍"

LIST_FIELDS = ["scholarships", "careerProspects", "accreditation", "specializations"]
OPTIONAL_SCORES = ["pteScore", "pteNoBandLessThan", "toeflScore", "duolingo", "gmatScore", "greScore"]


def clean(value: Any) -> str:
    return "" if value is None else str(value).strip()


def parse_number(value: Any) -> Optional[float]:
    text = clean(value)
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    # "nan" and "inf" parse but are not scores
    return number if math.isfinite(number) else None


def split_list(value: Any) -> List[str]:
    """'A, B,,C' -> ['A', 'B', 'C']"""
    return [item.strip() for item in clean(value).split(",") if item.strip()]


def country_defaults(name: str) -> dict:
    code, currency, flag = KNOWN_COUNTRIES.get(name, (name[:2].upper(), "USD", DEFAULT_FLAG))
    return {
        "name": name,
        "code": code,
        "currency": currency,
        "flag": flag,
        "language": "English",
        "timezone": "UTC+0",
        "description": f"Auto-created country: {name}",
        "published": True,
    }


class BulkCourseImporter:
    """
    Usage:
        result = BulkCourseImporter(store).run(rows)
        result.success, result.failed, result.errors
    """

    def __init__(self, store: MongoStore):
        self.countries = CountryService(store)
        self.universities = UniversityService(store)
        self.courses = CourseService(store)

    def run(self, rows: Iterable[Any]) -> BulkImportResult:
        result = BulkImportResult()
        for row_number, row in enumerate(rows, start=1):
            try:
                error = self._import_row(row, result)
            except ValidationError as e:
                error = summarize_validation_error(e)
            except Exception as e:
                logger.warning("Bulk import row %d failed: %s", row_number, e)
                error = str(e) or type(e).__name__
            if error is None:
                result.success += 1
            else:
                result.failed += 1
                result.errors.append(f"Row {row_number}: {error}")
        logger.info("Bulk import finished: %d created, %d failed", result.success, result.failed)
        return result

    def _import_row(self, row: Any, result: BulkImportResult) -> Optional[str]:
        """Create one course. Returns a failure reason, or None on success."""
        if not isinstance(row, dict):
            row = {}
        university_name = clean(row.get("universityName"))
        country_name = clean(row.get("countryName"))
        program_name = clean(row.get("programName"))
        if not university_name or not country_name or not program_name:
            return "Missing required fields (university, country, or program name)"

        country = self._get_or_create_country(country_name, result)
        university = self._get_or_create_university(university_name, country, result)

        ielts_score = parse_number(row.get("ieltsScore"))
        ielts_band = parse_number(row.get("ieltsNoBandLessThan"))
        if ielts_score is None or ielts_band is None:
            return "Invalid IELTS scores"

        study_level = clean(row.get("studyLevel"))
        if study_level not in STUDY_LEVELS:
            return f'Invalid study level "{study_level}"'

        if self.courses.find_duplicate(university["_id"], program_name, study_level):
            return f'Course "{program_name}" already exists at "{university_name}"'

        course = CourseCreate.model_validate({
            "universityId": str(university["_id"]),
            "countryId": str(country["_id"]),
            "programName": program_name,
            "studyLevel": study_level,
            "campus": clean(row.get("campus")) or "Main Campus",
            "duration": clean(row.get("duration")) or "Not specified",
            "openIntakes": clean(row.get("openIntakes")) or "Not specified",
            "intakeYear": clean(row.get("intakeYear")) or str(date.today().year),
            "entryRequirements": clean(row.get("entryRequirements")) or "Not specified",
            "ieltsScore": ielts_score,
            "ieltsNoBandLessThan": ielts_band,
            "yearlyTuitionFees": clean(row.get("yearlyTuitionFees")) or "Contact University",
            "currency": clean(row.get("currency")) or "USD",
            "applicationDeadline": clean(row.get("applicationDeadline")) or None,
            "workExperience": clean(row.get("workExperience")) or None,
            **{field: split_list(row.get(field)) for field in LIST_FIELDS},
            **{field: parse_number(row.get(field)) for field in OPTIONAL_SCORES},
        })
        self.courses.create(course.to_document())
        return None

    def _get_or_create_country(self, name: str, result: BulkImportResult) -> dict:
        country = self.countries.find_by_name(name)
        if country is None:
            country = self.countries.insert(self.countries.apply_slug(country_defaults(name)))
            result.errors.append(f"✅ Auto-created country: {name}")
        return country

    def _get_or_create_university(self, name: str, country: dict, result: BulkImportResult) -> dict:
        university = self.universities.find_in_country(name, country["_id"])
        if university is None:
            university = self.universities.insert(self.universities.apply_slug({
                "name": name,
                "countryId": country["_id"],
                "location": country["name"],
                "type": "Public",
                "description": f"Auto-created university: {name}",
                "website": generate_website(name),
                "campusSize": "Not specified",
                "studentPopulation": "Not specified",
                "facilities": ["Library", "Student Center", "Sports Facilities"],
                "tags": [],
                "published": True,
            }))
            result.errors.append(f"✅ Auto-created university: {name} in {country['name']}")
        return university


def parse_course_csv(text: str) -> List[Dict[str, str]]:
    """
    Parse an import sheet exported as CSV.

    The header row names the fields (universityName, countryName, ...).
    Blank lines and rows with fewer cells than headers are skipped.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    headers: Optional[List[str]] = None
    rows = []
    for cells in reader:
        if not any(cell.strip() for cell in cells):
            continue
        if headers is None:
            headers = [cell.strip() for cell in cells]
            continue
        if len(cells) < len(headers):
            continue
        rows.append({header: cells[i].strip() for i, header in enumerate(headers) if header})
    return rows
