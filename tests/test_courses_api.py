from bson import ObjectId


def course_payload(university: dict, **overrides) -> dict:
    payload = {
        "universityId": university["id"],
        "countryId": university["countryId"],
        "programName": "MSc Computer Science",
        "studyLevel": "Postgraduate",
        "campus": "Main Campus",
        "duration": "1 year",
        "openIntakes": "September",
        "intakeYear": "2026",
        "entryRequirements": "Bachelor's degree in a related subject",
        "ieltsScore": 7.0,
        "ieltsNoBandLessThan": 6.5,
        "yearlyTuitionFees": "£38,000",
        "currency": "GBP",
        "specializations": ["Machine Learning", "Security"],
    }
    payload.update(overrides)
    return payload


def create_course(client, admin_headers, university, **overrides) -> dict:
    response = client.post("/api/courses", json=course_payload(university, **overrides), headers=admin_headers)
    assert response.status_code == 201, response.json()
    return response.json()["course"]


def test_create_course_is_populated(client, admin_headers, university) -> None:
    course = create_course(client, admin_headers, university)

    assert course["slug"] == "msc-computer-science"
    assert course["universityId"] == university["id"]
    assert course["university"]["name"] == "University of Oxford"
    assert course["country"]["currency"] == "GBP"
    assert course["published"] is True


def test_create_validates_required_fields_and_parents(client, admin_headers, country, university) -> None:
    payload = course_payload(university)
    del payload["campus"]
    missing = client.post("/api/courses", json=payload, headers=admin_headers)
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Missing required field: campus"

    unknown_uni = client.post(
        "/api/courses", json=course_payload(university, universityId=str(ObjectId())), headers=admin_headers
    )
    assert unknown_uni.status_code == 400
    assert unknown_uni.json()["detail"] == "University not found"

    other = client.post("/api/countries", json={"name": "Canada"}, headers=admin_headers).json()["country"]
    mismatch = client.post(
        "/api/courses", json=course_payload(university, countryId=other["id"]), headers=admin_headers
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "University does not belong to the specified country"

    out_of_range = client.post(
        "/api/courses", json=course_payload(university, gmatScore=900), headers=admin_headers
    )
    assert out_of_range.status_code == 400

    bad_level = client.post(
        "/api/courses", json=course_payload(university, studyLevel="Masters"), headers=admin_headers
    )
    assert bad_level.status_code == 400


def test_get_by_slug_and_id(client, admin_headers, university) -> None:
    course = create_course(client, admin_headers, university)

    by_slug = client.get("/api/courses/msc-computer-science")
    assert by_slug.status_code == 200
    assert by_slug.json()["course"]["id"] == course["id"]
    assert by_slug.json()["course"]["university"]["slug"] == "university-of-oxford"

    assert client.get(f"/api/courses/{course['id']}").status_code == 200

    missing = client.get("/api/courses/basket-weaving")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Course not found"


def test_list_filters_search_and_pagination(client, admin_headers, university) -> None:
    create_course(client, admin_headers, university)
    create_course(client, admin_headers, university, programName="BSc Physics", studyLevel="Undergraduate",
                  specializations=[])
    create_course(client, admin_headers, university, programName="MBA", entryRequirements="GMAT 650",
                  specializations=[])

    listed = client.get("/api/courses").json()
    assert [c["programName"] for c in listed["courses"]] == ["BSc Physics", "MBA", "MSc Computer Science"]
    assert listed["pagination"] == {"page": 1, "limit": 20, "total": 3, "pages": 1}

    postgraduate = client.get("/api/courses", params={"studyLevel": "Postgraduate"}).json()["courses"]
    assert {c["programName"] for c in postgraduate} == {"MBA", "MSc Computer Science"}

    by_requirement = client.get("/api/courses", params={"search": "gmat"}).json()["courses"]
    assert [c["programName"] for c in by_requirement] == ["MBA"]

    by_specialization = client.get("/api/courses", params={"search": "machine"}).json()["courses"]
    assert [c["programName"] for c in by_specialization] == ["MSc Computer Science"]

    page_two = client.get("/api/courses", params={"page": 2, "limit": 2}).json()
    assert [c["programName"] for c in page_two["courses"]] == ["MSc Computer Science"]
    assert page_two["pagination"]["pages"] == 2

    populated = client.get(
        "/api/courses", params={"universityId": university["id"], "populate": "true", "limit": 1}
    ).json()["courses"]
    assert populated[0]["university"]["name"] == "University of Oxford"


def test_update_and_delete(client, admin_headers, university) -> None:
    course = create_course(client, admin_headers, university)

    response = client.put(
        f"/api/courses/{course['id']}",
        json={"programName": "MSc Advanced Computer Science", "ieltsScore": 7.5},
        headers=admin_headers,
    )
    assert response.status_code == 200
    updated = response.json()["course"]
    assert updated["slug"] == "msc-advanced-computer-science"
    assert updated["ieltsScore"] == 7.5
    assert updated["duration"] == "1 year"

    unpublished = client.put(
        "/api/courses/msc-advanced-computer-science", json={"published": False}, headers=admin_headers
    )
    assert unpublished.status_code == 200
    assert client.get("/api/courses/msc-advanced-computer-science").status_code == 404
    assert client.get("/api/courses").json()["pagination"]["total"] == 0

    deleted = client.delete(f"/api/courses/{course['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "Course deleted successfully"


def test_bulk_import_endpoint(client, admin_headers) -> None:
    rows = [
        {
            "universityName": "New Tech",
            "countryName": "Wonderland",
            "programName": "AI",
            "studyLevel": "Postgraduate",
            "ieltsScore": "6.5",
            "ieltsNoBandLessThan": "6.0",
            "yearlyTuitionFees": "10000",
        },
        {"universityName": "New Tech", "countryName": "Wonderland", "programName": "AI"},
    ]
    response = client.post("/api/courses/bulk-import", json={"courses": rows}, headers=admin_headers)
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["success"] == 1
    assert result["failed"] == 1
    assert result["errors"][:2] == [
        "✅ Auto-created country: Wonderland",
        "✅ Auto-created university: New Tech in Wonderland",
    ]
    assert result["errors"][2] == "Row 2: Invalid IELTS scores"

    assert client.get("/api/courses/ai").json()["course"]["country"]["name"] == "Wonderland"


def test_bulk_import_requires_rows(client, admin_headers) -> None:
    for body in ({}, {"courses": []}, {"courses": "AI"}):
        response = client.post("/api/courses/bulk-import", json=body, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "No courses data provided"

    assert client.post("/api/courses/bulk-import", json={"courses": [{}]}).status_code == 401


def test_bulk_import_csv(client, admin_headers) -> None:
    sheet = (
        "universityName,countryName,programName,studyLevel,ieltsScore,ieltsNoBandLessThan,specializations\n"
        'MIT,United States,Physics,Undergraduate,7,6.5,"Quantum, Optics"\n'
        "MIT,United States,Physics,Undergraduate,7,6.5,\n"
    ).encode("utf-8")
    response = client.post(
        "/api/courses/bulk-import/csv",
        files={"file": ("courses.csv", sheet, "text/csv")},
        headers=admin_headers,
    )
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["success"] == 1
    assert result["failed"] == 1
    assert 'Row 2: Course "Physics" already exists at "MIT"' in result["errors"]

    course = client.get("/api/courses/physics").json()["course"]
    assert course["specializations"] == ["Quantum", "Optics"]
    assert course["country"]["code"] == "US"


def test_bulk_import_csv_rejects_other_files(client, admin_headers) -> None:
    response = client.post(
        "/api/courses/bulk-import/csv",
        files={"file": ("courses.xlsx", b"PK\x03\x04", "application/octet-stream")},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_null_clears_optional_field_and_rejects_required(client, admin_headers, university) -> None:
    course = create_course(client, admin_headers, university, applicationDeadline="June 30")
    assert course["applicationDeadline"] == "June 30"

    cleared = client.put(
        f"/api/courses/{course['id']}", json={"applicationDeadline": None}, headers=admin_headers
    )
    assert cleared.status_code == 200
    assert "applicationDeadline" not in cleared.json()["course"]

    rejected = client.put(f"/api/courses/{course['id']}", json={"campus": None}, headers=admin_headers)
    assert rejected.status_code == 400
    assert rejected.json()["detail"] == "campus cannot be empty"
    assert client.get(f"/api/courses/{course['id']}").json()["course"]["campus"] == "Main Campus"
