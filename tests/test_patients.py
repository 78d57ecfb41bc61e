async def test_seed_only_runs_on_empty_table(client, doctor_headers):
    first = await client.post("/patients/dev/seed", headers=doctor_headers)
    assert first.json() == {"message": "Seeded 20 dummy patients", "count": 20}

    second = await client.post("/patients/dev/seed", headers=doctor_headers)
    assert second.json()["count"] == 0


async def test_patients_require_authentication(client):
    response = await client.get("/patients")
    assert response.status_code == 401
    assert response.json()["statusCode"] == 401


async def test_list_is_paginated_and_ordered_by_name(client, doctor_headers, seeded_patients):
    response = await client.get("/patients", params={"page": 2, "limit": 5}, headers=doctor_headers)

    body = response.json()
    assert body["meta"] == {
        "total": 20,
        "page": 2,
        "limit": 5,
        "totalPages": 4,
        "hasNextPage": True,
        "hasPreviousPage": True,
    }
    assert len(body["data"]) == 5

    names = [(p["lastName"], p["firstName"]) for p in seeded_patients]
    assert names == sorted(names)


async def test_search_by_name_hospital_id_and_full_name(client, doctor_headers, seeded_patients):
    by_name = await client.get("/patients/search", params={"q": "wanj"}, headers=doctor_headers)
    assert [p["firstName"] for p in by_name.json()] == ["Wanjiru"]

    by_id = await client.get("/patients/search", params={"q": "P-2025-012"}, headers=doctor_headers)
    assert [p["lastName"] for p in by_id.json()] == ["Otieno"]

    by_full_name = await client.get("/patients/search", params={"q": "ochieng otieno"}, headers=doctor_headers)
    assert by_full_name.json()[0]["fullName"] == "Ochieng Otieno"


async def test_short_search_returns_empty_list(client, doctor_headers, seeded_patients):
    response = await client.get("/patients/search", params={"q": "w"}, headers=doctor_headers)

    assert response.status_code == 200
    assert response.json() == []


async def test_recent_patients(client, doctor_headers, seeded_patients):
    response = await client.get("/patients/recent", headers=doctor_headers)
    assert len(response.json()) == 10

    limited = await client.get("/patients/recent", params={"limit": 3}, headers=doctor_headers)
    assert len(limited.json()) == 3


async def test_get_patient_by_id_and_hospital_id(client, doctor_headers, seeded_patients):
    patient = seeded_patients[0]

    by_id = await client.get(f"/patients/{patient['id']}", headers=doctor_headers)
    assert by_id.json()["patientId"] == patient["patientId"]

    by_hospital_id = await client.get(f"/patients/patient-id/{patient['patientId']}", headers=doctor_headers)
    assert by_hospital_id.json()["id"] == patient["id"]


async def test_unknown_patient_is_404(client, doctor_headers):
    response = await client.get("/patients/9999", headers=doctor_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Patient with ID 9999 not found"

    missing = await client.get("/patients/patient-id/P-0000-000", headers=doctor_headers)
    assert missing.status_code == 404


async def test_search_treats_wildcards_literally(client, doctor_headers, seeded_patients):
    for query in ("%%", "__", "P-2025-01_"):
        response = await client.get("/patients/search", params={"q": query}, headers=doctor_headers)
        assert response.json() == [], query
