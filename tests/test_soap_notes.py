import pytest
from sqlalchemy import func, select

from app.system_models.patient_model.patient_model import Patient
from app.system_models.soap_note_model.soap_note_model import SoapNote

NOTE = {
    "symptoms": "Fever and headache for three days",
    "physicalExamination": "Temp 38.9C, no neck stiffness",
    "diagnosis": "Suspected malaria",
    "management": "mRDT, start artemether-lumefantrine",
}


@pytest.fixture()
def create_note(client, doctor_headers, seeded_patients):
    async def _create(headers=None, patient_index=0, **overrides):
        payload = {**NOTE, "patientId": seeded_patients[patient_index]["id"], **overrides}
        response = await client.post("/soap-notes", json=payload, headers=headers or doctor_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


async def _note_count(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(SoapNote))


async def test_create_note_for_unknown_patient_persists_nothing(client, doctor_headers, session_factory):
    response = await client.post("/soap-notes", json={**NOTE, "patientId": 4242}, headers=doctor_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Patient with ID 4242 not found"
    assert await _note_count(session_factory) == 0


async def test_create_note(create_note, seeded_patients, session_factory):
    note = await create_note(icd10Code="b54")

    assert note["status"] == "pending"
    assert note["wasEdited"] is False
    assert note["icd10Code"] == "B54"
    assert note["patient"]["patientId"] == seeded_patients[0]["patientId"]
    assert note["createdBy"]["email"] == "doctor@afyascribe.co.ke"
    assert note["editHistory"] is None

    async with session_factory() as session:
        patient = await session.get(Patient, seeded_patients[0]["id"])
        assert patient.last_visit is not None


async def test_create_note_rejects_invalid_icd10_code(client, doctor_headers, seeded_patients):
    payload = {**NOTE, "patientId": seeded_patients[0]["id"], "icd10Code": "MALARIA"}

    response = await client.post("/soap-notes", json=payload, headers=doctor_headers)

    assert response.status_code == 400


async def test_create_note_requires_all_sections(client, doctor_headers, seeded_patients):
    payload = {**NOTE, "patientId": seeded_patients[0]["id"]}
    del payload["management"]

    response = await client.post("/soap-notes", json=payload, headers=doctor_headers)

    assert response.status_code == 400
    assert response.json()["validationErrors"]


async def test_content_update_records_history(client, doctor_headers, create_note):
    note = await create_note()

    response = await client.patch(
        f"/soap-notes/{note['id']}",
        json={"diagnosis": "Uncomplicated falciparum malaria", "symptoms": NOTE["symptoms"]},
        headers=doctor_headers,
    )

    updated = response.json()
    assert updated["wasEdited"] is True
    assert updated["diagnosis"] == "Uncomplicated falciparum malaria"
    assert updated["lastEditedByName"] == "Amina Wekesa"
    assert updated["lastEditedAt"] is not None

    history = updated["editHistory"]
    assert len(history) == 1
    # Symptoms were sent unchanged, so only the diagnosis is listed
    assert history[0]["changes"] == [
        {"field": "diagnosis", "oldValue": "Suspected malaria", "newValue": "Uncomplicated falciparum malaria"}
    ]
    assert history[0]["editedBy"] == updated["createdById"]


async def test_unchanged_update_is_a_no_op(client, doctor_headers, create_note):
    note = await create_note()

    response = await client.patch(f"/soap-notes/{note['id']}", json=dict(NOTE), headers=doctor_headers)

    assert response.status_code == 200
    assert response.json()["wasEdited"] is False
    assert response.json()["editHistory"] is None


async def test_history_accumulates_across_edits(client, doctor_headers, create_note):
    note = await create_note()

    await client.patch(f"/soap-notes/{note['id']}", json={"management": "Admit for observation"}, headers=doctor_headers)
    await client.patch(f"/soap-notes/{note['id']}", json={"management": "Admit for observation"}, headers=doctor_headers)
    await client.patch(
        f"/soap-notes/{note['id']}",
        json={"physicalExamination": "Temp 37.8C", "icd10Code": "B50.9"},
        headers=doctor_headers,
    )

    response = await client.get(f"/soap-notes/{note['id']}/history", headers=doctor_headers)
    history = response.json()

    assert history["wasEdited"] is True
    assert history["lastEditedByName"] == "Amina Wekesa"
    entries = history["editHistory"]
    assert len(entries) == 2
    assert entries[0]["editedBy"] == note["createdById"]
    assert [c["field"] for c in entries[0]["changes"]] == ["management"]
    assert [c["field"] for c in entries[1]["changes"]] == ["physicalExamination", "icd10Code"]
    assert entries[1]["changes"][1] == {"field": "icd10Code", "oldValue": None, "newValue": "B50.9"}


async def test_notes_are_private_to_their_author(client, doctor_headers, create_note, register, login):
    note = await create_note()
    await register("nurse@afyascribe.co.ke", role="nurse", first_name="Halima", last_name="Achieng")
    nurse_headers = await login("nurse@afyascribe.co.ke")
    url = f"/soap-notes/{note['id']}"

    responses = [
        await client.get(url, headers=nurse_headers),
        await client.patch(url, json={"diagnosis": "Tampered"}, headers=nurse_headers),
        await client.patch(f"{url}/status", json={"status": "archived"}, headers=nurse_headers),
        await client.get(f"{url}/history", headers=nurse_headers),
    ]

    assert [r.status_code for r in responses] == [404, 404, 404, 404]
    assert responses[0].json()["message"] == f"SOAP note with ID {note['id']} not found"

    unchanged = (await client.get(url, headers=doctor_headers)).json()
    assert unchanged["diagnosis"] == NOTE["diagnosis"]
    assert unchanged["status"] == "pending"
    assert unchanged["wasEdited"] is False


async def test_status_update_does_not_mark_edited(client, doctor_headers, create_note):
    note = await create_note()

    response = await client.patch(
        f"/soap-notes/{note['id']}/status", json={"status": "submitted"}, headers=doctor_headers
    )

    body = response.json()
    assert body["status"] == "submitted"
    assert body["submittedAt"] is not None
    assert body["wasEdited"] is False
    assert body["editHistory"] is None


async def test_status_update_rejects_unknown_status(client, doctor_headers, create_note):
    note = await create_note()

    response = await client.patch(
        f"/soap-notes/{note['id']}/status", json={"status": "deleted"}, headers=doctor_headers
    )

    assert response.status_code == 400


async def test_list_filters_and_paginates(client, doctor_headers, create_note, register, login):
    await create_note(patient_index=0)
    second = await create_note(patient_index=1)
    await create_note(patient_index=2)
    await client.patch(f"/soap-notes/{second['id']}/status", json={"status": "reviewed"}, headers=doctor_headers)

    # Another user's notes are not listed
    await register("other@afyascribe.co.ke")
    await create_note(headers=await login("other@afyascribe.co.ke"))

    everything = await client.get("/soap-notes", params={"limit": 2}, headers=doctor_headers)
    body = everything.json()
    assert body["meta"]["total"] == 3
    assert body["meta"]["totalPages"] == 2
    assert body["meta"]["hasNextPage"] is True
    assert len(body["data"]) == 2

    reviewed = await client.get("/soap-notes", params={"status": "reviewed"}, headers=doctor_headers)
    assert [n["id"] for n in reviewed.json()["data"]] == [second["id"]]

    by_name = await client.get(
        "/soap-notes", params={"patientName": second["patient"]["firstName"]}, headers=doctor_headers
    )
    assert second["id"] in [n["id"] for n in by_name.json()["data"]]

    ascending = await client.get("/soap-notes", params={"sortOrder": "ASC"}, headers=doctor_headers)
    ids = [n["id"] for n in ascending.json()["data"]]
    assert ids == sorted(ids)


async def test_notes_for_patient(client, doctor_headers, create_note, seeded_patients):
    await create_note(patient_index=3)
    await create_note(patient_index=3)
    await create_note(patient_index=4)

    response = await client.get(f"/soap-notes/patient/{seeded_patients[3]['id']}", headers=doctor_headers)

    assert response.json()["meta"]["total"] == 2
    assert (await client.get("/soap-notes/patient/9999", headers=doctor_headers)).status_code == 404


async def test_statistics(client, doctor_headers, create_note):
    first = await create_note()
    await create_note()
    await client.patch(f"/soap-notes/{first['id']}/status", json={"status": "submitted"}, headers=doctor_headers)

    response = await client.get("/soap-notes/statistics", headers=doctor_headers)

    assert response.json() == {"total": 2, "byStatus": {"pending": 1, "submitted": 1}}


async def test_only_author_can_delete(client, doctor_headers, create_note, register, login, session_factory):
    note = await create_note()
    await register("intruder@afyascribe.co.ke")
    other_headers = await login("intruder@afyascribe.co.ke")

    forbidden = await client.delete(f"/soap-notes/{note['id']}", headers=other_headers)
    assert forbidden.status_code == 404

    deleted = await client.delete(f"/soap-notes/{note['id']}", headers=doctor_headers)
    assert deleted.status_code == 204
    assert (await client.get(f"/soap-notes/{note['id']}", headers=doctor_headers)).status_code == 404
    assert await _note_count(session_factory) == 0


async def test_patient_name_filter_treats_wildcards_literally(client, doctor_headers, create_note):
    await create_note()

    response = await client.get("/soap-notes", params={"patientName": "%"}, headers=doctor_headers)

    assert response.json()["meta"]["total"] == 0
