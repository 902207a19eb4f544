# tests/test_prescription.py
from datetime import date

from app.schemas.prescription import PrescriptionRequest
from app.services.prescription import display_name, format_date, render_prescription


async def test_doctor_gets_pdf(client, make_user):
    doctor = await make_user("rxdoc", name="Dr. John Wilson")
    response = await client.post(
        "/prescription/generate",
        json={
            "patientName": "Robert Lee",
            "patientAgeGender": "54 / M",
            "symptoms": "Persistent cough",
            "diagnosis": "Bronchitis",
            "medicines": [
                {
                    "medicineName": "Amoxicillin 500mg",
                    "dosage": "1 cap",
                    "frequency": "1-0-1",
                    "duration": "7 days",
                    "specialInstructions": "After food",
                }
            ],
            "nextVisitDate": "2026-11-01",
        },
        headers=doctor["headers"],
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="prescription.pdf"'
    assert response.content.startswith(b"%PDF")


async def test_empty_form_still_renders(client, make_user):
    doctor = await make_user("rxempty")
    response = await client.post("/prescription/generate", json={}, headers=doctor["headers"])
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")


async def test_non_doctors_cannot_prescribe(client, make_user):
    for role in ("Patient", "Student"):
        user = await make_user(f"rx{role.lower()}", role=role)
        response = await client.post("/prescription/generate", json={}, headers=user["headers"])
        assert response.status_code == 403

    response = await client.post("/prescription/generate", json={})
    assert response.status_code == 401


def test_render_escapes_markup():
    data = PrescriptionRequest(patient_name="<b>Tom & Jerry</b>", diagnosis="x < y")
    pdf = render_prescription(data, "Jane Davis", issued_on=date(2026, 1, 2))
    assert pdf.startswith(b"%PDF")
    assert pdf.rstrip().endswith(b"%%EOF")


def test_helpers():
    assert format_date(date(2023, 5, 15)) == "15/05/2023"
    assert display_name("Jane Davis") == "Dr. Jane Davis"
    assert display_name("Dr. John Wilson") == "Dr. John Wilson"
