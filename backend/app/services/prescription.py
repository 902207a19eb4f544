"""Prescription PDF rendering."""

import logging
from datetime import date
from io import BytesIO
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    HRFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)
from xml.sax.saxutils import escape

from app.schemas.prescription import Medicine, PrescriptionRequest

logger = logging.getLogger(__name__)

CLINIC_NAME = "MedLink HealthCare"
CLINIC_ADDRESS = "123 Wellness Avenue, Pune, MH 411001"
CLINIC_CONTACT = "Contact: +91 9876543210 | Email: medlink@clinicmail.com"
DOCTOR_SPECIALTY = "General Physician"
DOCTOR_REG_NO = "MH-145263"
FOOTER_NOTE = "This is a digital prescription. Valid for pharmacy use."

SAMPLE_MEDICINES = [
    Medicine(
        medicine_name="Paracetamol 500mg",
        dosage="1 tab",
        frequency="1-1-1 (TDS)",
        duration="5 Days",
        special_instructions="After food",
    ),
    Medicine(
        medicine_name="Cough Syrup XYZ",
        dosage="2 tsp (10ml)",
        frequency="0-0-1 (HS)",
        duration="3 days",
        special_instructions="Shake well before use. May cause drowsiness.",
    ),
    Medicine(
        medicine_name="Multivitamin ABC",
        dosage="1 capsule",
        frequency="1-0-0 (OD)",
        duration="30 Days",
        special_instructions="After breakfast",
    ),
]

RX_HEADERS = ["Medicine Name", "Dosage", "Frequency", "Duration", "Instructions"]
RX_COLUMN_SHARES = [0.30, 0.15, 0.15, 0.15, 0.25]


def format_date(day: date) -> str:
    return day.strftime("%d/%m/%Y")


def display_name(doctor_name: str) -> str:
    """Signup names usually carry the title already ("Dr. John Wilson")."""
    if doctor_name.lower().startswith(("dr.", "dr ")):
        return doctor_name
    return f"Dr. {doctor_name}"


def _or(value: Optional[str], fallback: str) -> str:
    return escape(value) if value else fallback


class PrescriptionRenderer:
    def __init__(self):
        base = getSampleStyleSheet()
        self.title = ParagraphStyle("ClinicTitle", parent=base["Title"], fontSize=20, leading=24)
        self.centered = ParagraphStyle("Centered", parent=base["Normal"], alignment=TA_CENTER, fontSize=10)
        self.section = ParagraphStyle(
            "Section", parent=base["Heading2"], fontName="Helvetica-Bold", fontSize=14, spaceAfter=4
        )
        self.body = ParagraphStyle("Body", parent=base["Normal"], fontSize=10, leading=14)
        self.doctor = ParagraphStyle("Doctor", parent=self.body, fontName="Helvetica-Bold", fontSize=12)
        self.cell = ParagraphStyle("Cell", parent=base["Normal"], fontSize=9, leading=11)
        self.cell_header = ParagraphStyle("CellHeader", parent=self.cell, fontName="Helvetica-Bold")
        self.signature = ParagraphStyle("Signature", parent=self.body, alignment=TA_RIGHT)
        self.footer = ParagraphStyle("Footer", parent=self.centered, fontSize=8)

    def _separator(self):
        return HRFlowable(width="100%", thickness=0.5, color=colors.HexColor("#cccccc"), spaceBefore=6, spaceAfter=6)

    def _section(self, title: str, lines: List[str]):
        flow = [Paragraph(f"<u>{title}</u>", self.section)]
        flow.extend(Paragraph(line, self.body) for line in lines)
        flow.append(Spacer(1, 4 * mm))
        return flow

    def _rx_table(self, medicines: List[Medicine], width: float) -> Table:
        rows = [[Paragraph(h, self.cell_header) for h in RX_HEADERS]]
        for med in medicines:
            rows.append(
                [
                    Paragraph(_or(med.medicine_name, "N/A"), self.cell),
                    Paragraph(_or(med.dosage, "N/A"), self.cell),
                    Paragraph(_or(med.frequency, "N/A"), self.cell),
                    Paragraph(_or(med.duration, "N/A"), self.cell),
                    Paragraph(_or(med.special_instructions, "N/A"), self.cell),
                ]
            )
        table = Table(rows, colWidths=[width * share for share in RX_COLUMN_SHARES], repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f2f2f2")),
                ]
            )
        )
        return table

    def render(self, data: PrescriptionRequest, doctor_name: str, issued_on: Optional[date] = None) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=50,
            rightMargin=50,
            topMargin=50,
            bottomMargin=50,
            title="Prescription",
            author=doctor_name,
        )
        medicines = data.medicines or SAMPLE_MEDICINES

        story = [
            Paragraph(CLINIC_NAME, self.title),
            Paragraph(CLINIC_ADDRESS, self.centered),
            Paragraph(CLINIC_CONTACT, self.centered),
            self._separator(),
            Paragraph(f"{escape(display_name(doctor_name))}, MD ({DOCTOR_SPECIALTY})", self.doctor),
            Paragraph(f"Reg. No: {DOCTOR_REG_NO}", self.body),
            Paragraph(f"Date: {format_date(issued_on or date.today())}", self.body),
            Spacer(1, 6 * mm),
        ]
        story += self._section(
            "Patient Information",
            [
                f"Name: {_or(data.patient_name, 'N/A')}",
                f"Age / Gender: {_or(data.patient_age_gender, 'N/A')}",
                f"Address: {_or(data.patient_address, 'N/A')}",
                f"Contact: {_or(data.patient_contact, 'N/A')}",
            ],
        )
        story.append(self._separator())
        story += self._section(
            "Diagnosis / Symptoms",
            [
                f"Symptoms/Chief Complaints: {_or(data.symptoms, 'N/A')}",
                f"Preliminary Diagnosis: {_or(data.diagnosis, 'N/A')}",
            ],
        )
        story.append(self._separator())
        story.append(Paragraph("<u>Rx (Prescription)</u>", self.section))
        story.append(self._rx_table(medicines, doc.width))
        story.append(Spacer(1, 6 * mm))
        story.append(self._separator())
        story += self._section(
            "Additional Notes",
            [
                f"Diet Advice / Lifestyle Notes: {_or(data.diet_advice, 'None')}",
                f"Next Visit Date: {_or(data.next_visit_date, 'As needed')}",
            ],
        )
        story += [
            Spacer(1, 15 * mm),
            self._separator(),
            Spacer(1, 10 * mm),
            Paragraph("______________________", self.signature),
            Paragraph("Doctor's Signature", self.signature),
            Spacer(1, 10 * mm),
            Paragraph(FOOTER_NOTE, self.footer),
        ]

        doc.build(story)
        pdf = buffer.getvalue()
        logger.info(f"Rendered prescription for Dr. {doctor_name} ({len(medicines)} medicines, {len(pdf)} bytes)")
        return pdf


def render_prescription(data: PrescriptionRequest, doctor_name: str, issued_on: Optional[date] = None) -> bytes:
    return PrescriptionRenderer().render(data, doctor_name, issued_on)
