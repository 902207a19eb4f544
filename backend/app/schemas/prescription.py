# app/schemas/prescription.py
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Medicine(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    medicine_name: str = Field(default="", alias="medicineName")
    dosage: str = ""
    frequency: str = ""
    duration: str = ""
    special_instructions: str = Field(default="", alias="specialInstructions")


class PrescriptionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    patient_name: Optional[str] = Field(default=None, alias="patientName")
    patient_age_gender: Optional[str] = Field(default=None, alias="patientAgeGender")
    patient_address: Optional[str] = Field(default=None, alias="patientAddress")
    patient_contact: Optional[str] = Field(default=None, alias="patientContact")
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    medicines: List[Medicine] = []
    diet_advice: Optional[str] = Field(default=None, alias="dietAdvice")
    next_visit_date: Optional[str] = Field(default=None, alias="nextVisitDate")
