# 📦 /schemas/schemas.py

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional

from engine.features import NO_PREFERENCE
from engine.matcher import PatientPreferences

REQUIRED_MATCH_FIELDS = (
    "areaOfConcern",
    "location",
    "therapistGender",
    "language",
    "paymentMethod",
    "availability",
)

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class MatchRequest(CamelModel):
    area_of_concern: List[str] = []
    treatment_modality: List[str] = []
    location: str = ""
    therapist_gender: str = ""
    therapist_ethnicity: str = NO_PREFERENCE
    therapist_religion: str = NO_PREFERENCE
    language: str = ""
    payment_method: str = ""
    availability: List[str] = []

    def missing_fields(self) -> List[str]:
        """Required request fields that are absent or empty."""
        values = self.model_dump(by_alias=True)
        return [name for name in REQUIRED_MATCH_FIELDS if not values.get(name)]

    def to_preferences(self) -> PatientPreferences:
        return PatientPreferences(
            area_of_concern=self.area_of_concern,
            treatment_modality=self.treatment_modality,
            location=self.location,
            therapist_gender=self.therapist_gender,
            therapist_ethnicity=self.therapist_ethnicity,
            therapist_religion=self.therapist_religion,
            language=self.language,
            payment_method=self.payment_method,
            availability=self.availability,
        )

class Demographics(BaseModel):
    gender: str
    ethnicity: str
    religion: str

class ProviderMatch(CamelModel):
    name: str
    specialties: List[str]
    modalities: List[str]
    location: List[str]
    demographics: Demographics
    availability: int
    languages: List[str]
    bio: str
    sexual_orientation: str
    available_times: List[str]
    payment_methods: List[str]
    match_score: int

class MatchResponse(BaseModel):
    status: str
    data: List[ProviderMatch]

class ExplainResponse(BaseModel):
    status: str
    data: dict

class CatalogReloadResponse(BaseModel):
    status: str
    providers: int

class HealthCheckResponse(BaseModel):
    status: str
    message: str
    version: str

class ErrorResponse(BaseModel):
    status: str
    message: str
    info: Optional[str | dict] = None
