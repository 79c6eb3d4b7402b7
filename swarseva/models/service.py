"""
Pydantic models for government services and their embedded rule sets
"""
import re
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, get_args
from bson import ObjectId
from pydantic import AliasChoices, Field, field_validator, model_validator

from .base import CamelModel
from .multilingual import Language, MultilingualText, RequiredMultilingualText


CriteriaType = Literal[
    "age", "income", "residence", "education", "gender",
    "marital", "occupation", "category", "disability", "other"
]
ValidationMethod = Literal["range", "exact", "minimum", "maximum", "list", "boolean", "custom"]
FeeType = Literal["application", "processing", "certification", "renewal", "late", "priority", "other"]
DocumentType = Literal[
    "aadhar", "pan", "voter", "driving", "passport", "income", "residence",
    "photo", "birth", "caste", "education", "medical", "bank", "other"
]
DocumentCheck = Literal["none", "format", "expiry", "photo", "digital"]
ServiceCategory = Literal[
    "health", "education", "employment", "finance", "welfare",
    "agriculture", "housing", "legal", "transport", "utilities",
    "business", "certificates", "pension", "taxes", "other"
]
ServiceStatus = Literal["draft", "active", "inactive", "deprecated"]
Provider = Literal["central", "state", "local", "private"]
AccessLevel = Literal["public", "authenticated", "eligible", "restricted"]

SERVICE_CATEGORIES = list(get_args(ServiceCategory))

SLUG_PATTERN = re.compile(r"^[a-z0-9_-]+$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")

# Fields that batch updates may never touch
RESTRICTED_UPDATE_FIELDS = {"id", "_id", "shortName", "short_name", "createdBy", "created_by", "createdAt", "created_at"}


def normalize_slug(value: str) -> str:
    """Trim, collapse whitespace to underscores and lower-case a shortName"""
    return re.sub(r"\s+", "_", value.strip()).lower()


class EligibilityCriterion(CamelModel):
    """A single structured eligibility predicate"""
    criteria_type: CriteriaType = Field(..., description="Which profile attribute is checked")
    name: RequiredMultilingualText
    description: Optional[MultilingualText] = None
    min_value: Any = None
    max_value: Any = None
    allowed_values: List[str] = Field(default_factory=list)
    validation_method: ValidationMethod = "range"
    custom_field: Optional[str] = Field(None, description="Profile key read by 'other' criteria")

    @model_validator(mode="after")
    def check_method_arguments(self):
        method = self.validation_method
        if method == "range" and self.min_value is None and self.max_value is None:
            raise ValueError("range validation requires minValue or maxValue")
        if method in ("exact", "minimum") and self.min_value is None:
            raise ValueError(f"{method} validation requires minValue")
        if method == "maximum" and self.max_value is None:
            raise ValueError("maximum validation requires maxValue")
        if method == "list" and not self.allowed_values:
            raise ValueError("list validation requires allowedValues")
        if self.custom_field is not None and self.criteria_type != "other":
            raise ValueError("customField is only supported for 'other' criteria")
        return self


class VariableFactor(CamelModel):
    factor: str
    calculation: Optional[str] = None


class FeeWaiver(CamelModel):
    eligibility: List[str] = Field(default_factory=list, description="Waiver category tags")
    description: Optional[MultilingualText] = None

    @field_validator("eligibility")
    @classmethod
    def normalize_tags(cls, v):
        return [tag.strip().lower() for tag in v if tag and tag.strip()]


class FeeRule(CamelModel):
    """A fee charged by a service, with optional waiver and adjustments"""
    fee_type: FeeType
    name: RequiredMultilingualText
    description: Optional[MultilingualText] = None
    amount: float = Field(..., ge=0)
    currency: str = Field(default="INR")
    variable_factors: List[VariableFactor] = Field(default_factory=list)
    waiver: Optional[FeeWaiver] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        v = v.strip().upper()
        if not CURRENCY_PATTERN.match(v):
            raise ValueError("Currency must be a 3-letter ISO code")
        return v


class DocumentRequirement(CamelModel):
    """A document the applicant has to submit"""
    document_type: DocumentType
    name: RequiredMultilingualText
    description: Optional[MultilingualText] = None
    is_mandatory: bool = True
    validation_rules: DocumentCheck = "none"
    allowed_file_types: List[str] = Field(default_factory=list)
    max_file_size_kb: Optional[float] = Field(None, gt=0, alias="maxFileSizeKB")

    @field_validator("allowed_file_types")
    @classmethod
    def normalize_extensions(cls, v):
        return [ext.strip().lstrip(".").lower() for ext in v if ext and ext.strip()]


class ProcessStep(CamelModel):
    step_number: int = Field(..., ge=1)
    title: RequiredMultilingualText
    description: RequiredMultilingualText
    estimated_time_in_days: Optional[float] = Field(None, ge=0)
    responsible_department: Optional[str] = None
    requires_user_action: bool = False
    user_action_details: Optional[MultilingualText] = None


class ProcessingTime(CamelModel):
    min_days: Optional[float] = Field(None, ge=0)
    max_days: Optional[float] = Field(None, ge=0)
    average_days: Optional[float] = Field(None, ge=0)
    description: Optional[MultilingualText] = None

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_days is not None and self.max_days is not None and self.min_days > self.max_days:
            raise ValueError("minDays cannot exceed maxDays")
        return self


class Department(CamelModel):
    name: RequiredMultilingualText
    code: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    website: Optional[str] = None


class Faq(CamelModel):
    question: RequiredMultilingualText
    answer: RequiredMultilingualText


class VoiceCommand(CamelModel):
    language: Language = Field(default=Language.EN, validate_default=True)
    triggers: List[str] = Field(..., min_length=1)
    examples: List[str] = Field(default_factory=list)
    synonyms: List[str] = Field(default_factory=list)
    response_template: Optional[str] = None


class Service(CamelModel):
    """A government service, the aggregate root of the directory"""
    id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("_id", "id"),
        serialization_alias="id"
    )
    name: RequiredMultilingualText
    short_name: str = Field(..., description="Unique, immutable slug")
    description: RequiredMultilingualText
    category: ServiceCategory
    sub_category: Optional[str] = None
    requirements: List[DocumentRequirement] = Field(default_factory=list)
    process_steps: List[ProcessStep] = Field(default_factory=list)
    eligibility_criteria: List[EligibilityCriterion] = Field(default_factory=list)
    fees: List[FeeRule] = Field(default_factory=list)
    processing_time: ProcessingTime = Field(default_factory=ProcessingTime)
    status: ServiceStatus = "draft"
    department: Department
    provider: Provider = "central"
    state_specific: bool = False
    applicable_states: List[str] = Field(default_factory=list)
    service_url: Optional[str] = None
    help_url: Optional[str] = None
    faqs: List[Faq] = Field(default_factory=list)
    voice_commands: List[VoiceCommand] = Field(default_factory=list)
    access_level: AccessLevel = "authenticated"
    priority: int = Field(default=5, ge=1, le=10)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_object_id(cls, v):
        if v is None:
            return v
        if isinstance(v, ObjectId):
            return str(v)
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid ObjectId format")
        return str(v)

    @field_validator("short_name", mode="before")
    @classmethod
    def validate_short_name(cls, v):
        if not isinstance(v, str):
            raise ValueError("shortName must be a string")
        slug = normalize_slug(v)
        if not SLUG_PATTERN.match(slug):
            raise ValueError("shortName can only contain letters, numbers, dashes and underscores")
        return slug

    @field_validator("process_steps")
    @classmethod
    def sort_process_steps(cls, v):
        return sorted(v, key=lambda step: step.step_number)

    @field_validator("applicable_states")
    @classmethod
    def strip_states(cls, v):
        return [state.strip() for state in v if state and state.strip()]

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def reference(self) -> Dict[str, Any]:
        """Compact identity block embedded in API responses"""
        return {"id": self.id, "name": self.name.en, "shortName": self.short_name}

    def to_document(self) -> Dict[str, Any]:
        """Serialize for MongoDB, with ``_id`` as an ObjectId"""
        doc = self.model_dump(by_alias=True, exclude={"id"})
        if self.id:
            doc["_id"] = ObjectId(self.id)
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Service":
        return cls.model_validate(doc)
