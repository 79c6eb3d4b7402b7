"""
Pydantic models for user profiles and the authenticated-user context
"""
from datetime import date
from typing import Any, Dict, Literal, Optional
from pydantic import ConfigDict, Field, field_validator

from .base import CamelModel


class Address(CamelModel):
    state: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class Education(CamelModel):
    level: Optional[str] = None
    institution: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class UserProfile(CamelModel):
    """Profile attributes read by the eligibility engine and fee calculator"""
    date_of_birth: Optional[date] = Field(None, description="ISO 8601 date of birth")
    age: Optional[int] = Field(None, ge=0, le=150, description="User's age")
    income: Optional[float] = Field(None, ge=0, description="Annual household income")
    gender: Optional[Literal["male", "female", "other"]] = None
    marital_status: Optional[str] = None
    occupation: Optional[str] = None
    category: Optional[str] = Field(None, description="Social category, e.g. SC/ST/OBC")
    address: Optional[Address] = None
    education: Optional[Education] = None
    has_disability: Optional[bool] = None
    is_bpl: Optional[bool] = Field(None, alias="isBPL", description="Below poverty line")
    is_student: Optional[bool] = None

    @field_validator("gender", mode="before")
    @classmethod
    def validate_gender(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_user_data(self) -> Dict[str, Any]:
        """Plain dict keyed by wire names, custom fields included, nulls dropped"""
        return self.model_dump(by_alias=True, exclude_none=True)

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "dateOfBirth": "1990-04-12",
                "age": 34,
                "income": 250000,
                "gender": "female",
                "maritalStatus": "married",
                "occupation": "farmer",
                "category": "OBC",
                "address": {"state": "Maharashtra", "district": "Pune"},
                "education": {"level": "graduate"},
                "hasDisability": False,
                "isBPL": True,
                "isStudent": False
            }
        }
    )


class CurrentUser(CamelModel):
    """Authenticated caller as asserted by the upstream gateway"""
    id: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
