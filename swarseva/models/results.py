"""
Result and request models for the rules engine and catalog endpoints
"""
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import Field

from .base import CamelModel


class FailedCriterion(CamelModel):
    criteria_type: str
    criterion_name: str
    user_value: Any = None
    requirement: str


class MissingData(CamelModel):
    field: str
    criterion_name: str


class EligibilityVerdict(CamelModel):
    """Tri-state eligibility outcome: True, False or "unknown" """
    eligible: Union[bool, Literal["unknown"]]
    message: str
    failed_criteria: List[FailedCriterion] = Field(default_factory=list)
    missing_data: List[MissingData] = Field(default_factory=list)


class FeeLine(CamelModel):
    fee_type: str
    name: Optional[str] = None
    amount: float
    description: Optional[str] = None


class WaivedFee(CamelModel):
    fee_type: str
    name: Optional[str] = None
    amount: float
    reason: str


class FeeResult(CamelModel):
    total_amount: float = 0
    currency: str = "INR"
    breakdown: List[FeeLine] = Field(default_factory=list)
    waivers: List[WaivedFee] = Field(default_factory=list)
    message: str


class SubmittedDocument(CamelModel):
    type: str = Field(..., min_length=1)
    file: str = Field(..., min_length=1, description="File name including extension")
    size_kb: float = Field(..., ge=0, alias="sizeKB")


class DocumentValidationRequest(CamelModel):
    documents: List[SubmittedDocument]


class DocumentEntry(CamelModel):
    type: str
    name: Optional[str] = None


class InvalidDocument(CamelModel):
    type: str
    reason: str


class DocumentValidationResult(CamelModel):
    valid: bool
    valid_documents: List[DocumentEntry] = Field(default_factory=list)
    invalid_documents: List[InvalidDocument] = Field(default_factory=list)
    missing_mandatory: List[DocumentEntry] = Field(default_factory=list)
    message: str


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    pages: int
    has_more: bool

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        pages = (total + limit - 1) // limit if limit else 0
        return cls(total=total, page=page, limit=limit, pages=pages, has_more=page < pages)


class BatchUpdateRequest(CamelModel):
    services: List[str] = Field(..., min_length=1, description="Service ids or shortNames")
    update_data: Dict[str, Any] = Field(..., min_length=1)


class BatchFailure(CamelModel):
    identifier: str
    reason: str


class BatchUpdateResult(CamelModel):
    success: bool
    total: int
    updated: int = 0
    failed: int = 0
    not_found: int = 0
    updated_services: List[Dict[str, Any]] = Field(default_factory=list)
    failed_services: List[BatchFailure] = Field(default_factory=list)
