"""
Models package for the SwarSeva service directory
"""

from .multilingual import (
    Language,
    MultilingualText,
    RequiredMultilingualText,
    resolve
)

from .service import (
    Service,
    EligibilityCriterion,
    FeeRule,
    FeeWaiver,
    VariableFactor,
    DocumentRequirement,
    ProcessStep,
    ProcessingTime,
    Department,
    Faq,
    VoiceCommand
)

from .user import (
    UserProfile,
    Address,
    Education,
    CurrentUser
)

from .results import (
    EligibilityVerdict,
    FailedCriterion,
    MissingData,
    FeeResult,
    FeeLine,
    WaivedFee,
    SubmittedDocument,
    DocumentValidationRequest,
    DocumentValidationResult,
    Pagination,
    BatchUpdateRequest,
    BatchUpdateResult
)

__all__ = [
    # Multilingual text
    "Language",
    "MultilingualText",
    "RequiredMultilingualText",
    "resolve",

    # Service models
    "Service",
    "EligibilityCriterion",
    "FeeRule",
    "FeeWaiver",
    "VariableFactor",
    "DocumentRequirement",
    "ProcessStep",
    "ProcessingTime",
    "Department",
    "Faq",
    "VoiceCommand",

    # User models
    "UserProfile",
    "Address",
    "Education",
    "CurrentUser",

    # Results
    "EligibilityVerdict",
    "FailedCriterion",
    "MissingData",
    "FeeResult",
    "FeeLine",
    "WaivedFee",
    "SubmittedDocument",
    "DocumentValidationRequest",
    "DocumentValidationResult",
    "Pagination",
    "BatchUpdateRequest",
    "BatchUpdateResult"
]
