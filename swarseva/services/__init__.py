"""
Services package for the SwarSeva service directory
"""

from .mongo_service import MongoService, ServiceQuery, mongo_service
from .eligibility_service import EligibilityService, eligibility_service
from .fee_service import FeeService, fee_service
from .document_service import DocumentService, document_service
from .directory_service import DirectoryService, directory_service
from .catalog_service import ServiceCatalog
from .status_templates import AVAILABLE_STATUSES, get_status_update_template

__all__ = [
    "MongoService",
    "ServiceQuery",
    "mongo_service",
    "EligibilityService",
    "eligibility_service",
    "FeeService",
    "fee_service",
    "DocumentService",
    "document_service",
    "DirectoryService",
    "directory_service",
    "ServiceCatalog",
    "AVAILABLE_STATUSES",
    "get_status_update_template"
]
