from __future__ import annotations

import copy
from typing import Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from swarseva.errors import InvalidInputError
from swarseva.main import create_app
from swarseva.models.service import Service
from swarseva.routes.services import get_service_repository
from swarseva.utils.validators import is_object_id

USER_HEADERS = {"X-User-Id": "user-1"}
ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Role": "admin"}

SERVICE_DATA = {
    "name": {"en": "Income Certificate", "hi": "आय प्रमाण पत्र"},
    "shortName": "income_certificate",
    "description": {"en": "Certificate of annual family income", "hi": "वार्षिक पारिवारिक आय का प्रमाण पत्र"},
    "category": "certificates",
    "subCategory": "revenue",
    "department": {
        "name": {"en": "Revenue Department", "hi": "राजस्व विभाग"},
        "code": "REV",
        "contactEmail": "revenue@example.gov.in",
        "contactPhone": "1800-000-000",
    },
    "status": "active",
    "provider": "state",
    "eligibilityCriteria": [
        {
            "criteriaType": "age",
            "name": {"en": "Age limit", "hi": "आयु सीमा"},
            "validationMethod": "range",
            "minValue": 18,
            "maxValue": 60,
        },
        {
            "criteriaType": "residence",
            "name": {"en": "State resident"},
            "validationMethod": "list",
            "allowedValues": ["Maharashtra", "Goa"],
        },
    ],
    "fees": [
        {
            "feeType": "application",
            "name": {"en": "Application fee", "hi": "आवेदन शुल्क"},
            "amount": 1000,
            "variableFactors": [{"factor": "income"}],
        },
        {
            "feeType": "processing",
            "name": {"en": "Processing fee"},
            "amount": 200,
            "waiver": {
                "eligibility": ["senior", "bpl"],
                "description": {"en": "Waived for senior citizens and BPL households"},
            },
        },
    ],
    "requirements": [
        {
            "documentType": "aadhar",
            "name": {"en": "Aadhaar card", "hi": "आधार कार्ड"},
            "isMandatory": True,
            "allowedFileTypes": ["pdf", "jpg"],
            "maxFileSizeKB": 500,
        },
        {
            "documentType": "photo",
            "name": {"en": "Photograph"},
            "isMandatory": False,
            "allowedFileTypes": ["jpg", "png"],
            "maxFileSizeKB": 200,
        },
    ],
    "processSteps": [
        {
            "stepNumber": 2,
            "title": {"en": "Verification"},
            "description": {"en": "Documents are verified by the tehsildar"},
            "estimatedTimeInDays": 7,
        },
        {
            "stepNumber": 1,
            "title": {"en": "Apply online"},
            "description": {"en": "Fill in the application form"},
            "requiresUserAction": True,
        },
    ],
    "processingTime": {"minDays": 7, "maxDays": 15, "averageDays": 10},
    "faqs": [
        {
            "question": {"en": "How long is it valid?", "hi": "यह कितने समय तक मान्य है?"},
            "answer": {"en": "One financial year"},
        }
    ],
    "voiceCommands": [
        {"language": "en", "triggers": ["income certificate"], "synonyms": ["salary proof"]},
        {"language": "hi", "triggers": ["आय प्रमाण पत्र"]},
    ],
    "helpUrl": "https://example.gov.in/help/income",
    "priority": 7,
}


def make_service_data(**overrides) -> Dict:
    data = copy.deepcopy(SERVICE_DATA)
    data.update(overrides)
    return data


def make_service(**overrides) -> Service:
    return Service.model_validate(make_service_data(**overrides))


class InMemoryServiceRepository:
    """Dict-backed stand-in for MongoService"""

    def __init__(self):
        self.services: Dict[str, Service] = {}
        self.batch_writes = 0

    def add(self, service: Service) -> Service:
        service = service.model_copy(update={"id": service.id or str(ObjectId())})
        self.services[service.id] = service
        return service

    async def get_service(self, identifier: str) -> Optional[Service]:
        if is_object_id(identifier) and identifier in self.services:
            return self.services[identifier]
        slug = identifier.strip().lower()
        for service in self.services.values():
            if service.short_name == slug:
                return service
        return None

    async def create_service(self, service: Service) -> Service:
        if any(existing.short_name == service.short_name for existing in self.services.values()):
            raise InvalidInputError.for_field("shortName", "A service with this shortName already exists")
        return self.add(service)

    async def replace_service(self, service: Service) -> Service:
        self.services[service.id] = service
        return service

    async def replace_services(self, services: List[Service]) -> None:
        self.batch_writes += 1
        for service in services:
            self.services[service.id] = service

    async def delete_service(self, service_id: str) -> bool:
        return self.services.pop(service_id, None) is not None

    async def find_services(self, query, skip, limit, sort_field="priority", sort_order=-1):
        matches = []
        for service in self.services.values():
            if query.status and service.status != query.status:
                continue
            if query.category and service.category != query.category:
                continue
            if query.provider and service.provider != query.provider:
                continue
            if query.state and service.state_specific and query.state not in service.applicable_states:
                continue
            if query.text:
                haystack = " ".join([service.short_name] + service.name.values()).lower()
                if query.text.lower() not in haystack:
                    continue
            matches.append(service)
        matches.sort(key=lambda service: service.priority, reverse=sort_order == -1)
        return len(matches), matches[skip:skip + limit]


@pytest.fixture
def repository():
    repo = InMemoryServiceRepository()
    repo.add(make_service())
    return repo


@pytest.fixture
def client(repository):
    app = create_app()
    app.dependency_overrides[get_service_repository] = lambda: repository
    # Not used as a context manager, so the MongoDB lifespan never runs
    return TestClient(app)
