import pytest
from bson import ObjectId
from pydantic import ValidationError

from conftest import make_service, make_service_data
from swarseva.models.service import Service


def test_short_name_is_normalized():
    service = make_service(shortName="  Income Certificate ")
    assert service.short_name == "income_certificate"


def test_short_name_rejects_symbols():
    with pytest.raises(ValidationError):
        make_service(shortName="income/certificate")


def test_process_steps_are_ordered():
    service = make_service()
    assert [step.step_number for step in service.process_steps] == [1, 2]


def test_processing_time_bounds():
    with pytest.raises(ValidationError):
        make_service(processingTime={"minDays": 10, "maxDays": 5})


def test_unknown_category_is_rejected():
    with pytest.raises(ValidationError):
        make_service(category="space")


def test_defaults():
    data = make_service_data()
    for key in ("status", "provider", "priority"):
        data.pop(key)
    service = Service.model_validate(data)
    assert service.status == "draft"
    assert service.provider == "central"
    assert service.priority == 5
    assert service.is_active is False


def test_document_round_trip_keeps_object_id():
    object_id = ObjectId()
    service = make_service().model_copy(update={"id": str(object_id)})
    doc = service.to_document()
    assert doc["_id"] == object_id
    assert "id" not in doc
    assert doc["shortName"] == "income_certificate"
    assert doc["requirements"][0]["maxFileSizeKB"] == 500
    assert Service.from_document(doc).id == str(object_id)


def test_invalid_object_id():
    with pytest.raises(ValidationError):
        make_service(id="not-an-object-id")


def test_reference():
    service = make_service().model_copy(update={"id": "65f000000000000000000001"})
    assert service.reference() == {
        "id": "65f000000000000000000001",
        "name": "Income Certificate",
        "shortName": "income_certificate",
    }
