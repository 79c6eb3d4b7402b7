import pytest

from swarseva.errors import InvalidInputError
from swarseva.models.service import DocumentRequirement
from swarseva.services.document_service import document_service, file_extension

REQUIREMENTS = [
    DocumentRequirement.model_validate({
        "documentType": "aadhar",
        "name": {"en": "Aadhaar card", "hi": "आधार कार्ड"},
        "isMandatory": True,
        "allowedFileTypes": ["PDF", ".jpg"],
        "maxFileSizeKB": 500,
    }),
    DocumentRequirement.model_validate({
        "documentType": "photo",
        "name": {"en": "Photograph"},
        "isMandatory": False,
        "allowedFileTypes": ["jpg"],
    }),
    DocumentRequirement.model_validate({
        "documentType": "income",
        "name": {"en": "Income proof"},
        "isMandatory": True,
    }),
]


def test_file_extension():
    assert file_extension("scan.final.PDF") == "pdf"
    assert file_extension("noextension") == "noextension"


def test_all_documents_valid():
    result = document_service.validate(REQUIREMENTS, [
        {"type": "aadhar", "file": "aadhaar.pdf", "sizeKB": 320},
        {"type": "income", "file": "itr.docx", "sizeKB": 4000},
    ])
    assert result.valid is True
    assert result.message == "All required documents validated successfully"
    assert [doc.type for doc in result.valid_documents] == ["aadhar", "income"]


def test_missing_mandatory_document_flips_valid():
    result = document_service.validate(REQUIREMENTS, [{"type": "aadhar", "file": "a.jpg", "sizeKB": 10}], language="hi")
    assert result.valid is False
    assert result.message == "Missing mandatory documents"
    assert [(doc.type, doc.name) for doc in result.missing_mandatory] == [("income", "Income proof")]


def test_wrong_file_type():
    result = document_service.validate(REQUIREMENTS, [
        {"type": "aadhar", "file": "aadhaar.png", "sizeKB": 10},
        {"type": "income", "file": "itr.pdf", "sizeKB": 10},
    ])
    assert result.valid is False
    assert result.message == "Some documents failed validation"
    assert result.invalid_documents[0].reason == "Invalid file type. Allowed: pdf, jpg"


def test_file_too_large():
    result = document_service.validate(REQUIREMENTS, [
        {"type": "aadhar", "file": "aadhaar.pdf", "sizeKB": 501},
        {"type": "income", "file": "itr.pdf", "sizeKB": 10},
    ])
    assert result.valid is False
    assert result.invalid_documents[0].reason == "File too large. Maximum size: 500KB"


def test_unrequested_document_is_listed_but_does_not_fail():
    result = document_service.validate(REQUIREMENTS, [
        {"type": "aadhar", "file": "aadhaar.pdf", "sizeKB": 10},
        {"type": "income", "file": "itr.pdf", "sizeKB": 10},
        {"type": "passport", "file": "passport.pdf", "sizeKB": 10},
    ])
    assert result.valid is True
    assert [(doc.type, doc.reason) for doc in result.invalid_documents] == [
        ("passport", "Document type not required for this service")
    ]


def test_optional_documents_are_checked_when_submitted():
    result = document_service.validate(REQUIREMENTS, [
        {"type": "aadhar", "file": "aadhaar.pdf", "sizeKB": 10},
        {"type": "income", "file": "itr.pdf", "sizeKB": 10},
        {"type": "photo", "file": "me.gif", "sizeKB": 10},
    ])
    assert result.valid is False
    assert result.invalid_documents[0].type == "photo"


def test_submission_must_be_a_list():
    with pytest.raises(InvalidInputError):
        document_service.validate(REQUIREMENTS, {"type": "aadhar"})


def test_malformed_entries_report_their_position():
    with pytest.raises(InvalidInputError) as excinfo:
        document_service.validate(REQUIREMENTS, [
            {"type": "aadhar", "file": "a.pdf", "sizeKB": 1},
            {"type": "income", "file": "b.pdf"},
        ])
    assert excinfo.value.errors[0]["field"] == "documents.1.sizeKB"


def test_validation_is_repeatable():
    submission = [
        {"type": "aadhar", "file": "aadhaar.png", "sizeKB": 10},
        {"type": "passport", "file": "passport.pdf", "sizeKB": 10},
    ]
    first = document_service.validate(REQUIREMENTS, submission)
    second = document_service.validate(REQUIREMENTS, submission)
    assert first.model_dump(mode="json") == second.model_dump(mode="json")
    assert submission[0] == {"type": "aadhar", "file": "aadhaar.png", "sizeKB": 10}
