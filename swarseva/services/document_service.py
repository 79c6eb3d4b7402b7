"""
Validation of submitted documents against a service's requirements
"""
import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from ..errors import InvalidInputError, pydantic_errors_to_fields
from ..models.multilingual import DEFAULT_LANGUAGE, resolve
from ..models.results import DocumentEntry, DocumentValidationResult, InvalidDocument, SubmittedDocument
from ..models.service import DocumentRequirement

logger = logging.getLogger(__name__)

Submission = Union[SubmittedDocument, Mapping[str, Any]]


def file_extension(filename: str) -> str:
    """Lower-cased text after the last dot (the whole name when there is none)"""
    return filename.rsplit(".", 1)[-1].lower()


class DocumentService:
    """Checks submitted documents for presence, file type and size"""

    def validate(
        self,
        requirements: List[DocumentRequirement],
        submitted: Sequence[Submission],
        language: str = DEFAULT_LANGUAGE
    ) -> DocumentValidationResult:
        """
        Validate a submission

        Args:
            requirements: The service's document requirements
            submitted: Documents as ``{type, file, sizeKB}``
            language: Language used for requirement names

        Raises:
            InvalidInputError: when the submission is not a list of documents
        """
        documents = self._parse_documents(submitted)
        result = DocumentValidationResult(valid=True, message="")

        for requirement in requirements:
            if not requirement.is_mandatory:
                continue
            if not any(doc.type == requirement.document_type for doc in documents):
                result.missing_mandatory.append(DocumentEntry(
                    type=requirement.document_type,
                    name=resolve(requirement.name, language)
                ))
                result.valid = False

        for document in documents:
            requirement = self._find_requirement(requirements, document.type)

            # NOTE: an unrequested document is reported as invalid but does
            # not fail the submission, unlike type and size mismatches.
            if requirement is None:
                result.invalid_documents.append(InvalidDocument(
                    type=document.type,
                    reason="Document type not required for this service"
                ))
                continue

            allowed = requirement.allowed_file_types
            if allowed and file_extension(document.file) not in allowed:
                result.invalid_documents.append(InvalidDocument(
                    type=document.type,
                    reason=f"Invalid file type. Allowed: {', '.join(allowed)}"
                ))
                result.valid = False
                continue

            limit = requirement.max_file_size_kb
            if limit is not None and document.size_kb > limit:
                result.invalid_documents.append(InvalidDocument(
                    type=document.type,
                    reason=f"File too large. Maximum size: {limit:g}KB"
                ))
                result.valid = False
                continue

            result.valid_documents.append(DocumentEntry(
                type=document.type,
                name=resolve(requirement.name, language)
            ))

        if result.valid:
            result.message = "All required documents validated successfully"
        elif result.missing_mandatory:
            result.message = "Missing mandatory documents"
        else:
            result.message = "Some documents failed validation"
        return result

    @staticmethod
    def _find_requirement(requirements: List[DocumentRequirement], document_type: str) -> Optional[DocumentRequirement]:
        for requirement in requirements:
            if requirement.document_type == document_type:
                return requirement
        return None

    @staticmethod
    def _parse_documents(submitted) -> List[SubmittedDocument]:
        if submitted is None or isinstance(submitted, (str, bytes, Mapping)) or not isinstance(submitted, Sequence):
            raise InvalidInputError.for_field("documents", "Documents must be an array")
        documents = []
        for index, document in enumerate(submitted):
            if isinstance(document, SubmittedDocument):
                documents.append(document)
                continue
            try:
                documents.append(SubmittedDocument.model_validate(document))
            except ValidationError as e:
                errors = [
                    {"field": f"documents.{index}.{item['field']}", "message": item["message"]}
                    for item in pydantic_errors_to_fields(e.errors())
                ]
                raise InvalidInputError("Invalid document entry", errors=errors) from e
        return documents


# Global document service instance
document_service = DocumentService()
