"""
Read-side projections and rules-engine entry points for a Service
"""
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..models.multilingual import DEFAULT_LANGUAGE, resolve
from ..models.results import DocumentValidationResult, EligibilityVerdict, FeeResult
from ..models.service import Service
from .document_service import Submission, document_service
from .eligibility_service import UserData, eligibility_service
from .fee_service import DEFAULT_CURRENCY, fee_service
from .status_templates import get_status_update_template


class DirectoryService:
    """Projections of a Service for API consumers"""

    def check_eligibility(
        self,
        service: Service,
        user_data: UserData,
        today: Optional[date] = None,
        language: str = DEFAULT_LANGUAGE
    ) -> EligibilityVerdict:
        return eligibility_service.evaluate(service.eligibility_criteria, user_data, today=today, language=language)

    def calculate_fees(self, service: Service, user_data: UserData, language: str = DEFAULT_LANGUAGE) -> FeeResult:
        return fee_service.calculate(service.fees, user_data, language=language)

    def validate_documents(
        self,
        service: Service,
        documents: Sequence[Submission],
        language: str = DEFAULT_LANGUAGE
    ) -> DocumentValidationResult:
        return document_service.validate(service.requirements, documents, language=language)

    def get_status_update_template(self, service: Service, status: str, language: str = DEFAULT_LANGUAGE) -> Dict[str, Any]:
        return get_status_update_template(service, status, language)

    def get_details_in_language(self, service: Service, language: str = DEFAULT_LANGUAGE) -> Dict[str, Any]:
        """Full service view with every multilingual field resolved"""
        def text(field):
            return resolve(field, language)

        return {
            "id": service.id,
            "name": text(service.name),
            "shortName": service.short_name,
            "description": text(service.description),
            "category": service.category,
            "subCategory": service.sub_category,
            "requirements": [
                {
                    "documentType": req.document_type,
                    "name": text(req.name),
                    "description": text(req.description),
                    "isMandatory": req.is_mandatory,
                    "validationRules": req.validation_rules,
                    "allowedFileTypes": req.allowed_file_types,
                    "maxFileSizeKB": req.max_file_size_kb,
                }
                for req in service.requirements
            ],
            "processSteps": [
                {
                    "stepNumber": step.step_number,
                    "title": text(step.title),
                    "description": text(step.description),
                    "estimatedTimeInDays": step.estimated_time_in_days,
                    "responsibleDepartment": step.responsible_department,
                    "requiresUserAction": step.requires_user_action,
                    "userActionDetails": text(step.user_action_details),
                }
                for step in service.process_steps
            ],
            "eligibilityCriteria": [
                {
                    "criteriaType": criterion.criteria_type,
                    "name": text(criterion.name),
                    "description": text(criterion.description),
                    "minValue": criterion.min_value,
                    "maxValue": criterion.max_value,
                    "allowedValues": criterion.allowed_values,
                    "validationMethod": criterion.validation_method,
                }
                for criterion in service.eligibility_criteria
            ],
            "fees": [
                {
                    "feeType": fee.fee_type,
                    "name": text(fee.name),
                    "description": text(fee.description),
                    "amount": fee.amount,
                    "currency": fee.currency,
                    "variableFactors": [factor.model_dump() for factor in fee.variable_factors],
                    "waiver": {
                        "eligibility": fee.waiver.eligibility,
                        "description": text(fee.waiver.description),
                    } if fee.waiver else None,
                }
                for fee in service.fees
            ],
            "processingTime": {
                "minDays": service.processing_time.min_days,
                "maxDays": service.processing_time.max_days,
                "averageDays": service.processing_time.average_days,
                "description": text(service.processing_time.description),
            },
            "department": {
                "name": text(service.department.name),
                "code": service.department.code,
                "contactEmail": service.department.contact_email,
                "contactPhone": service.department.contact_phone,
                "website": service.department.website,
            },
            "status": service.status,
            "provider": service.provider,
            "stateSpecific": service.state_specific,
            "applicableStates": service.applicable_states,
            "serviceUrl": service.service_url,
            "helpUrl": service.help_url,
            "faqs": [
                {"question": text(faq.question), "answer": text(faq.answer)}
                for faq in service.faqs
            ],
        }

    def get_service_summary(self, service: Service, language: str = DEFAULT_LANGUAGE) -> Dict[str, Any]:
        """Compact listing entry"""
        return {
            "id": service.id,
            "name": resolve(service.name, language),
            "shortName": service.short_name,
            "category": service.category,
            "description": resolve(service.description, language),
            "department": resolve(service.department.name, language),
            "processingTime": {
                "averageDays": service.processing_time.average_days,
                "description": resolve(service.processing_time.description, language),
            },
            "status": service.status,
            "requirementCount": len(service.requirements),
            "mandatoryRequirementCount": sum(1 for req in service.requirements if req.is_mandatory),
            "eligibilityCriteriaCount": len(service.eligibility_criteria),
            "feeEstimate": sum(fee.amount for fee in service.fees),
            "currency": service.fees[0].currency if service.fees else DEFAULT_CURRENCY,
            "serviceUrl": service.service_url,
            "voiceEnabled": any(cmd.language in (language, DEFAULT_LANGUAGE) for cmd in service.voice_commands),
        }

    def get_voice_commands(self, service: Service, language: str = DEFAULT_LANGUAGE) -> Dict[str, Any]:
        """Voice commands for a language, falling back to English"""
        commands = [cmd for cmd in service.voice_commands if cmd.language == language]
        is_fallback = False

        if not commands and language != DEFAULT_LANGUAGE:
            commands = [cmd for cmd in service.voice_commands if cmd.language == DEFAULT_LANGUAGE]
            if not commands:
                return {
                    "available": False,
                    "message": "No voice commands available for this service"
                }
            language, is_fallback = DEFAULT_LANGUAGE, True

        return {
            "available": bool(commands),
            "language": language,
            "isFallback": is_fallback,
            "commands": [
                {
                    "triggers": cmd.triggers,
                    "examples": cmd.examples,
                    "synonyms": cmd.synonyms,
                    "responseTemplate": cmd.response_template,
                }
                for cmd in commands
            ],
        }

    def generate_search_keywords(self, service: Service) -> List[str]:
        """Lower-cased search keywords, de-duplicated in first-seen order"""
        keywords: Dict[str, None] = {}

        def add(value: Optional[str]):
            if value:
                keywords.setdefault(value.lower(), None)

        for name in service.name.values():
            add(name)
            for word in name.split():
                if len(word) > 2:
                    add(word)

        add(service.short_name)
        add(service.category)
        add(service.sub_category)

        for name in service.department.name.values():
            add(name)

        for req in service.requirements:
            add(req.document_type)
            add(req.name.en)

        for cmd in service.voice_commands:
            for trigger in cmd.triggers:
                add(trigger)
            for synonym in cmd.synonyms:
                add(synonym)

        return list(keywords)


# Global directory service instance
directory_service = DirectoryService()
