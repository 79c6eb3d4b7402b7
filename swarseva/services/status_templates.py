"""
Application status update templates
"""
from typing import Any, Dict, Optional

from ..models.multilingual import DEFAULT_LANGUAGE, resolve
from ..models.service import Service


def _days(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value:g}"


def _processing_window(service: Service) -> str:
    timing = service.processing_time
    if timing.min_days is None and timing.max_days is None:
        return "Estimated processing time will be shared once your application is reviewed."
    return f"Estimated processing time: {_days(timing.min_days)}-{_days(timing.max_days)} days."


def _processing_average(service: Service) -> str:
    if service.processing_time.average_days is None:
        return "Estimated completion time will be shared once processing starts."
    return f"Estimated completion time: {_days(service.processing_time.average_days)} days."


# status code -> (title, message template, next steps, estimated time)
# ``{name}`` is the service name resolved in the requested language; a
# callable estimated time is rendered from the service's processing time.
STATUS_TEMPLATES = {
    "pending": (
        "Application Pending",
        "Your application for {name} has been received and is pending review. Please check back for updates.",
        "Your application will be reviewed by our team. You will be notified when the status changes.",
        _processing_window,
    ),
    "reviewing": (
        "Application Under Review",
        "Your application for {name} is currently being reviewed by our team.",
        "Once the review is complete, you may be asked to provide additional documentation or information.",
        "Estimated completion time for this stage: 2-3 working days.",
    ),
    "documentRequired": (
        "Additional Documents Required",
        "Your application for {name} requires additional documentation.",
        "Please submit the requested documents as soon as possible to avoid delays in processing.",
        "Your application will proceed once the required documents are received and verified.",
    ),
    "processing": (
        "Application Processing",
        "Your application for {name} has been approved and is now being processed.",
        "No further action is required from you at this time.",
        _processing_average,
    ),
    "approved": (
        "Application Approved",
        "Congratulations! Your application for {name} has been approved.",
        "Please check your email for further instructions on how to proceed.",
        "You should receive all necessary documentation within 3-5 working days.",
    ),
    "rejected": (
        "Application Rejected",
        "We regret to inform you that your application for {name} has been rejected.",
        "Please check your email for detailed information on the reason for rejection and the appeal process if applicable.",
        "You may reapply after addressing the issues mentioned in the rejection notice.",
    ),
    "completed": (
        "Application Completed",
        "Your application for {name} has been successfully completed.",
        "No further action is required. You may download or view your certificate/document from your profile.",
        "",
    ),
    "hold": (
        "Application On Hold",
        "Your application for {name} has been placed on hold.",
        "Please check your email for information about why your application is on hold and what actions you need to take.",
        "Your application will remain on hold until the specified issues are resolved.",
    ),
}

AVAILABLE_STATUSES = list(STATUS_TEMPLATES)


def get_status_update_template(service: Service, status: Optional[str], language: str = DEFAULT_LANGUAGE) -> Dict[str, Any]:
    """Render the update template for an application status"""
    name = resolve(service.name, language)

    if not status or status not in STATUS_TEMPLATES:
        return {
            "valid": False,
            "service": name,
            "message": f"Status template for '{status}' not available. Please check the application status directly.",
            "availableStatuses": AVAILABLE_STATUSES,
        }

    title, message, next_steps, estimated_time = STATUS_TEMPLATES[status]
    if callable(estimated_time):
        estimated_time = estimated_time(service)

    return {
        "valid": True,
        "service": name,
        "serviceId": service.id,
        "status": status,
        "title": title,
        "message": message.format(name=name),
        "nextSteps": next_steps,
        "estimatedTime": estimated_time,
        "department": resolve(service.department.name, language),
        "contactEmail": service.department.contact_email,
        "contactPhone": service.department.contact_phone,
        "helpUrl": service.help_url,
    }
