"""
API routes for the service directory
"""
import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, Header, Query

from ..auth import get_current_user, require_admin
from ..config import settings
from ..errors import ServerError, SwarSevaError
from ..models.multilingual import Language
from ..models.results import BatchUpdateRequest, DocumentValidationRequest, Pagination
from ..models.service import Provider, Service, ServiceStatus
from ..models.user import CurrentUser, UserProfile
from ..services.catalog_service import ServiceCatalog
from ..services.directory_service import directory_service
from ..services.mongo_service import ServiceQuery, mongo_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["services"])


def get_service_repository():
    """Repository used by the catalog; overridden in tests"""
    return mongo_service


def get_catalog(repository=Depends(get_service_repository)) -> ServiceCatalog:
    return ServiceCatalog(repository)


def dump(model) -> Any:
    return model.model_dump(by_alias=True, mode="json")


def summary_page(services: List[Service], pagination: Pagination, language: str, **extra) -> Dict[str, Any]:
    body = {
        "success": True,
        "count": len(services),
        "pagination": dump(pagination),
        "language": language,
    }
    body.update(extra)
    body["data"] = [directory_service.get_service_summary(service, language) for service in services]
    return body


def identity(service: Service) -> Dict[str, Any]:
    return {
        "id": service.id,
        "name": service.name.model_dump(by_alias=True, exclude_none=True),
        "shortName": service.short_name,
        "status": service.status,
    }


# Public routes

@router.get("")
async def list_services(
    page: int = Query(1, ge=1, description="Page number"),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size, description="Services per page"),
    language: Language = Query(Language.EN, description="Response language"),
    status: ServiceStatus = Query("active", description="Filter by status"),
    state: Optional[str] = Query(None, description="Include services available in this state"),
    provider: Optional[Provider] = Query(None, description="Filter by provider"),
    sort: str = Query("priority", description="Sort field"),
    order: str = Query("desc", pattern="^(asc|desc)$", description="Sort order"),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    """
    List services with pagination
    """
    try:
        query = ServiceQuery(status=status, state=state, provider=provider)
        services, pagination = await catalog.list_services(query, page=page, limit=limit, sort=sort, order=order)
        return summary_page(services, pagination, language.value)

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error listing services: {e}")
        raise ServerError("Error retrieving services", detail=str(e))


@router.get("/search")
async def search_services(
    q: Optional[str] = Query(None, description="Search term"),
    category: Optional[str] = Query(None, description="Filter by category"),
    provider: Optional[Provider] = Query(None, description="Filter by provider"),
    state: Optional[str] = Query(None, description="Include services available in this state"),
    status: ServiceStatus = Query("active", description="Filter by status"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
    language: Language = Query(Language.EN),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    """
    Search services by text and filters, most relevant first
    """
    try:
        query = ServiceQuery(status=status, category=category, provider=provider, state=state)
        services, pagination = await catalog.search_services(q, query, page=page, limit=limit)
        return summary_page(services, pagination, language.value, searchTerm=(q or "").strip() or None)

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error searching services: {e}")
        raise ServerError("Error searching services", detail=str(e))


@router.get("/category/{category}")
async def get_services_by_category(
    category: str,
    state: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
    language: Language = Query(Language.EN),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    """
    Active services in one category
    """
    try:
        services, pagination = await catalog.services_by_category(
            category, ServiceQuery(state=state), page=page, limit=limit
        )
        return summary_page(services, pagination, language.value, category=category)

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error fetching services for category {category}: {e}")
        raise ServerError("Error retrieving services by category", detail=str(e))


# Admin routes without an identifier are declared before /{service_id}

@router.post("/batch-update")
async def batch_update_services(
    request: BatchUpdateRequest,
    user: CurrentUser = Depends(require_admin),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    """
    Apply one update to several services; nothing is written unless all succeed
    """
    try:
        result = await catalog.batch_update(request.services, request.update_data, user)
        body = dump(result)
        if result.success:
            body["message"] = f"Successfully updated {result.updated} services"
        else:
            body["message"] = "Batch update aborted: no services were updated"
        return body

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error in batch update: {e}")
        raise ServerError("Error performing batch update", detail=str(e))


@router.post("", status_code=201)
async def create_service(
    payload: Dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_admin),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    """
    Create a new service
    """
    try:
        service = await catalog.create_service(payload, user)
        return {
            "success": True,
            "message": "Service created successfully",
            "data": identity(service),
        }

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error creating service: {e}")
        raise ServerError("Error creating service", detail=str(e))


@router.get("/{service_id}")
async def get_service(
    service_id: str,
    language: Language = Query(Language.EN),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    """
    Get a service by id or shortName, resolved into one language
    """
    try:
        service = await catalog.get_service(service_id)
        return {
            "success": True,
            "language": language.value,
            "data": directory_service.get_details_in_language(service, language.value),
        }

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving service {service_id}: {e}")
        raise ServerError("Error retrieving service", detail=str(e))


@router.get("/{service_id}/voice")
async def get_voice_commands(
    service_id: str,
    language: Language = Query(Language.EN),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    try:
        service = await catalog.get_service(service_id)
        voice = directory_service.get_voice_commands(service, language.value)
        return {
            "success": True,
            "service": {"id": service.id, "name": service.name.en or service.short_name},
            "language": voice.get("language", language.value),
            "isFallback": voice.get("isFallback", False),
            "data": voice,
        }

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving voice commands for {service_id}: {e}")
        raise ServerError("Error retrieving voice commands", detail=str(e))


# Authenticated routes

@router.post("/{service_id}/check-eligibility")
async def check_eligibility(
    service_id: str,
    profile: UserProfile = Body(..., description="Applicant profile"),
    language: Language = Query(Language.EN),
    user: CurrentUser = Depends(get_current_user),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    """
    Check a user profile against the service's eligibility criteria
    """
    try:
        service = await catalog.get_active_service(service_id)
        verdict = directory_service.check_eligibility(service, profile, language=language.value)
        logger.info(f"Eligibility for {service.short_name} checked by user {user.id}: {verdict.eligible}")
        return {"success": True, "service": service.reference(), **dump(verdict)}

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error checking eligibility for {service_id}: {e}")
        raise ServerError("Error checking eligibility", detail=str(e))


@router.post("/{service_id}/calculate-fees")
async def calculate_fees(
    service_id: str,
    profile: UserProfile = Body(..., description="Applicant profile"),
    language: Language = Query(Language.EN),
    user: CurrentUser = Depends(get_current_user),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    """
    Calculate the fees payable by a user, applying waivers and adjustments
    """
    try:
        service = await catalog.get_active_service(service_id)
        fees = directory_service.calculate_fees(service, profile, language=language.value)
        return {"success": True, "service": service.reference(), **dump(fees)}

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error calculating fees for {service_id}: {e}")
        raise ServerError("Error calculating fees", detail=str(e))


@router.post("/{service_id}/validate-documents")
async def validate_documents(
    service_id: str,
    request: DocumentValidationRequest,
    language: Language = Query(Language.EN),
    user: CurrentUser = Depends(get_current_user),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    try:
        service = await catalog.get_service(service_id)
        result = directory_service.validate_documents(service, request.documents, language=language.value)
        return {"success": True, "service": service.reference(), **dump(result)}

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error validating documents for {service_id}: {e}")
        raise ServerError("Error validating documents", detail=str(e))


@router.get("/{service_id}/status/{status_code}")
async def get_service_status(
    service_id: str,
    status_code: str,
    language: Language = Query(Language.EN),
    user: CurrentUser = Depends(get_current_user),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    try:
        service = await catalog.get_service(service_id)
        return {
            "success": True,
            "language": language.value,
            "data": directory_service.get_status_update_template(service, status_code, language.value),
        }

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving status template for {service_id}: {e}")
        raise ServerError("Error retrieving service status template", detail=str(e))


# Admin routes

@router.put("/{service_id}")
async def update_service(
    service_id: str,
    changes: Dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_admin),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    try:
        service = await catalog.update_service(service_id, changes, user)
        return {
            "success": True,
            "message": "Service updated successfully",
            "data": identity(service),
        }

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error updating service {service_id}: {e}")
        raise ServerError("Error updating service", detail=str(e))


@router.delete("/{service_id}")
async def delete_service(
    service_id: str,
    permanent: bool = Query(False, description="Physically remove instead of deprecating"),
    x_confirmation_code: Optional[str] = Header(None),
    user: CurrentUser = Depends(require_admin),
    catalog: ServiceCatalog = Depends(get_catalog)
):
    try:
        return await catalog.delete_service(
            service_id, user, permanent=permanent, confirmation_code=x_confirmation_code
        )

    except SwarSevaError:
        raise
    except Exception as e:
        logger.error(f"Error deleting service {service_id}: {e}")
        raise ServerError("Error deleting service", detail=str(e))
