"""
Catalog operations over stored services: lookup, admin mutations and listing
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from pymongo import ASCENDING, DESCENDING

from ..config import settings
from ..errors import InvalidInputError, InvalidStateError, NotFoundError, pydantic_errors_to_fields
from ..models.base import get_current_utc_time
from ..models.results import BatchFailure, BatchUpdateResult, Pagination
from ..models.service import RESTRICTED_UPDATE_FIELDS, SERVICE_CATEGORIES, Service, normalize_slug
from ..models.user import CurrentUser
from ..utils.validators import page_window, resolve_sort_field
from .mongo_service import ServiceQuery

logger = logging.getLogger(__name__)

# Stamped by the catalog, never taken from a client payload
SYSTEM_FIELDS = {"id", "_id", "createdBy", "created_by", "updatedBy", "updated_by", "createdAt", "created_at", "updatedAt", "updated_at"}

# Field name or camelCase alias -> the alias used in stored documents
FIELD_ALIASES = {
    key: field.alias or name
    for name, field in Service.model_fields.items()
    for key in (name, field.alias or name)
}


def validate_service(data: Dict[str, Any]) -> Service:
    """Build a Service, converting pydantic errors into InvalidInputError"""
    try:
        return Service.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError("Validation error", errors=pydantic_errors_to_fields(e.errors())) from e


class ServiceCatalog:
    """Service lookups and administrative changes against a repository"""

    def __init__(self, repository):
        self.repository = repository

    async def get_service(self, identifier: str) -> Service:
        service = await self.repository.get_service(identifier)
        if service is None:
            raise NotFoundError("Service not found")
        return service

    async def get_active_service(self, identifier: str) -> Service:
        service = await self.get_service(identifier)
        if not service.is_active:
            raise InvalidStateError("This service is currently not active")
        return service

    async def create_service(self, payload: Dict[str, Any], user: CurrentUser) -> Service:
        data = {key: value for key, value in payload.items() if key not in SYSTEM_FIELDS}
        now = get_current_utc_time()
        data.update(createdBy=user.id, updatedBy=user.id, createdAt=now, updatedAt=now)

        service = validate_service(data)
        created = await self.repository.create_service(service)
        logger.info(f"Service {created.short_name} created by user {user.id}")
        return created

    async def update_service(self, identifier: str, changes: Dict[str, Any], user: CurrentUser) -> Service:
        service = await self.get_service(identifier)
        updated = self._apply_changes(service, changes, user)
        await self.repository.replace_service(updated)
        logger.info(f"Service {updated.short_name} updated by user {user.id}")
        return updated

    async def delete_service(
        self,
        identifier: str,
        user: CurrentUser,
        permanent: bool = False,
        confirmation_code: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Soft-delete (deprecate) a service, or remove it when permanent

        Permanent deletion requires the configured confirmation code and is
        refused outright while no code is configured.
        """
        service = await self.get_service(identifier)
        name = service.name.en

        if permanent:
            expected = settings.admin_delete_confirmation
            if not expected or confirmation_code != expected:
                logger.warning(f"Permanent deletion of {service.short_name} refused for user {user.id}")
                raise InvalidInputError.for_field(
                    "X-Confirmation-Code", "Permanent deletion requires confirmation code"
                )
            await self.repository.delete_service(service.id)
            logger.info(f"Service {service.id} ({service.short_name}) permanently deleted by user {user.id}")
            return {
                "success": True,
                "message": f"Service '{name}' has been permanently deleted",
                "deletionType": "permanent"
            }

        deprecated = service.model_copy(update={
            "status": "deprecated",
            "updated_by": user.id,
            "updated_at": get_current_utc_time()
        })
        await self.repository.replace_service(deprecated)
        logger.info(f"Service {service.id} ({service.short_name}) deprecated by user {user.id}")
        return {
            "success": True,
            "message": f"Service '{name}' has been deprecated.",
            "deletionType": "soft",
            "newStatus": deprecated.status
        }

    async def batch_update(self, identifiers: List[str], update_data: Dict[str, Any], user: CurrentUser) -> BatchUpdateResult:
        """
        Apply the same update to several services atomically

        Every service is resolved and re-validated before anything is
        written; a single missing or invalid service aborts the batch.
        """
        changes = {key: value for key, value in update_data.items() if key not in RESTRICTED_UPDATE_FIELDS}
        result = BatchUpdateResult(success=False, total=len(identifiers))

        if not changes:
            raise InvalidInputError.for_field("updateData", "Please provide update data")

        prepared: List[Service] = []
        for identifier in identifiers:
            service = await self.repository.get_service(identifier)
            if service is None:
                result.not_found += 1
                result.failed_services.append(BatchFailure(identifier=identifier, reason="Service not found"))
                continue
            try:
                prepared.append(self._apply_changes(service, changes, user))
            except InvalidInputError as e:
                result.failed += 1
                reasons = "; ".join(f"{err['field']}: {err['message']}" for err in e.errors) or e.message
                result.failed_services.append(BatchFailure(identifier=identifier, reason=reasons))

        if result.failed_services:
            logger.warning(
                f"Batch update by user {user.id} aborted: {len(result.failed_services)} of {result.total} services rejected"
            )
            return result

        await self.repository.replace_services(prepared)
        result.success = True
        result.updated = len(prepared)
        result.updated_services = [service.reference() for service in prepared]
        logger.info(f"Batch update of {result.updated} services performed by user {user.id}")
        return result

    async def list_services(
        self,
        query: ServiceQuery,
        page: int = 1,
        limit: Optional[int] = None,
        sort: str = "priority",
        order: str = "desc"
    ) -> Tuple[List[Service], Pagination]:
        skip, limit = page_window(page, limit or settings.default_page_size)
        sort_order = ASCENDING if order == "asc" else DESCENDING
        total, services = await self.repository.find_services(
            query, skip=skip, limit=limit, sort_field=resolve_sort_field(sort), sort_order=sort_order
        )
        return services, Pagination.build(total=total, page=max(page, 1), limit=limit)

    async def search_services(
        self,
        text: Optional[str],
        query: ServiceQuery,
        page: int = 1,
        limit: Optional[int] = None
    ) -> Tuple[List[Service], Pagination]:
        """Full-text search ranked by relevance, then priority; an empty term only filters"""
        text = (text or "").strip()
        query = query.model_copy(update={"text": text or None})
        return await self.list_services(query, page=page, limit=limit)

    async def services_by_category(
        self,
        category: str,
        query: ServiceQuery,
        page: int = 1,
        limit: Optional[int] = None
    ) -> Tuple[List[Service], Pagination]:
        if category not in SERVICE_CATEGORIES:
            raise InvalidInputError.for_field(
                "category", f"Invalid category. Valid categories: {', '.join(SERVICE_CATEGORIES)}"
            )
        query = query.model_copy(update={"category": category})
        return await self.list_services(query, page=page, limit=limit)

    def _apply_changes(self, service: Service, changes: Dict[str, Any], user: CurrentUser) -> Service:
        """Shallow-merge top-level changes and re-validate the whole service"""
        data = service.model_dump(by_alias=True)
        for key, value in changes.items():
            if key in SYSTEM_FIELDS:
                continue
            if key in ("shortName", "short_name"):
                if not isinstance(value, str) or normalize_slug(value) != service.short_name:
                    raise InvalidInputError.for_field("shortName", "shortName cannot be changed")
                continue
            alias = FIELD_ALIASES.get(key)
            if alias is None:
                raise InvalidInputError.for_field(key, f"Unknown service field '{key}'")
            data[alias] = value
        data.update(id=service.id, updatedBy=user.id, updatedAt=get_current_utc_time())
        return validate_service(data)

