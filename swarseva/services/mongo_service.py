"""
MongoDB service for service-directory persistence
"""
import logging
from typing import Any, Dict, List, Optional, Tuple
from bson import ObjectId
from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel
from pymongo.errors import DuplicateKeyError

from ..database import get_client, get_database
from ..errors import InvalidInputError
from ..models.service import Service
from ..utils.validators import is_object_id
from .directory_service import directory_service

logger = logging.getLogger(__name__)


class ServiceQuery(BaseModel):
    """Filters shared by listing, search and category lookups"""
    status: Optional[str] = "active"
    category: Optional[str] = None
    provider: Optional[str] = None
    state: Optional[str] = None
    text: Optional[str] = None


SERVICE_INDEXES = [
    IndexModel([("shortName", ASCENDING)], unique=True),
    IndexModel([("category", ASCENDING), ("status", ASCENDING)]),
    IndexModel([("status", ASCENDING)]),
    IndexModel([("priority", DESCENDING), ("category", ASCENDING)]),
    IndexModel([("createdAt", DESCENDING)]),
    IndexModel(
        [
            ("name.en", TEXT),
            ("name.hi", TEXT),
            ("description.en", TEXT),
            ("description.hi", TEXT),
            ("shortName", TEXT),
            ("category", TEXT),
            ("subCategory", TEXT),
            ("department.name.en", TEXT),
            ("searchKeywords", TEXT),
        ],
        weights={
            "name.en": 10,
            "name.hi": 10,
            "shortName": 8,
            "category": 5,
            "description.en": 3,
            "description.hi": 3,
            "searchKeywords": 4,
            "subCategory": 2,
            "department.name.en": 1,
        },
        name="service_text_search",
    ),
]


def service_document(service: Service) -> Dict[str, Any]:
    """Stored form of a service, with derived search keywords for the text index"""
    doc = service.to_document()
    doc["searchKeywords"] = directory_service.generate_search_keywords(service)
    return doc


def build_filter(query: ServiceQuery) -> Dict[str, Any]:
    """Translate a ServiceQuery into a MongoDB filter document"""
    filter_query: Dict[str, Any] = {}
    if query.status:
        filter_query["status"] = query.status
    if query.category:
        filter_query["category"] = query.category
    if query.provider:
        filter_query["provider"] = query.provider
    if query.state:
        filter_query["$or"] = [
            {"stateSpecific": False},
            {"stateSpecific": True, "applicableStates": query.state},
        ]
    if query.text:
        filter_query["$text"] = {"$search": query.text}
    return filter_query


class MongoService:
    """Repository for Service documents"""

    collection_name = "services"

    @property
    def collection(self):
        return get_database()[self.collection_name]

    async def ensure_indexes(self):
        """Create collection indexes"""
        await self.collection.create_indexes(SERVICE_INDEXES)
        logger.info("Service indexes ensured")

    async def health_check(self) -> bool:
        """Check MongoDB connection health"""
        try:
            await get_client().admin.command("ping")
            return True
        except Exception:
            return False

    async def get_service(self, identifier: str) -> Optional[Service]:
        """Get a service by ObjectId, falling back to its shortName"""
        doc = None
        if is_object_id(identifier):
            doc = await self.collection.find_one({"_id": ObjectId(identifier)})
        if doc is None:
            doc = await self.collection.find_one({"shortName": identifier.strip().lower()})
        return Service.from_document(doc) if doc else None

    async def create_service(self, service: Service) -> Service:
        """Insert a new service and return it with its generated id"""
        try:
            result = await self.collection.insert_one(service_document(service))
        except DuplicateKeyError:
            raise InvalidInputError.for_field("shortName", "A service with this shortName already exists")
        logger.info(f"Service created: {service.short_name}")
        return service.model_copy(update={"id": str(result.inserted_id)})

    async def replace_service(self, service: Service) -> Service:
        """Persist a validated service over its stored version"""
        await self.collection.replace_one({"_id": ObjectId(service.id)}, service_document(service))
        return service

    async def replace_services(self, services: List[Service]) -> None:
        """Replace several services in one transaction; all or nothing"""
        async with await get_client().start_session() as session:
            async with session.start_transaction():
                for service in services:
                    await self.collection.replace_one(
                        {"_id": ObjectId(service.id)},
                        service_document(service),
                        session=session
                    )

    async def delete_service(self, service_id: str) -> bool:
        """Physically remove a service"""
        result = await self.collection.delete_one({"_id": ObjectId(service_id)})
        return result.deleted_count > 0

    async def find_services(
        self,
        query: ServiceQuery,
        skip: int,
        limit: int,
        sort_field: str = "priority",
        sort_order: int = DESCENDING
    ) -> Tuple[int, List[Service]]:
        """
        Find services matching the query

        Returns:
            (total matching count, services on the requested page)
        """
        filter_query = build_filter(query)
        total = await self.collection.count_documents(filter_query)

        sort = [(sort_field, sort_order)]
        projection = None
        if query.text:
            projection = {"score": {"$meta": "textScore"}}
            sort.insert(0, ("score", {"$meta": "textScore"}))

        cursor = self.collection.find(filter_query, projection).sort(sort).skip(skip).limit(limit)
        services = []
        async for doc in cursor:
            services.append(Service.from_document(doc))
        return total, services


# Global MongoDB service instance
mongo_service = MongoService()
