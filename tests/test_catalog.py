import asyncio

import pytest

from conftest import make_service, make_service_data
from swarseva.config import settings
from swarseva.errors import InvalidInputError, InvalidStateError, NotFoundError
from swarseva.models.user import CurrentUser
from swarseva.services.catalog_service import ServiceCatalog
from swarseva.services.mongo_service import ServiceQuery

ADMIN = CurrentUser(id="admin-1", role="admin")


def run(coroutine):
    return asyncio.run(coroutine)


@pytest.fixture
def catalog(repository):
    return ServiceCatalog(repository)


def test_lookup_by_slug_and_id(catalog, repository):
    service = run(catalog.get_service("Income_Certificate"))
    assert run(catalog.get_service(service.id)).short_name == "income_certificate"


def test_lookup_missing(catalog):
    with pytest.raises(NotFoundError):
        run(catalog.get_service("ffffffffffffffffffffffff"))


def test_inactive_service_is_rejected(catalog, repository):
    repository.add(make_service(shortName="old_pension", status="inactive"))
    with pytest.raises(InvalidStateError):
        run(catalog.get_active_service("old_pension"))


def test_create_stamps_audit_fields(catalog):
    payload = make_service_data(shortName="Birth Certificate", createdBy="someone-else")
    created = run(catalog.create_service(payload, ADMIN))
    assert created.id
    assert created.short_name == "birth_certificate"
    assert created.created_by == "admin-1"
    assert created.updated_by == "admin-1"
    assert created.created_at is not None


def test_create_rejects_duplicate_slug(catalog):
    with pytest.raises(InvalidInputError) as excinfo:
        run(catalog.create_service(make_service_data(), ADMIN))
    assert excinfo.value.errors[0]["field"] == "shortName"


def test_create_reports_field_errors(catalog):
    with pytest.raises(InvalidInputError) as excinfo:
        run(catalog.create_service(make_service_data(shortName="birth", category="space"), ADMIN))
    assert "category" in [error["field"] for error in excinfo.value.errors]


def test_update_merges_top_level_fields(catalog, repository):
    updated = run(catalog.update_service("income_certificate", {"priority": 9, "status": "inactive"}, ADMIN))
    assert updated.priority == 9
    assert updated.status == "inactive"
    assert updated.fees == make_service().fees
    assert repository.services[updated.id].priority == 9


def test_update_cannot_change_slug(catalog):
    with pytest.raises(InvalidInputError):
        run(catalog.update_service("income_certificate", {"shortName": "renamed"}, ADMIN))


def test_update_revalidates(catalog, repository):
    with pytest.raises(InvalidInputError):
        run(catalog.update_service("income_certificate", {"priority": 11}, ADMIN))
    assert run(catalog.get_service("income_certificate")).priority == 7


def test_soft_delete_deprecates(catalog, repository):
    result = run(catalog.delete_service("income_certificate", ADMIN))
    assert result["deletionType"] == "soft"
    assert result["newStatus"] == "deprecated"
    assert run(catalog.get_service("income_certificate")).status == "deprecated"


def test_permanent_delete_needs_configured_code(catalog, repository, monkeypatch):
    monkeypatch.setattr(settings, "admin_delete_confirmation", "")
    with pytest.raises(InvalidInputError):
        run(catalog.delete_service("income_certificate", ADMIN, permanent=True, confirmation_code=""))

    monkeypatch.setattr(settings, "admin_delete_confirmation", "DELETE-OK")
    with pytest.raises(InvalidInputError):
        run(catalog.delete_service("income_certificate", ADMIN, permanent=True, confirmation_code="nope"))

    result = run(catalog.delete_service("income_certificate", ADMIN, permanent=True, confirmation_code="DELETE-OK"))
    assert result["deletionType"] == "permanent"
    assert repository.services == {}


def test_batch_update_is_all_or_nothing(catalog, repository):
    repository.add(make_service(shortName="ration_card", priority=3))

    result = run(catalog.batch_update(["income_certificate", "missing_service"], {"priority": 2}, ADMIN))
    assert result.success is False
    assert result.not_found == 1
    assert result.updated == 0
    assert repository.batch_writes == 0
    assert run(catalog.get_service("income_certificate")).priority == 7

    result = run(catalog.batch_update(["income_certificate", "ration_card"], {"priority": 2, "shortName": "x"}, ADMIN))
    assert result.success is True
    assert result.updated == 2
    assert repository.batch_writes == 1
    assert [ref["shortName"] for ref in result.updated_services] == ["income_certificate", "ration_card"]
    assert run(catalog.get_service("ration_card")).priority == 2


def test_batch_update_rejects_invalid_changes(catalog, repository):
    result = run(catalog.batch_update(["income_certificate"], {"category": "space"}, ADMIN))
    assert result.success is False
    assert result.failed == 1
    assert result.failed_services[0].reason.startswith("category")


def test_batch_update_requires_allowed_fields(catalog):
    with pytest.raises(InvalidInputError):
        run(catalog.batch_update(["income_certificate"], {"createdBy": "x"}, ADMIN))


def test_list_filters_and_paginates(catalog, repository):
    repository.add(make_service(shortName="ration_card", priority=9))
    repository.add(make_service(shortName="goa_pension", priority=1, stateSpecific=True, applicableStates=["Goa"]))
    repository.add(make_service(shortName="draft_service", status="draft"))

    services, pagination = run(catalog.list_services(ServiceQuery(), page=1, limit=2))
    assert [service.short_name for service in services] == ["ration_card", "income_certificate"]
    assert pagination.total == 3
    assert pagination.pages == 2
    assert pagination.has_more is True

    services, _ = run(catalog.list_services(ServiceQuery(state="Kerala")))
    assert "goa_pension" not in [service.short_name for service in services]


def test_services_by_category_validates_category(catalog):
    with pytest.raises(InvalidInputError):
        run(catalog.services_by_category("space", ServiceQuery()))
    services, _ = run(catalog.services_by_category("certificates", ServiceQuery()))
    assert len(services) == 1


def test_search_matches_text(catalog, repository):
    repository.add(make_service(shortName="ration_card", name={"en": "Ration Card"}))
    services, _ = run(catalog.search_services("ration", ServiceQuery()))
    assert [service.short_name for service in services] == ["ration_card"]



def test_update_accepts_field_names_and_aliases(catalog, repository):
    updated = run(catalog.update_service(
        "income_certificate",
        {"sub_category": "new-sub", "help_url": "https://example.gov.in/help", "stateSpecific": True},
        ADMIN,
    ))
    assert updated.sub_category == "new-sub"
    assert updated.help_url == "https://example.gov.in/help"
    assert updated.state_specific is True
    assert repository.services[updated.id].sub_category == "new-sub"


def test_update_rejects_unknown_fields(catalog):
    with pytest.raises(InvalidInputError) as excinfo:
        run(catalog.update_service("income_certificate", {"subcategory": "typo"}, ADMIN))
    assert excinfo.value.errors[0]["field"] == "subcategory"
    assert run(catalog.get_service("income_certificate")).sub_category == "revenue"


def test_batch_update_accepts_field_names(catalog, repository):
    result = run(catalog.batch_update(["income_certificate"], {"access_level": "public"}, ADMIN))
    assert result.success is True
    assert run(catalog.get_service("income_certificate")).access_level == "public"
