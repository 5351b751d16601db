"""
Integration tests for CalendarQueryService.
"""

import pytest
import pytest_asyncio

from deliveryops.core.exceptions import ValidationError
from deliveryops.models.calendar_event import CalendarEventCreate, CalendarEventUpdate
from deliveryops.models.enums import EventColor, UserRole, VisibilityRole
from deliveryops.services.calendar_query_service import CalendarQueryService
from helpers import utc

ADMIN = VisibilityRole.ADMIN
CLIENT = VisibilityRole.CLIENT
VENDOR = VisibilityRole.VENDOR

WINDOW = (utc(2025, 1, 1), utc(2025, 1, 31))


async def _add_event(uow_factory, org_id, project_id, title, day, roles=None, vendor_id=None, color=EventColor.BLUE):
    async with uow_factory() as uow:
        data = CalendarEventCreate(
            title=title,
            start=utc(2025, 1, day),
            end=utc(2025, 1, day),
            color=color,
            assigned_vendor_id=vendor_id,
        )
        if roles is not None:
            data.visible_to_roles = roles
        event = await uow.events.create(org_id, project_id, data)
        await uow.commit()
    return event


@pytest.fixture
def service(uow_factory):
    return CalendarQueryService(uow_factory)


@pytest_asyncio.fixture
async def mixed_events(uow_factory, seeded, org_id):
    project_id = seeded.project.id
    return {
        "kickoff": await _add_event(uow_factory, org_id, project_id, "Kickoff", 12, [ADMIN, CLIENT, VENDOR]),
        "internal": await _add_event(uow_factory, org_id, project_id, "Production V1 Interne", 5, [ADMIN, VENDOR]),
        "review": await _add_event(uow_factory, org_id, project_id, "Revue client", 3, [ADMIN, CLIENT]),
        "admin_only": await _add_event(uow_factory, org_id, project_id, "Point interne", 8),
    }


class TestRoleFiltering:

    @pytest.mark.asyncio
    async def test_client_sees_only_client_events_ordered_by_start(self, service, seeded, mixed_events):
        events = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.CLIENT_MEMBER)

        assert [e.title for e in events] == ["Revue client", "Kickoff"]

    @pytest.mark.asyncio
    async def test_admin_vendor_event_visibility(self, service, seeded, mixed_events):
        internal_id = mixed_events["internal"].id

        for role in (UserRole.VENDOR, UserRole.ADMIN, UserRole.DELIVERY):
            events = await service.get_filtered_events(seeded.project.id, *WINDOW, role)
            assert internal_id in {e.id for e in events}

        events = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.CLIENT_ADMIN)
        assert internal_id not in {e.id for e in events}

    @pytest.mark.asyncio
    async def test_unset_roles_default_to_admin_only(self, service, seeded, mixed_events):
        admin_only_id = mixed_events["admin_only"].id

        finance = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.FINANCE)
        vendor = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.VENDOR)

        assert admin_only_id in {e.id for e in finance}
        assert admin_only_id not in {e.id for e in vendor}

    @pytest.mark.asyncio
    async def test_window_excludes_events_outside_range(self, service, seeded, mixed_events):
        events = await service.get_filtered_events(
            seeded.project.id, utc(2025, 1, 4), utc(2025, 1, 10), UserRole.ADMIN
        )
        assert [e.title for e in events] == ["Production V1 Interne", "Point interne"]

    @pytest.mark.asyncio
    async def test_inverted_window_rejected(self, service, seeded):
        with pytest.raises(ValidationError):
            await service.get_filtered_events(seeded.project.id, utc(2025, 2, 1), utc(2025, 1, 1), UserRole.ADMIN)


class TestVendorScoping:

    @pytest.mark.asyncio
    async def test_vendor_only_sees_own_or_unassigned_events(self, service, uow_factory, seeded, org_id):
        my_vendor_id = seeded.vendor.id
        async with uow_factory() as uow:
            rival = await uow.vendors.create(org_id, "Rival Studio")
            await uow.commit()

        roles = [ADMIN, VENDOR]
        mine = await _add_event(uow_factory, org_id, seeded.project.id, "Mine", 2, roles, vendor_id=my_vendor_id)
        theirs = await _add_event(uow_factory, org_id, seeded.project.id, "Theirs", 3, roles, vendor_id=rival.id)
        shared = await _add_event(uow_factory, org_id, seeded.project.id, "Shared", 4, roles)

        events = await service.get_filtered_events(
            seeded.project.id, *WINDOW, UserRole.VENDOR, vendor_id=my_vendor_id
        )
        ids = {e.id for e in events}
        assert mine.id in ids
        assert shared.id in ids
        assert theirs.id not in ids

        rival_view = await service.get_filtered_events(
            seeded.project.id, *WINDOW, UserRole.VENDOR, vendor_id=rival.id
        )
        assert {e.id for e in rival_view} == {theirs.id, shared.id}

    @pytest.mark.asyncio
    async def test_admin_sees_every_assignment(self, service, uow_factory, seeded, org_id):
        await _add_event(uow_factory, org_id, seeded.project.id, "Assigned", 2, [ADMIN, VENDOR], vendor_id=seeded.vendor.id)

        events = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.SALES)
        assert [e.title for e in events] == ["Assigned"]


class TestPresentation:

    @pytest.mark.asyncio
    async def test_completed_event_rendered_green(self, service, uow_factory, seeded, org_id):
        event = await _add_event(uow_factory, org_id, seeded.project.id, "Livraison", 6, [ADMIN], color=EventColor.RED)
        async with uow_factory() as uow:
            await uow.events.update(event.id, CalendarEventUpdate(is_completed=True), utc(2025, 1, 6))
            await uow.commit()

        events = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.ADMIN)

        assert events[0].color == EventColor.GREEN
        assert events[0].is_completed is True

    @pytest.mark.asyncio
    async def test_client_title_hides_internal_marker(self, service, uow_factory, seeded, org_id):
        await _add_event(uow_factory, org_id, seeded.project.id, "Production V1 Interne", 6, [ADMIN, CLIENT])

        client = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.CLIENT_ADMIN)
        admin = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.ADMIN)

        assert client[0].display_title == "Production V1"
        assert admin[0].display_title == "Production V1 Interne"

    @pytest.mark.asyncio
    async def test_project_name_attached(self, service, seeded, mixed_events):
        events = await service.get_filtered_events(seeded.project.id, *WINDOW, UserRole.ADMIN)
        assert {e.project_name for e in events} == {"Refonte Site"}


class TestOrgEvents:

    @pytest.mark.asyncio
    async def test_joins_all_projects_of_org(self, service, uow_factory, seeded, org_id):
        async with uow_factory() as uow:
            second = await uow.projects.create(org_id, "Application Mobile")
            foreign = await uow.projects.create("other_org", "Hors Périmètre")
            await uow.commit()
        await _add_event(uow_factory, org_id, seeded.project.id, "Site", 10, [ADMIN, CLIENT])
        await _add_event(uow_factory, org_id, second.id, "Mobile", 4, [ADMIN, CLIENT])
        await _add_event(uow_factory, "other_org", foreign.id, "Foreign", 5, [ADMIN, CLIENT])

        events = await service.get_org_events(org_id, *WINDOW, UserRole.CLIENT_MEMBER)

        assert [(e.title, e.project_name) for e in events] == [
            ("Mobile", "Application Mobile"),
            ("Site", "Refonte Site"),
        ]
