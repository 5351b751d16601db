"""
Integration tests for MilestoneGenerator.

Generates chains against an in-memory SQLite database.
"""

from uuid import uuid4

import pytest

from deliveryops.core.exceptions import NotFoundError, ValidationError
from deliveryops.infrastructure.local.calendar_event_repository import SqliteCalendarEventRepository
from deliveryops.infrastructure.local.database import (
    DeadlineAlertORM,
    DeliveryMilestoneORM,
    ProjectCalendarEventORM,
)
from deliveryops.models.enums import AlertType, EventColor, MilestoneStage, VisibilityRole
from deliveryops.models.milestone_template import MilestoneConfig, MilestoneDefinition
from deliveryops.services.milestone_generator import MilestoneGenerator
from helpers import FixedClock, utc


@pytest.fixture
def generator(uow_factory):
    return MilestoneGenerator(uow_factory, config=MilestoneConfig(), clock=FixedClock(utc(2024, 12, 20)))


class TestGenerateChain:
    """Default template generation."""

    @pytest.mark.asyncio
    async def test_audit_milestone_dated_three_days_after_start(self, generator, uow_factory, seeded, org_id):
        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))

        audit = next(m for m in milestones if m.stage == MilestoneStage.AUDIT_CLIENT)
        assert audit.planned_date == utc(2025, 1, 4)

        async with uow_factory() as uow:
            event = await uow.events.get_by_milestone(audit.id)
        assert event.start == utc(2025, 1, 4)
        assert event.end == utc(2025, 1, 4)
        assert event.all_day is True

    @pytest.mark.asyncio
    async def test_creates_one_milestone_and_event_per_stage(self, generator, seeded, org_id, count_rows):
        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))

        assert [m.stage for m in milestones] == list(MilestoneStage)
        assert await count_rows(DeliveryMilestoneORM) == 6
        assert await count_rows(ProjectCalendarEventORM) == 6

    @pytest.mark.asyncio
    async def test_offset_dates_follow_config(self, generator, seeded, org_id):
        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))

        dates = {m.stage: m.planned_date for m in milestones}
        assert dates[MilestoneStage.PRODUCTION_V1] == utc(2025, 1, 11)
        assert dates[MilestoneStage.PRODUCTION_V2] == utc(2025, 1, 18)
        assert dates[MilestoneStage.IMPLEMENTATION_CLIENT] == utc(2025, 1, 22)
        assert dates[MilestoneStage.CLIENT_FEEDBACK] == utc(2025, 1, 26)

    @pytest.mark.asyncio
    async def test_final_version_is_wired_to_client_feedback(self, generator, seeded, org_id):
        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))
        by_stage = {m.stage: m for m in milestones}

        final = by_stage[MilestoneStage.FINAL_VERSION]
        assert final.triggers_next_milestone_id == by_stage[MilestoneStage.CLIENT_FEEDBACK].id
        assert final.days_after_trigger == 5
        # Placeholder until client feedback completes
        assert final.planned_date == utc(2025, 1, 31)

    @pytest.mark.asyncio
    async def test_milestones_assigned_to_project_vendor(self, generator, seeded, org_id):
        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))
        assert all(m.assigned_vendor_id == seeded.vendor.id for m in milestones)

    @pytest.mark.asyncio
    async def test_event_visibility_copied_from_template(self, generator, uow_factory, seeded, org_id):
        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))
        v1 = next(m for m in milestones if m.stage == MilestoneStage.PRODUCTION_V1)

        async with uow_factory() as uow:
            event = await uow.events.get_by_milestone(v1.id)
        assert set(event.visible_to_roles) == {VisibilityRole.ADMIN, VisibilityRole.VENDOR}
        assert event.color == EventColor.YELLOW
        assert v1.visible_to_client is False


class TestInitialAlerts:
    """J-2 / J-1 reminders scheduled at generation."""

    @pytest.mark.asyncio
    async def test_two_reminders_per_offset_milestone(self, generator, uow_factory, seeded, org_id, count_rows):
        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))

        assert await count_rows(DeadlineAlertORM) == 10

        audit = next(m for m in milestones if m.stage == MilestoneStage.AUDIT_CLIENT)
        async with uow_factory() as uow:
            alerts = await uow.alerts.list_by_milestone(audit.id)
        by_type = {a.alert_type: a for a in alerts}
        assert by_type[AlertType.REMINDER_J2].scheduled_for == utc(2025, 1, 2)
        assert by_type[AlertType.REMINDER_J1].scheduled_for == utc(2025, 1, 3)
        assert by_type[AlertType.REMINDER_J2].subject == "Rappel J-2: Audit Client"
        assert "Refonte Site" in by_type[AlertType.REMINDER_J2].body
        assert "04/01/2025" in by_type[AlertType.REMINDER_J2].body
        assert all(a.recipient_user_id == seeded.user.id for a in alerts)
        assert all(a.recipient_email == "studio@example.com" for a in alerts)

    @pytest.mark.asyncio
    async def test_no_reminder_for_trigger_based_milestone(self, generator, uow_factory, seeded, org_id):
        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))
        final = next(m for m in milestones if m.stage == MilestoneStage.FINAL_VERSION)

        async with uow_factory() as uow:
            assert await uow.alerts.list_by_milestone(final.id) == []

    @pytest.mark.asyncio
    async def test_past_reminders_are_skipped(self, uow_factory, seeded, org_id, count_rows):
        generator = MilestoneGenerator(uow_factory, config=MilestoneConfig(), clock=FixedClock(utc(2025, 1, 3, 12)))

        await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))

        # Audit (04/01) reminders on 02/01 and 03/01 are already past
        assert await count_rows(DeadlineAlertORM) == 8

    @pytest.mark.asyncio
    async def test_no_alerts_without_vendor_user(self, generator, uow_factory, org_id, count_rows):
        async with uow_factory() as uow:
            vendor = await uow.vendors.create(org_id, "No Portal Vendor")
            project = await uow.projects.create(org_id, "Sans Portail", vendor_id=vendor.id)
            await uow.commit()

        milestones = await generator.generate(org_id, project.id, utc(2025, 1, 1))

        assert len(milestones) == 6
        assert await count_rows(DeadlineAlertORM) == 0

    @pytest.mark.asyncio
    async def test_explicit_vendor_overrides_project_vendor(self, generator, uow_factory, seeded, org_id):
        async with uow_factory() as uow:
            user = await uow.users.create("other_user", org_id, "other@example.com")
            other = await uow.vendors.create(org_id, "Other Studio", user_id=user.id)
            await uow.commit()

        milestones = await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1), vendor_id=other.id)

        async with uow_factory() as uow:
            alerts = await uow.alerts.list_by_milestone(milestones[0].id)
        assert milestones[0].assigned_vendor_id == other.id
        assert {a.recipient_user_id for a in alerts} == {"other_user"}


class TestGenerateFailures:

    @pytest.mark.asyncio
    async def test_unknown_project_raises_not_found(self, generator, org_id):
        with pytest.raises(NotFoundError):
            await generator.generate(org_id, uuid4(), utc(2025, 1, 1))

    @pytest.mark.asyncio
    async def test_project_of_another_org_raises_not_found(self, generator, seeded, count_rows):
        with pytest.raises(NotFoundError):
            await generator.generate("other_org", seeded.project.id, utc(2025, 1, 1))

        assert await count_rows(DeliveryMilestoneORM) == 0
        assert await count_rows(ProjectCalendarEventORM) == 0
        assert await count_rows(DeadlineAlertORM) == 0

    @pytest.mark.asyncio
    async def test_failure_mid_chain_leaves_no_rows(self, generator, seeded, org_id, count_rows, monkeypatch):
        original_create = SqliteCalendarEventRepository.create
        calls = {"count": 0}

        async def failing_create(self, org_id, project_id, event):
            calls["count"] += 1
            if calls["count"] == 6:
                raise RuntimeError("disk full")
            return await original_create(self, org_id, project_id, event)

        monkeypatch.setattr(SqliteCalendarEventRepository, "create", failing_create)

        with pytest.raises(RuntimeError):
            await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))

        assert await count_rows(DeliveryMilestoneORM) == 0
        assert await count_rows(ProjectCalendarEventORM) == 0
        assert await count_rows(DeadlineAlertORM) == 0

    @pytest.mark.asyncio
    async def test_generating_twice_creates_two_chains(self, generator, seeded, org_id, count_rows):
        await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))
        await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1))

        assert await count_rows(DeliveryMilestoneORM) == 12

    @pytest.mark.asyncio
    async def test_invalid_template_is_rejected_before_writing(self, generator, seeded, org_id, count_rows):
        template = [
            MilestoneDefinition(
                stage=MilestoneStage.FINAL_VERSION,
                title="Version Finale",
                triggered_by=MilestoneStage.CLIENT_FEEDBACK,
                days_after_trigger=5,
                event_type="deadline_client",
                color="green",
                visible_to_roles=[VisibilityRole.ADMIN],
                visible_to_client=True,
                visible_to_vendor=True,
            ),
        ]

        with pytest.raises(ValidationError):
            await generator.generate(org_id, seeded.project.id, utc(2025, 1, 1), template=template)
        assert await count_rows(DeliveryMilestoneORM) == 0
