"""
Integration tests for MilestoneCompletionEngine.
"""

from uuid import uuid4

import pytest
import pytest_asyncio

from deliveryops.core.exceptions import NotFoundError
from deliveryops.models.enums import (
    AlertType,
    EventColor,
    EventType,
    MilestoneStage,
    MilestoneStatus,
    NotificationType,
    VisibilityRole,
)
from deliveryops.models.milestone_template import MilestoneDefinition
from deliveryops.services.milestone_completion import MilestoneCompletionEngine
from deliveryops.services.milestone_generator import MilestoneGenerator
from helpers import FixedClock, utc


def _definition(stage, title, **timing) -> MilestoneDefinition:
    return MilestoneDefinition(
        stage=stage,
        title=title,
        event_type=EventType.MEETING,
        color=EventColor.BLUE,
        visible_to_roles=[VisibilityRole.ADMIN, VisibilityRole.VENDOR],
        visible_to_client=False,
        visible_to_vendor=True,
        **timing,
    )


CHAIN_TEMPLATE = [
    _definition(MilestoneStage.AUDIT_CLIENT, "Audit Client", days_offset=3),
    _definition(
        MilestoneStage.CLIENT_FEEDBACK, "Retour Client",
        triggered_by=MilestoneStage.AUDIT_CLIENT, days_after_trigger=4,
    ),
    _definition(
        MilestoneStage.FINAL_VERSION, "Version Finale",
        triggered_by=MilestoneStage.CLIENT_FEEDBACK, days_after_trigger=5,
    ),
]


@pytest.fixture
def clock():
    return FixedClock(utc(2024, 12, 20))


@pytest_asyncio.fixture
async def chain(uow_factory, seeded, org_id, clock):
    generator = MilestoneGenerator(uow_factory, clock=clock)
    milestones = await generator.generate(
        org_id, seeded.project.id, utc(2025, 1, 1), template=CHAIN_TEMPLATE
    )
    return {m.stage: m for m in milestones}


@pytest.fixture
def engine_(uow_factory, clock):
    return MilestoneCompletionEngine(uow_factory, clock=clock)


class TestComplete:

    @pytest.mark.asyncio
    async def test_dependent_rescheduled_from_completion_date(self, engine_, uow_factory, chain, clock):
        audit = chain[MilestoneStage.AUDIT_CLIENT]
        feedback = chain[MilestoneStage.CLIENT_FEEDBACK]
        clock.now = utc(2025, 1, 5)

        result = await engine_.complete(audit.id, utc(2025, 1, 5))

        assert result.success is True
        assert result.triggered_milestone_ids == [feedback.id]
        async with uow_factory() as uow:
            moved = await uow.milestones.get(feedback.id)
            event = await uow.events.get_by_milestone(feedback.id)
        assert moved.planned_date == utc(2025, 1, 9)
        assert moved.status == MilestoneStatus.PENDING
        assert event.start == utc(2025, 1, 9)
        assert event.end == utc(2025, 1, 9)

    @pytest.mark.asyncio
    async def test_completed_milestone_and_event_marked_done(self, engine_, uow_factory, chain):
        audit = chain[MilestoneStage.AUDIT_CLIENT]

        await engine_.complete(audit.id, utc(2025, 1, 5))

        async with uow_factory() as uow:
            done = await uow.milestones.get(audit.id)
            event = await uow.events.get_by_milestone(audit.id)
        assert done.status == MilestoneStatus.COMPLETED
        assert done.actual_date == utc(2025, 1, 5)
        assert event.is_completed is True
        assert event.completed_at == utc(2025, 1, 5)
        assert event.color == EventColor.GREEN

    @pytest.mark.asyncio
    async def test_completion_date_defaults_to_now(self, engine_, uow_factory, chain, clock):
        audit = chain[MilestoneStage.AUDIT_CLIENT]
        clock.now = utc(2025, 1, 6, 15, 30)

        await engine_.complete(audit.id)

        async with uow_factory() as uow:
            done = await uow.milestones.get(audit.id)
        assert done.actual_date == utc(2025, 1, 6, 15, 30)

    @pytest.mark.asyncio
    async def test_overdue_dependent_reset_to_pending(self, engine_, uow_factory, chain):
        audit = chain[MilestoneStage.AUDIT_CLIENT]
        feedback = chain[MilestoneStage.CLIENT_FEEDBACK]
        async with uow_factory() as uow:
            await uow.milestones.set_status(feedback.id, MilestoneStatus.OVERDUE)
            await uow.commit()

        await engine_.complete(audit.id, utc(2025, 1, 5))

        async with uow_factory() as uow:
            moved = await uow.milestones.get(feedback.id)
        assert moved.status == MilestoneStatus.PENDING

    @pytest.mark.asyncio
    async def test_only_direct_dependents_are_rescheduled(self, engine_, uow_factory, chain):
        audit = chain[MilestoneStage.AUDIT_CLIENT]
        final = chain[MilestoneStage.FINAL_VERSION]

        result = await engine_.complete(audit.id, utc(2025, 1, 5))

        assert final.id not in result.triggered_milestone_ids
        async with uow_factory() as uow:
            untouched = await uow.milestones.get(final.id)
        assert untouched.planned_date == final.planned_date

    @pytest.mark.asyncio
    async def test_chain_advances_link_by_link(self, engine_, uow_factory, chain, clock):
        clock.now = utc(2025, 1, 5)
        await engine_.complete(chain[MilestoneStage.AUDIT_CLIENT].id, utc(2025, 1, 5))
        clock.now = utc(2025, 1, 8)
        result = await engine_.complete(chain[MilestoneStage.CLIENT_FEEDBACK].id, utc(2025, 1, 8))

        final_id = chain[MilestoneStage.FINAL_VERSION].id
        assert result.triggered_milestone_ids == [final_id]
        async with uow_factory() as uow:
            final = await uow.milestones.get(final_id)
        assert final.planned_date == utc(2025, 1, 13)

    @pytest.mark.asyncio
    async def test_j2_reminder_scheduled_for_dependent(self, engine_, uow_factory, chain, seeded, clock):
        feedback = chain[MilestoneStage.CLIENT_FEEDBACK]
        clock.now = utc(2025, 1, 5)

        await engine_.complete(chain[MilestoneStage.AUDIT_CLIENT].id, utc(2025, 1, 5))

        async with uow_factory() as uow:
            alerts = await uow.alerts.list_by_milestone(feedback.id)
        assert [a.alert_type for a in alerts] == [AlertType.REMINDER_J2]
        assert alerts[0].scheduled_for == utc(2025, 1, 7)
        assert alerts[0].recipient_user_id == seeded.user.id

    @pytest.mark.asyncio
    async def test_no_reminder_when_date_already_close(self, engine_, uow_factory, chain, clock):
        feedback = chain[MilestoneStage.CLIENT_FEEDBACK]
        clock.now = utc(2025, 1, 8)

        # New date 09/01, J-2 would be 07/01
        await engine_.complete(chain[MilestoneStage.AUDIT_CLIENT].id, utc(2025, 1, 5))

        async with uow_factory() as uow:
            assert await uow.alerts.list_by_milestone(feedback.id) == []

    @pytest.mark.asyncio
    async def test_vendor_notified_of_completion(self, engine_, uow_factory, chain, seeded):
        await engine_.complete(chain[MilestoneStage.AUDIT_CLIENT].id, utc(2025, 1, 5))

        async with uow_factory() as uow:
            notifications = await uow.notifications.list(seeded.user.id)
        assert len(notifications) == 1
        assert notifications[0].title == "Jalon validé"
        assert notifications[0].type == NotificationType.SUCCESS
        assert "Audit Client" in notifications[0].description
        assert notifications[0].related_entity_type == "milestone"

    @pytest.mark.asyncio
    async def test_unknown_milestone_raises_not_found(self, engine_):
        with pytest.raises(NotFoundError):
            await engine_.complete(uuid4())

    @pytest.mark.asyncio
    async def test_completing_overdue_milestone_directly(self, engine_, uow_factory, chain):
        audit = chain[MilestoneStage.AUDIT_CLIENT]
        async with uow_factory() as uow:
            await uow.milestones.set_status(audit.id, MilestoneStatus.OVERDUE)
            await uow.commit()

        await engine_.complete(audit.id, utc(2025, 1, 6))

        async with uow_factory() as uow:
            done = await uow.milestones.get(audit.id)
        assert done.status == MilestoneStatus.COMPLETED
