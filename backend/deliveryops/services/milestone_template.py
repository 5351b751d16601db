"""
Default delivery plan and template validation.
"""

from deliveryops.core.exceptions import ValidationError
from deliveryops.models.enums import EventColor, EventType, MilestoneStage, VisibilityRole
from deliveryops.models.milestone_template import MilestoneConfig, MilestoneDefinition

ALL_VISIBILITY = [VisibilityRole.ADMIN, VisibilityRole.CLIENT, VisibilityRole.VENDOR]


def build_default_template(config: MilestoneConfig) -> list[MilestoneDefinition]:
    """
    Build the standard six-stage delivery plan.

    The final version is dated from the client feedback's actual completion;
    until then its placeholder date equals start + days_to_final_version.
    """
    return [
        MilestoneDefinition(
            stage=MilestoneStage.AUDIT_CLIENT,
            title="Audit Client",
            description="Audit et analyse des besoins client",
            days_offset=config.days_to_audit,
            event_type=EventType.MEETING,
            color=EventColor.BLUE,
            visible_to_roles=ALL_VISIBILITY,
            visible_to_client=True,
            visible_to_vendor=True,
        ),
        MilestoneDefinition(
            stage=MilestoneStage.PRODUCTION_V1,
            title="Production V1",
            description="Deadline de production de la première version",
            days_offset=config.days_to_v1,
            event_type=EventType.DEADLINE_INTERNAL,
            color=EventColor.YELLOW,
            visible_to_roles=[VisibilityRole.ADMIN, VisibilityRole.VENDOR],
            visible_to_client=False,
            visible_to_vendor=True,
        ),
        MilestoneDefinition(
            stage=MilestoneStage.PRODUCTION_V2,
            title="Production V2",
            description="Deadline de production de la deuxième version avec corrections",
            days_offset=config.days_to_v2,
            event_type=EventType.DEADLINE_INTERNAL,
            color=EventColor.YELLOW,
            visible_to_roles=[VisibilityRole.ADMIN, VisibilityRole.VENDOR],
            visible_to_client=False,
            visible_to_vendor=True,
        ),
        MilestoneDefinition(
            stage=MilestoneStage.IMPLEMENTATION_CLIENT,
            title="Implémentation Client",
            description="Déploiement et implémentation chez le client",
            days_offset=config.days_to_implementation,
            event_type=EventType.DEADLINE_CLIENT,
            color=EventColor.RED,
            visible_to_roles=ALL_VISIBILITY,
            visible_to_client=True,
            visible_to_vendor=True,
        ),
        MilestoneDefinition(
            stage=MilestoneStage.CLIENT_FEEDBACK,
            title="Retour Client",
            description="Collecte des retours et feedbacks du client",
            days_offset=config.days_to_client_feedback,
            event_type=EventType.MEETING,
            color=EventColor.BLUE,
            visible_to_roles=[VisibilityRole.ADMIN, VisibilityRole.CLIENT],
            visible_to_client=True,
            visible_to_vendor=False,
        ),
        MilestoneDefinition(
            stage=MilestoneStage.FINAL_VERSION,
            title="Version Finale",
            description="Livraison de la version finale validée",
            triggered_by=MilestoneStage.CLIENT_FEEDBACK,
            days_after_trigger=config.days_to_final_version - config.days_to_client_feedback,
            event_type=EventType.DEADLINE_CLIENT,
            color=EventColor.GREEN,
            visible_to_roles=ALL_VISIBILITY,
            visible_to_client=True,
            visible_to_vendor=True,
        ),
    ]


def validate_template(template: list[MilestoneDefinition]) -> None:
    """
    Check that stages are unique and every trigger names an earlier stage.

    Raises:
        ValidationError: If the template is empty or inconsistent
    """
    if not template:
        raise ValidationError("Milestone template is empty")

    seen: set[MilestoneStage] = set()
    for definition in template:
        if definition.stage in seen:
            raise ValidationError(f"Duplicate stage in template: {definition.stage.value}")
        if definition.triggered_by is not None and definition.triggered_by not in seen:
            raise ValidationError(
                f"Stage {definition.stage.value} is triggered by {definition.triggered_by.value}, "
                "which must appear earlier in the template"
            )
        seen.add(definition.stage)
