"""
Command line entry point.

Usage:
    deliveryops-cli init-db                  # Create tables
    deliveryops-cli run-deadline-alerts      # Run the deadline alerts job once (cron)
    deliveryops-cli seed-demo                # Dry-run (shows what will be created)
    deliveryops-cli seed-demo --apply        # Insert a demo project with its milestone chain
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import Optional

# Suppress noisy SQLAlchemy logs
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

from deliveryops.core.logger import logger
from deliveryops.models.enums import UserRole
from deliveryops.utils.datetime_utils import now_utc, parse_iso_to_utc

DEMO_ORG_ID = "demo-org"
DEMO_VENDOR_USER_ID = "demo-vendor-user"


async def init_db_command() -> int:
    from deliveryops.infrastructure.local.database import init_db

    await init_db()
    logger.info("Database tables created")
    return 0


async def run_deadline_alerts_command() -> int:
    from deliveryops.api.deps import get_deadline_alert_runner
    from deliveryops.infrastructure.local.database import init_db

    await init_db()
    result = await get_deadline_alert_runner().run()
    print(result.model_dump_json(indent=2))
    return 1 if result.alerts.errors or result.overdue.errors else 0


async def seed_demo_command(apply: bool, start: Optional[datetime]) -> int:
    from deliveryops.api.deps import get_milestone_generator, get_uow_factory
    from deliveryops.infrastructure.local.database import init_db

    start = start or now_utc()
    if not apply:
        print(f"[dry-run] would create project, vendor and vendor user in org {DEMO_ORG_ID}")
        print(f"[dry-run] would generate the default milestone chain starting {start.date()}")
        return 0

    await init_db()
    async with get_uow_factory()() as uow:
        user = await uow.users.get(DEMO_VENDOR_USER_ID)
        if user is None:
            user = await uow.users.create(
                DEMO_VENDOR_USER_ID,
                DEMO_ORG_ID,
                email="vendor@example.com",
                name="Demo Vendor",
                role=UserRole.VENDOR,
            )
        vendor = await uow.vendors.create(DEMO_ORG_ID, "Demo Studio", user_id=user.id)
        project = await uow.projects.create(DEMO_ORG_ID, "Demo Project", vendor_id=vendor.id)
        await uow.commit()

    milestones = await get_milestone_generator().generate(DEMO_ORG_ID, project.id, start)
    for milestone in milestones:
        print(f"{milestone.planned_date.date()}  {milestone.stage.value:<22} {milestone.title}")
    print(f"Project {project.id} seeded with {len(milestones)} milestones")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="deliveryops-cli",
        description="Delivery milestones and deadline alerts.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("run-deadline-alerts", help="Run the deadline alerts job once")
    seed = subparsers.add_parser("seed-demo", help="Seed a demo project")
    seed.add_argument("--apply", action="store_true", help="Insert data (default is dry-run).")
    seed.add_argument("--start", type=parse_iso_to_utc, default=None, help="Project start (ISO date)")
    args = parser.parse_args(argv)

    if args.command == "init-db":
        return asyncio.run(init_db_command())
    if args.command == "run-deadline-alerts":
        return asyncio.run(run_deadline_alerts_command())
    return asyncio.run(seed_demo_command(args.apply, args.start))


if __name__ == "__main__":
    sys.exit(main())
