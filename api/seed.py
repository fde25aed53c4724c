"""
Create the schema and seed default users, categories and services.

Usage:
  DATABASE_URL=sqlite:///./data/integriting.db python seed.py

Every step is skipped when its table already has rows, so the script can be
run repeatedly.
"""

from __future__ import annotations

import asyncio
import logging
import os

from auth import repository as auth_repository
from auth import security
from auth.service import ROLE_ADMIN, ROLE_EDITOR
from core import db, schema
from core.logging_config import configure_logging
from publications import repository as publications_repository
from services import repository as services_repository
from services.schemas import ServiceFields

logger = logging.getLogger("seed")

CATEGORIES = ("Governance", "Compliance", "Financial Crimes", "Policy")

SERVICES = (
    (
        "Governance Consulting",
        "Comprehensive auditing and advisory services to help organizations establish robust "
        "governance frameworks, enhance transparency, and improve decision-making processes.",
        "governance",
    ),
    (
        "Intellectual Property Protection",
        "Legal support for protecting intellectual property rights, including copyright, "
        "trademarks, and patents, along with strategies for managing and leveraging IP assets.",
        "intellectual-property",
    ),
    (
        "Contracts, MOUs and Agreements",
        "Professional drafting, review, and negotiation of contracts, memorandums of understanding, "
        "and other legal agreements to protect your interests and ensure clarity.",
        "contracts",
    ),
    (
        "Compliance Advisory",
        "Expert guidance on regulatory compliance, including risk assessment, policy development, "
        "and implementation of controls to ensure adherence to relevant laws and standards.",
        "compliance",
    ),
    (
        "Monitoring and Evaluation",
        "Systematic tracking and assessment of organizational governance and compliance initiatives "
        "to measure effectiveness and identify areas for improvement.",
        "monitoring",
    ),
    (
        "Whistleblower Protection",
        "Comprehensive programs and services to facilitate confidential reporting of misconduct "
        "and ensure legal protection for whistleblowers.",
        "whistleblower",
    ),
)


async def seed_users() -> None:
    if await auth_repository.count_users() > 0:
        logger.info("seed_users_skipped reason=existing_rows")
        return
    await auth_repository.create_user(
        username="admin",
        email=os.environ.get("ADMIN_EMAIL", "admin@integriting.com"),
        password_hash=security.hash_password(os.environ.get("ADMIN_DEFAULT_PASSWORD", "admin123")),
        role=ROLE_ADMIN,
    )
    await auth_repository.create_user(
        username="editor",
        email="editor@integriting.com",
        password_hash=security.hash_password("editor123"),
        role=ROLE_EDITOR,
    )
    logger.info("seed_users_done count=2")


async def seed_categories() -> None:
    if await publications_repository.list_categories():
        logger.info("seed_categories_skipped reason=existing_rows")
        return
    for name in CATEGORIES:
        await publications_repository.insert_category(name)
    logger.info("seed_categories_done count=%s", len(CATEGORIES))


async def seed_services() -> None:
    if await services_repository.list_services():
        logger.info("seed_services_skipped reason=existing_rows")
        return
    for order_number, (title, description, icon) in enumerate(SERVICES, start=1):
        await services_repository.insert_service(
            ServiceFields(title=title, description=description, icon=icon),
            order_number=order_number,
        )
    logger.info("seed_services_done count=%s", len(SERVICES))


async def main() -> None:
    configure_logging()
    await db.init_store()
    try:
        await schema.create_schema()
        await seed_users()
        await seed_categories()
        await seed_services()
    finally:
        await db.close_store()


if __name__ == "__main__":
    asyncio.run(main())
