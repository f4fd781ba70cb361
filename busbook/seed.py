"""Seed the bus catalog and optionally an admin account.

Usage:

    python -m busbook.seed [--force] [--create-schema]
                           [--admin-email EMAIL --admin-password PASSWORD]
"""
import argparse
import asyncio

from busbook.db.base import Base
from busbook.db.session import async_session, dispose_engine, engine
from busbook.exceptions import DuplicateEmail
from busbook.services import auth as auth_service
from busbook.services import catalog


async def create_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def run(force: bool = False, admin_email: str = None, admin_password: str = None, with_schema: bool = False):
    if with_schema:
        await create_schema()
    async with async_session() as db:
        seeded = await catalog.seed_buses(db, force=force)
        if seeded:
            print(f"Seeded {seeded} buses")
        else:
            print("Catalog already seeded (use --force to reload)")

    if admin_email and admin_password:
        async with async_session() as db:
            try:
                await auth_service.register_user(db, "admin", admin_email, admin_password, role="admin")
                print(f"Created admin {admin_email}")
            except DuplicateEmail:
                print(f"Admin {admin_email} already exists")
    await dispose_engine()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the bus catalog")
    parser.add_argument("--force", action="store_true", help="clear the catalog and reload the sample buses")
    parser.add_argument("--create-schema", action="store_true", help="create tables before seeding (dev only)")
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-password")
    args = parser.parse_args(argv)
    asyncio.run(run(args.force, args.admin_email, args.admin_password, args.create_schema))


if __name__ == "__main__":
    main()
