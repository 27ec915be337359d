#!/usr/bin/env python3
"""Script to initialize database with default data"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from league_api.core.config import logger, settings
from league_api.core.seed import CONSOLE_APPLICATION_NAME, seed_default_data
from league_api.models import OAuthApplication, init_db
from league_api.models.database import async_session_maker


async def main():
    """Main initialization function"""
    print("=" * 60)
    print("League API - Database Initialization")
    print("=" * 60)

    try:
        logger.info("Initializing database...")
        await init_db()
        logger.info("✓ Database initialized")

        logger.info("Seeding default data...")
        await seed_default_data()

        async with async_session_maker() as db:
            result = await db.execute(
                select(OAuthApplication).where(OAuthApplication.name == CONSOLE_APPLICATION_NAME)
            )
            console = result.scalar_one()

        print("\n" + "=" * 60)
        print("✓ Database initialization completed successfully!")
        print("=" * 60)
        print("\nYou can now request a token:")
        print(f"\ncurl -X POST http://localhost:{settings.port}/oauth/token \\")
        print('  -d "grant_type=password" \\')
        print(f'  -d "username={settings.admin_email}" \\')
        print('  -d "password=<admin password>" \\')
        print(f'  -d "client_id={console.uid}" \\')
        print('  -d "scope=read write admin"')
        print()

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        print(f"\n✗ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
