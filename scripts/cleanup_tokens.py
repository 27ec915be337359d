#!/usr/bin/env python3
"""Script to delete access tokens that can no longer be used"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from league_api.core.config import logger
from league_api.models.database import async_session_maker
from league_api.services.access_token_service import access_token_service


async def cleanup(days_to_keep: int, session_maker=async_session_maker) -> int:
    """Delete tokens revoked or expired more than days_to_keep days ago"""
    async with session_maker() as db:
        return await access_token_service.cleanup_expired_tokens(db, days_to_keep=days_to_keep)


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Delete revoked and expired access tokens")
    parser.add_argument(
        "--days",
        "-d",
        type=int,
        default=7,
        help="Keep tokens that became unusable within this many days (default: 7)",
    )

    args = parser.parse_args()
    if args.days < 0:
        parser.error("--days must not be negative")

    try:
        deleted = asyncio.run(cleanup(args.days))
    except Exception as e:
        logger.error(f"Token cleanup failed: {e}")
        print(f"✗ Error: {e}")
        sys.exit(1)

    print(f"✓ Deleted {deleted} access token(s) older than {args.days} day(s)")


if __name__ == "__main__":
    main()
