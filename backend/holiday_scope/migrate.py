"""Apply pending holiday-location updates.

Run with:  python -m holiday_scope.migrate
"""

from __future__ import annotations

import asyncio
import logging

from holiday_scope.db import dispose_engine, get_session_factory
from holiday_scope.services.migration import run_holiday_location_updates

logger = logging.getLogger(__name__)


async def run_updates() -> None:
    """Run the updates in a fresh session and report what changed."""
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            result = await run_holiday_location_updates(session)
        logger.info(
            "Holiday location updates: tables_created=%s work_locations_fixed=%s employees_updated=%d",
            result.tables_created,
            result.work_locations_fixed,
            result.employees_updated,
        )
    finally:
        await dispose_engine()


def main() -> None:
    """Entry point for the migration command."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_updates())


if __name__ == "__main__":
    main()
