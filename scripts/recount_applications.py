#!/usr/bin/env python3
"""
Repair: recompute jobs.application_count from application rows.

Usage:
    python scripts/recount_applications.py            # every job
    python scripts/recount_applications.py <job_id>   # one job
"""

import sys
import asyncio
from pathlib import Path
from uuid import UUID

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select
from campus_placement.db.session import AsyncSessionLocal, engine
from campus_placement.models.job import Job
from campus_placement.services.coordinator import ConsistencyCoordinator


async def recount(job_ids=None):
    """Recount the given jobs (all jobs when empty) and report drift."""
    async with AsyncSessionLocal() as session:
        if not job_ids:
            job_ids = (await session.execute(select(Job.id))).scalars().all()
        before = dict((await session.execute(
            select(Job.id, Job.application_count).where(Job.id.in_(job_ids))
        )).all())

        coordinator = ConsistencyCoordinator(session)
        drifted = 0
        for job_id in job_ids:
            count = await coordinator.recount(job_id)
            if before.get(job_id) != count:
                drifted += 1
                print(f"   {job_id}: {before.get(job_id)} -> {count}")

        print("=" * 60)
        print(f"Jobs checked: {len(job_ids)}")
        print(f"Counters repaired: {drifted}")
        print("=" * 60)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(recount([UUID(arg) for arg in sys.argv[1:]]))
