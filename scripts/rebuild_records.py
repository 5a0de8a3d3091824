"""Rebuild all personal record podiums and session statuses from history.

Run after history was changed outside the app (imports, manual fixes):

    python scripts/rebuild_records.py
"""

import asyncio
import logging

from fitledger.db.session import async_session_maker, engine
from fitledger.services.evaluation import SessionEvaluator
from fitledger.services.record_store import SqlAlchemyRecordStore


async def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    async with async_session_maker() as session:
        summary = await SessionEvaluator(SqlAlchemyRecordStore(session)).rebuild_all()
    if summary.committed:
        print(f"Rebuilt {summary.records} records across {summary.sessions} sessions.")
    else:
        print("Rebuild did not complete; see log for the persistence error.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
