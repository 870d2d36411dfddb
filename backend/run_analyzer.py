#!/usr/bin/env python3
"""
Run the wellness analyzer once for the demo user.
Intended for cron-style scheduling; exits non-zero when the run fails.
"""
import asyncio
import logging
import sys

from config import LOG_LEVEL
from database import SessionLocal, init_db
from providers.openai_provider import get_provider
from services.analyzer_service import AnalyzerService
from services.store import Store

logger = logging.getLogger("run_analyzer")


async def run_once() -> dict:
    init_db()
    db = SessionLocal()
    try:
        return await AnalyzerService(Store(db), get_provider()).run()
    finally:
        db.close()


def main() -> int:
    logging.basicConfig(level=LOG_LEVEL)
    try:
        asyncio.run(run_once())
    except Exception:
        logger.exception("Analyzer run failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
