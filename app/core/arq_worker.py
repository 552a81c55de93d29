import asyncio
import logging
import os
import sys
import time

from arq import cron, func, Worker
from arq.connections import RedisSettings

from app.core.storage import get_blob_store

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)


async def purge_board_files(ctx, board_id: str):
    """Background job: remove the blob namespace of a deleted board."""
    logger.info(f"🔹 Purging blobs for board {board_id}")
    try:
        removed = get_blob_store().purge(board_id)
        if removed:
            logger.info(f"✅ Blobs removed for board {board_id}")
        else:
            logger.info(f"⚠️ No blobs stored for board {board_id}")
    except OSError as e:
        logger.error(f"❌ Failed to purge blobs for board {board_id}: {e}", exc_info=True)
        raise



async def worker_heartbeat(ctx):
    redis = ctx["redis"]
    await redis.set(
        "arq:heartbeat", str(time.time()), ex=60
    )  # expire in 60 seconds


async def run_worker_forever():
    """
    Resilient loop that keeps the ARQ worker running.
    Restarts worker on failure with exponential backoff.
    """
    backoff = 1
    while True:
        try:
            worker = Worker(
                functions = [
                    # Retry behavior for purge jobs
                    func(purge_board_files, max_tries=3),
                ],
                redis_settings = RedisSettings.from_dsn(os.getenv("REDIS_URL", "redis://localhost:6379")),
                cron_jobs = [
                    cron(worker_heartbeat, second=0),
                ],
                keep_result = 0,
                max_jobs = 5,
            )
            logger.info("🚀 Starting ARQ worker...")
            await worker.async_run()
        except asyncio.CancelledError:
            logger.warning("🌀 Worker shutdown triggered by CancelledError, safe to ignore.")
        except Exception as e:
            logger.error(f"❌ Worker crashed: {e}", exc_info=True)
            logger.info(f"🔁 Restarting worker in {backoff} seconds...")
            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, 60)  # Max backoff 1 minute
        else:
            backoff = 1  # Reset backoff on clean exit


if __name__ == "__main__":
    try:
        asyncio.run(run_worker_forever())
    except KeyboardInterrupt:
        logger.info("🛑 Worker manually stopped.")
