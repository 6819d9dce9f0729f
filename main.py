import time
import logging
import signal
import json
import argparse

from tenacity import retry, stop_after_attempt, wait_fixed
from core.app_context import AppContext
from core.config_loader import load_config
from database.database import get_engine, init_db
from database.uow import scoring_uow
from pipeline.runner import run_scoring_batch
from pipeline.staging import IncomingPosting, stage_postings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True


def signal_handler(sig, frame):
    global running
    logger.info("Shutdown signal received")
    running = False


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2))
def wait_for_db(database_url: str):
    """Create missing tables, retrying while the database comes up."""
    init_db(get_engine(database_url))


def load_postings_file(path: str):
    """Load a JSON array of postings for staging."""
    logger.info(f"Loading postings from {path}")
    with open(path, 'r') as f:
        raw = json.load(f)
    return [IncomingPosting(**item) for item in raw]


def run_staging(ctx: AppContext, path: str):
    postings = load_postings_file(path)
    with scoring_uow(ctx.session_factory) as repo:
        result = stage_postings(repo, postings)
    logger.info(
        f"Staged {result.staged} postings "
        f"({result.skipped_by_hash} duplicates by content, {result.failed} failed)"
    )


def run_scheduled_loop(ctx: AppContext):
    interval = ctx.config.schedule.interval_seconds

    cycle_count = 0
    while running:
        cycle_count += 1
        cycle_start = time.time()
        logger.info(f"=== Starting Cycle #{cycle_count} ===")
        try:
            run_scoring_batch(ctx)
        except Exception as e:
            logger.error(f"Error in main loop: {e}", exc_info=True)

        cycle_elapsed = time.time() - cycle_start
        if running:
            logger.info(f"=== Cycle #{cycle_count} completed in {cycle_elapsed:.2f}s. Sleeping for {interval} seconds... ===")
            # Sleep in chunks to allow responsive shutdown
            for _ in range(max(1, interval // 5)):
                if not running:
                    break
                time.sleep(5)


def main():
    parser = argparse.ArgumentParser(description="Proactive match scorer")
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--once', action='store_true', help='Run a single scoring batch and exit')
    group.add_argument('--serve', action='store_true', help='Serve the HTTP trigger with uvicorn')
    group.add_argument('--stage-file', type=str, help='Stage postings from a JSON file and exit')
    parser.add_argument('--config', type=str, default='config.yaml', help='Path to config.yaml')
    args = parser.parse_args()

    config = load_config(args.config)

    if args.serve:
        import uvicorn
        from web.backend.app import create_app

        logger.info(f"Serving scoring trigger on {config.web.host}:{config.web.port}")
        uvicorn.run(create_app(config), host=config.web.host, port=config.web.port, log_level="info")
        return

    ctx = AppContext.build(config)
    wait_for_db(config.database.url)

    if args.stage_file:
        run_staging(ctx, args.stage_file)
        return

    if args.once:
        result = run_scoring_batch(ctx)
        logger.info(json.dumps({'success': result.success, 'data': result.to_response_data()}))
        return

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    run_scheduled_loop(ctx)


if __name__ == "__main__":
    main()
