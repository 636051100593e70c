import argparse
import logging
import sys

import uvicorn
from redis import RedisError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed, before_sleep_log

from core.app_context import AppContext
from core.config_loader import load_config, AppConfig
from core.store.connection import sanitize_url
from events.factory import supported_event_types
from web.backend.app import create_app

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@retry(
    stop=stop_after_attempt(5),
    wait=wait_fixed(2),
    retry=retry_if_exception_type(RedisError),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True
)
def build_context(config: AppConfig) -> AppContext:
    """Wire the application, waiting for Redis to come up."""
    return AppContext.build(config)


def main():
    parser = argparse.ArgumentParser(description="GitHub Spy - GitHub activity notifications for chat users")
    parser.add_argument('--config', type=str, default=None, help='Path to config.yaml')
    parser.add_argument('--host', type=str, default=None, help='Override web.host')
    parser.add_argument('--port', type=int, default=None, help='Override web.port')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)
    host = args.host or config.web.host
    port = args.port or config.web.port

    logger.info(f"Redis: {sanitize_url(config.redis.url)}")
    logger.info(f"Delivery channel: {config.notifications.channel}")
    logger.info(f"Tracked events: {', '.join(supported_event_types())}")

    try:
        context = build_context(config)
    except RedisError as e:
        logger.error(f"Could not connect to Redis: {e}")
        sys.exit(1)

    if not context.engine.channel.validate_config():
        logger.warning(f"Delivery channel '{config.notifications.channel}' is not fully configured")

    app = create_app(context)

    logger.info(f"Starting GitHub Spy on {host}:{port} (webhook path {config.web.webhook_path})")
    uvicorn.run(app, host=host, port=port, log_level="debug" if args.verbose else "info")


if __name__ == "__main__":
    main()
