"""Device query API service."""

from .app import create_app


def main(argv=None):
    """Entry point for API service."""
    import argparse

    from aiohttp import web

    from .config import load_config
    from sensorhub.query.service import DeviceService
    from sensorhub.shared.database import PointStorage
    from sensorhub.shared.logging import setup_logging, get_logger

    parser = argparse.ArgumentParser(description="Serve device queries over HTTP")
    parser.add_argument("--config", help="Path to YAML config file")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)
    logger = get_logger("api")

    storage = PointStorage(config.db)
    app = create_app(DeviceService(storage))

    logger.info(f"Serving device API on http://{config.host}:{config.port}/api")
    web.run_app(app, host=config.host, port=config.port, print=None)


__all__ = ["create_app", "main"]
