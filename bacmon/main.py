#!/usr/bin/env python3
"""
bacmon server entry point

Serves the snapshot, trend, export and health API over uvicorn.
"""

import argparse
import logging

import uvicorn

from .core.config import load_config_from
from .core.server import create_app


def main():
    """Main entry point for bacmon server."""
    parser = argparse.ArgumentParser(description="bacmon server")
    parser.add_argument("-c", "--config", help="Path to YAML config (default: $BACMON_CONFIG or config.yaml)")
    args = parser.parse_args()

    config = load_config_from(args.config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(config)

    uvicorn_kwargs = {
        "host": config.host,
        "port": config.port,
        "reload": False,
        "access_log": False
    }
    if config.ssl_certfile and config.ssl_keyfile:
        uvicorn_kwargs.update({
            "ssl_keyfile": config.ssl_keyfile,
            "ssl_certfile": config.ssl_certfile
        })

    uvicorn.run(app, **uvicorn_kwargs)


if __name__ == "__main__":
    main()
