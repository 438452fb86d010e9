"""Run the visit counter service with uvicorn: ``python -m visit_counter``."""
import argparse
import logging

import uvicorn

from visit_counter.api.main import create_app
from visit_counter.config import load_settings


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Visit counter badge service")
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--host", help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, help="Bind port (overrides config)")
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
