import sys
import logging
import argparse

from aiohttp import web

from kotoba import __version__
from kotoba.config import DEFAULT_PATHS, ConfigError, load_config
from kotoba.server import create_app
from kotoba.state import StateInitError


log = logging.getLogger("kotoba")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="kotoba-server", description="Kotoba GraphQL server"
    )
    parser.add_argument(
        "--config",
        action="append",
        metavar="PATH",
        help="JSON config file, can be repeated (default: {})".format(
            ", ".join(DEFAULT_PATHS)
        ),
    )
    parser.add_argument("--host", help="address to bind")
    parser.add_argument("--port", type=int, help="port to listen on")
    parser.add_argument(
        "--debug", action="store_true", default=None, help="debug mode"
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s " + __version__
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        config = load_config(
            args.config or DEFAULT_PATHS,
            host=args.host,
            port=args.port,
            debug=args.debug,
        )
        app = create_app(config)
    except (ConfigError, StateInitError) as e:
        log.error("Failed to start server: %s", e)
        return 1

    url = "http://{}:{}".format(config.host, config.port)
    log.info("Starting %s", config.name)
    log.info("GraphQL endpoint is running on %s%s", url, config.query_path)
    log.info("GraphiQL is available on %s%s", url, config.ide_path)
    web.run_app(
        app,
        host=config.host,
        port=config.port,
        handler_cancellation=True,
        print=None,
    )
    log.info("Finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
