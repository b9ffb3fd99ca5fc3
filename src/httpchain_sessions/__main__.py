import logging
import sys

from .server import create_server
from .settings import Settings


def main() -> None:
    settings = Settings()
    # stdout carries the MCP stream
    logging.basicConfig(
        level=settings.log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    create_server(settings).run()


if __name__ == "__main__":
    main()
