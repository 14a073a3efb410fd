"""Application entry point for the investor portal server."""

from portal.app import App
from portal.config import load_config
from portal.logging import setup_logging
from portal.web.runner import run_server


def main() -> None:
    config = load_config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
