"""Uvicorn runner for the portal, normally deployed behind a reverse proxy."""

import copy
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from portal.app import App
from portal.config import Config
from portal.web.server import create_fastapi_app

ACCESS_LOG_FORMAT = '%(asctime)s - %(client_addr)s "%(request_line)s" %(status_code)s'
DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def build_log_config(config: Config) -> dict[str, Any]:
    """Uvicorn logging config with portal formats; the uvicorn default is left untouched."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = ACCESS_LOG_FORMAT
    log_config["formatters"]["default"]["fmt"] = DEFAULT_LOG_FORMAT
    level = "DEBUG" if config.debug else "INFO"
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        if logger_name in log_config["loggers"]:
            log_config["loggers"][logger_name]["level"] = level
    return log_config


def run_server(app: App, config: Config) -> None:
    """Serve the portal; forwarded headers are trusted only from the configured proxy addresses."""
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config),
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips=config.forwarded_allow_ips,
    )
