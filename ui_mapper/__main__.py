"""Run the UI Mapper API server: ``python -m ui_mapper``."""

import uvicorn

from .api import create_app
from .core.config import config
from .core.logger import log


def main() -> None:
    config.validate_config()
    log.info(f"Starting UI Mapper API on {config.api_host}:{config.api_port}")
    uvicorn.run(create_app(), host=config.api_host, port=config.api_port, log_level=config.get_console_log_level().lower())


if __name__ == "__main__":
    main()
