"""Entry point: python -m pipewatch.dashboard"""

import logging
import os
import sys

from ..client import AzureDevOpsClient
from ..config import ConfigError, get_logs_dir, load_config
from .app import PipewatchDashboard


def main() -> None:
    log_path = get_logs_dir() / "dashboard.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_path),
        level=os.environ.get("PIPEWATCH_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("pipewatch.dashboard")

    try:
        config = load_config()
        config.validate()
    except ConfigError as e:
        sys.exit(f"pipewatch: {e}")

    try:
        with AzureDevOpsClient(config.organization, config.project, config.pat) as client:
            app = PipewatchDashboard(config=config, client=client)
            app.run()
    except Exception:
        logger.exception("Dashboard crashed")
        raise


if __name__ == "__main__":
    main()
