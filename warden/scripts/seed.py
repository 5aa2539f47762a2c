"""
Create the default administrator from DEFAULT_ADMIN_* settings if it is missing:

  python -m warden.scripts.seed
"""

import logging
import sys

from warden.container import build_container
from warden.core.config import get_settings
from warden.core.log import configure_logging

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    container = build_container(settings)
    try:
        if container.seed_default_admin() is None:
            logger.info("Admin user '%s' already present; nothing to do", settings.DEFAULT_ADMIN_USERNAME)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        container.close()


if __name__ == "__main__":
    sys.exit(main())
