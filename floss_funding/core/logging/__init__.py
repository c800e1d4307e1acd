from floss_funding.core.logging.debug_logger import PACKAGE_LOGGER, configure_debug_logging

__all__ = ["PACKAGE_LOGGER", "configure_debug_logging"]
