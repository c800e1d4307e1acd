from floss_funding.core.config.config_service import ConfigService, config_service

__all__ = ["ConfigService", "config_service"]
