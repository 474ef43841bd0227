"""Deployment configuration startup logging."""

from loguru import logger

from hdfs_usage.config.settings import AppSettings, settings


def log_deployment_configuration(app_settings: AppSettings = settings) -> None:
    """Log deployment configuration during application startup.

    Called from main.py lifespan function.
    """
    logger.info("-" * 80)

    if app_settings.env == "production":
        logger.info("PRODUCTION MODE")
    else:
        logger.info("DEVELOPMENT MODE")

    logger.info("")
    logger.info(f"Usage store:      {app_settings.store.db_path_resolved}")
    logger.info(f"Scan batch size:  {app_settings.store.default_scan_batch_size} rows")
    logger.info(f"CORS Origins:     {', '.join(app_settings.cors_origins)}")
    logger.info("-" * 80)
