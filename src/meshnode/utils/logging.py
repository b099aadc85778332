"""Structured JSON logging for profile editing, validation and report decoding.

Records carry a ``profile_id`` extra so entries from one profile can be
filtered out of the shared log file.
"""

import os
import sys
from loguru import logger
from meshnode.utils.settings import Settings
from pathlib import Path
from typing import Any


CONSOLE_FORMAT = (
    '<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | '
    '<cyan>{extra[profile_id]}</cyan> <cyan>{name}</cyan>:<cyan>{line}</cyan> - '
    '<level>{message}</level>'
)


def configure_logging(
    log_file: str | None = None,
    log_level: str = 'DEBUG',
    include_console: bool = False,
    settings: Settings | None = None,
) -> None:
    """Configure structured JSON logging.

    Args:
        log_file: Path to log file (defaults to ``settings.log_path``)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        include_console: Whether to also log to console
        settings: Source of the default log location and rotation policy
    """
    settings = settings or Settings()
    logger.remove()
    logger.configure(extra={'profile_id': ''})

    log_path = Path(log_file) if log_file else settings.log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        str(log_path),
        serialize=True,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        compression='gz',
        level=log_level,
        backtrace=True,
        diagnose=False,
    )

    if include_console or os.getenv('MESHNODE_DEBUG'):
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level, colorize=True)


def configure_from_settings(settings: Settings, debug: bool = False) -> None:
    """Configure logging for a CLI run; ``debug`` forces DEBUG level on stderr."""
    configure_logging(
        log_level='DEBUG' if debug else settings.log_level,
        include_console=debug or settings.include_console,
        settings=settings,
    )


def get_logger(profile_id: str = '') -> Any:
    """Get logger bound to a profile identifier.

    Args:
        profile_id: Identifier of the profile being edited or validated

    Returns:
        Logger instance with profile ID bound
    """
    return logger.bind(profile_id=profile_id)


def log_validation_result(profile_id: str, issues: list[Any]) -> None:
    """Log the outcome of a profile validation run.

    Args:
        profile_id: Identifier of the validated profile
        issues: Issues reported by the validator
    """
    log = get_logger(profile_id)

    if issues:
        log.debug(
            'Profile validation found issues',
            issue_count=len(issues),
            fields=sorted({issue.field for issue in issues}),
        )
    else:
        log.debug('Profile validation passed')
