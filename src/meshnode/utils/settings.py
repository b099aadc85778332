"""Runtime settings for the meshnode tooling.

Settings are read from the environment, optionally seeded from a dotenv file:

- MESHNODE_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR (default INFO)
- MESHNODE_LOG_FILE: log file path (overrides MESHNODE_LOG_DIR)
- MESHNODE_LOG_DIR: directory for meshnode.log (default ~/.meshnode/logs)
- MESHNODE_LOG_ROTATION: loguru rotation rule (default '10 MB')
- MESHNODE_LOG_RETENTION: loguru retention rule (default '7 days')
- MESHNODE_DEBUG: 'true' mirrors log output to stderr
"""

import os
from dotenv import load_dotenv
from loguru import logger
from meshnode.utils.errors import ErrorCodes, MeshNodeError
from pathlib import Path
from pydantic import BaseModel, Field


LOG_LEVELS = ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL')

DEFAULT_LOG_DIR = Path.home() / '.meshnode' / 'logs'
LOG_FILE_NAME = 'meshnode.log'


class Settings(BaseModel):
    """Logging and output preferences."""

    log_level: str = Field(default='INFO', description='Minimum log level')
    log_file: str | None = Field(default=None, description='Log file path')
    log_dir: Path = Field(default=DEFAULT_LOG_DIR, description='Directory for the default log')
    log_rotation: str = Field(default='10 MB', description='When to start a new log file')
    log_retention: str = Field(default='7 days', description='How long rotated logs are kept')
    include_console: bool = Field(default=False, description='Mirror logs to stderr')

    @property
    def log_path(self) -> Path:
        """Get the log file to write, preferring an explicit log_file."""
        if self.log_file:
            return Path(self.log_file)
        return self.log_dir / LOG_FILE_NAME

    @classmethod
    def from_env(cls, env_file: str = '.env') -> 'Settings':
        """Load settings from environment variables.

        Args:
            env_file: Optional dotenv file loaded before reading the environment.
                Values already present in the environment win.

        Raises:
            MeshNodeError: If MESHNODE_LOG_LEVEL is not a known level
        """
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=False)
            logger.debug(f'Loaded settings from {env_path}')

        log_level = os.environ.get('MESHNODE_LOG_LEVEL', 'INFO').upper()
        if log_level not in LOG_LEVELS:
            raise MeshNodeError(
                message=f'Unknown log level {log_level!r}',
                error_code=ErrorCodes.CONFIG_INVALID,
                suggestion=f'Set MESHNODE_LOG_LEVEL to one of: {", ".join(LOG_LEVELS)}',
            )

        log_dir = os.environ.get('MESHNODE_LOG_DIR')
        return cls(
            log_level=log_level,
            log_file=os.environ.get('MESHNODE_LOG_FILE') or None,
            log_dir=Path(log_dir).expanduser() if log_dir else DEFAULT_LOG_DIR,
            log_rotation=os.environ.get('MESHNODE_LOG_ROTATION') or '10 MB',
            log_retention=os.environ.get('MESHNODE_LOG_RETENTION') or '7 days',
            include_console=os.environ.get('MESHNODE_DEBUG', 'false').lower() == 'true',
        )
