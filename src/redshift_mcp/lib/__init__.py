"""Resource and tool implementations and logging utilities."""

from .logging_config import configure_from_env, setup_logging, get_logger

__all__ = [
    'configure_from_env',
    'setup_logging',
    'get_logger'
]
