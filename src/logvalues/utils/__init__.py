"""logvalues utility modules.

- logging: Output modes and the template-aware logger
"""

from logvalues.utils.logging import TemplateLogger, get_logger, setup_logging

__all__ = [
    "TemplateLogger",
    "get_logger",
    "setup_logging",
]
