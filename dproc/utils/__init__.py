"""
工具函数模块
"""

from .display import Display
from .logger import Logger, create_logger, setup_logging
from .spinner import Spinner, create_spinner

__all__ = [
    "Display",
    "Logger",
    "create_logger",
    "setup_logging",
    "Spinner",
    "create_spinner",
]
