"""Core components of the UI Mapper framework."""

from .config import Config, config
from .errors import (
    DecodeError,
    DetectionBusyError,
    DetectionError,
    NotFoundError,
    PreconditionError,
    RenderInvariantViolation,
    UIMapperError,
)
from .logger import Logger, log

__all__ = [
    "Config",
    "DecodeError",
    "DetectionBusyError",
    "DetectionError",
    "Logger",
    "NotFoundError",
    "PreconditionError",
    "RenderInvariantViolation",
    "UIMapperError",
    "config",
    "log",
]
