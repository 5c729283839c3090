"""AI utilities: detection prompt, OpenAI client wrapper and response parsing."""

from .detector import DetectionBackend, DetectionService, apply_detection
from .openai_client import OpenAIClient, OpenAIDetectionBackend, get_openai_client
from .prompt import build_detection_messages, build_detection_prompt
from .response_parser import DetectionParseResult, parse_detection_response

__all__ = [
    "DetectionBackend",
    "DetectionParseResult",
    "DetectionService",
    "OpenAIClient",
    "OpenAIDetectionBackend",
    "apply_detection",
    "build_detection_messages",
    "build_detection_prompt",
    "get_openai_client",
    "parse_detection_response",
]
