"""Prompt construction for UI component detection."""

from __future__ import annotations

import base64
from typing import Any

from loguru import logger

from ..vision.models import ComponentType

HEADER = (
    "Analyze this screenshot and identify all functional UI components including "
    "Headers, Navigation menus, Buttons, Icons, Input fields, Forms, Cards, and "
    "Footers. For each component, provide its label, type, a brief description, "
    "and its bounding box coordinates as [ymin, xmin, ymax, xmax] normalized "
    "from 0 to 1000."
)


def _response_contract() -> str:
    """Describe the expected JSON array in plain text."""
    categories = "|".join(member.value for member in ComponentType)
    return (
        "Return ONLY a JSON array. Each item must be an object with keys:\n"
        "    label: string        # short name of the component\n"
        f"    type: {categories}\n"
        "    description: string  # brief explanation of what it is\n"
        "    box_2d: [ymin, xmin, ymax, xmax]  # integers 0-1000\n"
    )


def build_detection_prompt() -> str:
    """Return the full instruction text for one detection call."""
    prompt = f"{HEADER}\n{_response_contract()}### JSON RESPONSE ONLY ###"
    logger.debug("Detection prompt generated, {0} characters", len(prompt))
    return prompt


def build_detection_messages(image_bytes: bytes, mime_type: str) -> list[dict[str, Any]]:
    """Return a chat message list carrying the image and the prompt."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return [
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
                {"type": "text", "text": build_detection_prompt()},
            ],
        }
    ]
