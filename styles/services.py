"""Style suggestion service. Fail-soft: every failure yields an empty list."""
import json
from typing import Any, List, Optional

from providers.base import ModelProvider
from utils.logger import get_logger

logger = get_logger("styles.services")

MAX_SUGGESTIONS = 4
SUGGESTION_INSTRUCTION = (
    "Based on the person in this image, suggest 3-4 creative, one-or-two-word avatar styles or personas. "
    "Examples: 'Galactic Explorer', 'Steampunk Inventor', 'Forest Mage', 'Cyberpunk Hacker', "
    "'Film Noir Detective', 'Pop Art Portrait'. Return ONLY a JSON array of strings."
)


def parse_style_suggestions(text: Optional[str]) -> List[str]:
    """
    Parse the provider's JSON text into style labels.

    Non-string items and blank labels are dropped; at most
    MAX_SUGGESTIONS labels are returned, in the model's order.
    """
    if not text or not text.strip():
        logger.warning("Model returned no text for suggestions")
        return []

    try:
        parsed: Any = json.loads(text.strip())
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning(f"Failed to parse suggestions from model: {e}")
        return []

    if not isinstance(parsed, list):
        logger.warning(f"Suggestions were not a JSON array: {type(parsed).__name__}")
        return []

    labels = [item.strip() for item in parsed if isinstance(item, str) and item.strip()]
    return labels[:MAX_SUGGESTIONS]


def suggest_styles(provider: ModelProvider, image: bytes, mime_type: str) -> List[str]:
    """
    Ask the provider for 3-4 creative style labels for a portrait.

    Args:
        provider: Model provider
        image: Raw uploaded image bytes
        mime_type: Image MIME type

    Returns:
        Ordered list of 0-4 labels. Never raises.
    """
    try:
        text = provider.suggest_styles(image, mime_type, SUGGESTION_INSTRUCTION)
    except Exception as e:
        logger.error(f"Style suggestion request failed: {e}")
        return []

    suggestions = parse_style_suggestions(text)
    logger.info(f"Suggested {len(suggestions)} style(s): {suggestions}")
    return suggestions
