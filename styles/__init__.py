"""Style suggestion module."""
from styles.models import SuggestStylesRequest, SuggestStylesResponse
from styles.services import parse_style_suggestions, suggest_styles

__all__ = [
    "SuggestStylesRequest",
    "SuggestStylesResponse",
    "parse_style_suggestions",
    "suggest_styles"
]
