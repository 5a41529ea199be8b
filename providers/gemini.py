"""Gemini implementation of the model provider capabilities."""
from typing import Optional

from config import Config
from providers.base import ModelProvider, ProviderConfigurationError
from utils.logger import get_logger

logger = get_logger("providers.gemini")

# Gemini client (ensure google-genai installed and GEMINI_API_KEY env var set)
try:
    from google import genai
    from google.genai import types
except Exception:
    genai = None
    types = None

STYLE_ITEM_DESCRIPTION = "A creative style or persona"


class GeminiProvider(ModelProvider):
    """Model provider backed by the google-genai SDK."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        description_model: str = Config.DESCRIPTION_MODEL,
        validation_model: str = Config.VALIDATION_MODEL,
        suggestion_model: str = Config.SUGGESTION_MODEL,
        image_model: str = Config.IMAGE_MODEL,
    ):
        if genai is None or types is None:
            raise ProviderConfigurationError("genai client not available (google-genai not installed or import failed)")
        if not api_key:
            raise ProviderConfigurationError("GEMINI_API_KEY must be set in environment variables")

        self.client = genai.Client(api_key=api_key)
        self.description_model = description_model
        self.validation_model = validation_model
        self.suggestion_model = suggestion_model
        self.image_model = image_model

    @staticmethod
    def _no_thinking_config():
        return types.GenerateContentConfig(
            thinking_config=types.ThinkingConfig(thinking_budget=0),
        )

    def describe(self, image: bytes, mime_type: str, instruction: str) -> Optional[str]:
        logger.debug(f"Requesting description from {self.description_model} ({mime_type}, {len(image)} bytes)")
        response = self.client.models.generate_content(
            model=self.description_model,
            contents=[
                types.Part.from_bytes(data=image, mime_type=mime_type),
                instruction,
            ],
            config=self._no_thinking_config(),
        )
        return response.text

    def classify(self, prompt: str) -> Optional[str]:
        logger.debug(f"Requesting classification from {self.validation_model}")
        response = self.client.models.generate_content(
            model=self.validation_model,
            contents=prompt,
            config=self._no_thinking_config(),
        )
        return response.text

    def synthesize_image(self, prompt: str) -> Optional[bytes]:
        logger.debug(f"Requesting image from {self.image_model}: {prompt[:100]}...")
        response = self.client.models.generate_images(
            model=self.image_model,
            prompt=prompt,
            config=types.GenerateImagesConfig(
                number_of_images=1,
                output_mime_type="image/jpeg",
                aspect_ratio="1:1",
            ),
        )
        generated = response.generated_images or []
        if not generated or generated[0].image is None:
            return None
        return generated[0].image.image_bytes

    def suggest_styles(self, image: bytes, mime_type: str, instruction: str) -> Optional[str]:
        logger.debug(f"Requesting style suggestions from {self.suggestion_model}")
        response = self.client.models.generate_content(
            model=self.suggestion_model,
            contents=[
                types.Part.from_bytes(data=image, mime_type=mime_type),
                instruction,
            ],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=types.Schema(
                    type=types.Type.ARRAY,
                    items=types.Schema(
                        type=types.Type.STRING,
                        description=STYLE_ITEM_DESCRIPTION,
                    ),
                ),
            ),
        )
        return response.text
