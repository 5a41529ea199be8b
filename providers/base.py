"""Capability interface for the generative-model provider."""
from abc import ABC, abstractmethod
from typing import Optional


class ProviderConfigurationError(RuntimeError):
    """Raised when the provider cannot be constructed (missing SDK or API key)."""


class ModelProvider(ABC):
    """Abstract interface for the generative-model provider.

    Each pipeline stage invokes exactly one of these capabilities, so any
    implementation (Gemini, a local model, a test double) can be swapped in.
    Implementations return ``None`` when the model produced no usable output
    and raise when the call itself fails.
    """

    name: str = "provider"

    @abstractmethod
    def describe(self, image: bytes, mime_type: str, instruction: str) -> Optional[str]:
        """Return a text description of ``image`` following ``instruction``."""

    @abstractmethod
    def classify(self, prompt: str) -> Optional[str]:
        """Answer a text-only yes/no question and return the raw answer."""

    @abstractmethod
    def synthesize_image(self, prompt: str) -> Optional[bytes]:
        """Generate exactly one square JPEG image and return its bytes."""

    @abstractmethod
    def suggest_styles(self, image: bytes, mime_type: str, instruction: str) -> Optional[str]:
        """Return JSON text constrained to an array of short style labels."""
