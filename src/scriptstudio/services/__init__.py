"""External service integrations."""

from .anthropic import AnthropicClient
from .imagen import ImagenClient, ImageResult
from .speech import SpeechClient, write_wav

__all__ = [
    "AnthropicClient",
    "ImagenClient",
    "ImageResult",
    "SpeechClient",
    "write_wav",
]
