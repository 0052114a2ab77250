"""Configuration management."""

import os
from pydantic import BaseModel, ConfigDict, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config(BaseModel):
    """Application configuration."""

    model_config = ConfigDict(frozen=False)

    # API Keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key (script analysis and prompt writing)"
    )
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", ""),
        description="Gemini API key (speech synthesis)"
    )
    google_application_credentials: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_APPLICATION_CREDENTIALS", ""),
        description="Path to Google Cloud service account JSON"
    )
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID (Imagen previews)"
    )

    # Model settings
    default_model: str = Field(
        default_factory=lambda: os.getenv("SCRIPTSTUDIO_MODEL", "claude-sonnet-4-20250514"),
        description="Default Claude model"
    )
    imagen_model: str = Field(
        default_factory=lambda: os.getenv("SCRIPTSTUDIO_IMAGEN_MODEL", "imagen-3.0-generate-001"),
        description="Imagen model used for scene previews"
    )
    tts_model: str = Field(
        default_factory=lambda: os.getenv("SCRIPTSTUDIO_TTS_MODEL", "gemini-2.5-flash-preview-tts"),
        description="Gemini text-to-speech model"
    )
    voice_name: str = Field(
        default_factory=lambda: os.getenv("SCRIPTSTUDIO_VOICE", "Puck"),
        description="Prebuilt Gemini voice used for narration"
    )

    def validate_required(self) -> None:
        """Validate that required credentials are set."""
        if not self.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY not set")

    def validate_imagen_required(self) -> None:
        """Validate that Imagen / Google Cloud settings are present.

        Raises:
            ValueError: If the Google Cloud project is missing, or
                GOOGLE_APPLICATION_CREDENTIALS names a missing file.
        """
        if not self.google_cloud_project:
            raise ValueError(
                "Missing required Imagen configuration: GOOGLE_CLOUD_PROJECT. "
                "Set the corresponding environment variable."
            )

        # Unset means application-default credentials
        credentials = self.google_application_credentials
        if credentials and not os.path.isfile(credentials):
            raise ValueError(
                f"GOOGLE_APPLICATION_CREDENTIALS points to a missing file: {credentials}"
            )

    def validate_speech_required(self) -> None:
        """Validate that the Gemini key used for narration is present."""
        if not self.gemini_api_key:
            raise ValueError("GEMINI_API_KEY not set")


# Global config instance
config = Config()
