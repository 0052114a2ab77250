"""Google Imagen API client wrapper via Vertex AI."""

import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import google.auth
import google.auth.exceptions
import google.auth.transport.requests
import requests

from ..config import config
from ..prompts import strip_highlight

logger = logging.getLogger(__name__)

PREVIEW_STYLE_PREFIX = (
    "Cinematic photography, masterwork, highly detailed, photorealistic, "
    "rustic atmosphere, realistic textures: "
)


@dataclass
class ImageResult:
    """Result of an Imagen generation request."""

    prompt: str
    image: bytes = b""
    mime_type: str = "image/png"
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    metadata: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error_message is None


class ImagenClient:
    """Client wrapper for Google Imagen image generation via Vertex AI."""

    DEFAULT_LOCATION = "us-central1"
    DEFAULT_TIMEOUT = 120.0

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: str = DEFAULT_LOCATION,
        model: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the Imagen client.

        Args:
            project_id: Google Cloud project ID.
            location: GCP region for Vertex AI.
            model: Imagen model name. Defaults to config.imagen_model.
            timeout: HTTP timeout in seconds.
        """
        self._project_id = project_id or config.google_cloud_project
        self._location = location
        self._model = model or config.imagen_model
        self._timeout = timeout

        if not self._project_id:
            raise ValueError("GOOGLE_CLOUD_PROJECT not set")

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def model(self) -> str:
        return self._model

    def _endpoint(self) -> str:
        return (
            f"https://{self._location}-aiplatform.googleapis.com/v1/"
            f"projects/{self._project_id}/locations/{self._location}/"
            f"publishers/google/models/{self._model}:predict"
        )

    def _access_token(self) -> str:
        scopes = ["https://www.googleapis.com/auth/cloud-platform"]
        credentials, _ = google.auth.default(scopes=scopes)
        credentials.refresh(google.auth.transport.requests.Request())
        return credentials.token

    def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
        negative_prompt: Optional[str] = None,
    ) -> ImageResult:
        """Generate one image from a text prompt.

        Args:
            prompt: Text description of the image to generate.
            aspect_ratio: Image aspect ratio ('1:1', '16:9', '9:16', '4:3', '3:4').
            negative_prompt: Things to avoid in the image.

        Returns:
            ImageResult holding the image bytes, or an error message. An empty
            ``image`` with no error means the service produced nothing.
        """
        result = ImageResult(
            prompt=prompt,
            created_at=datetime.now(),
            metadata={
                "aspect_ratio": aspect_ratio,
                "model": self._model,
            },
        )

        request_body = {
            "instances": [
                {"prompt": prompt}
            ],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": aspect_ratio,
            },
        }
        if negative_prompt:
            request_body["parameters"]["negativePrompt"] = negative_prompt

        try:
            headers = {
                "Authorization": f"Bearer {self._access_token()}",
                "Content-Type": "application/json",
            }

            logger.info(f"Generating image with Imagen: {prompt[:50]}...")
            response = requests.post(
                self._endpoint(), json=request_body, headers=headers, timeout=self._timeout
            )

            if response.status_code != 200:
                error_msg = f"{response.status_code}: {response.text[:500]}"
                logger.error(f"Imagen API error: {error_msg}")
                result.error_message = error_msg
                return result

            data = response.json()

        except (requests.RequestException, google.auth.exceptions.GoogleAuthError) as e:
            logger.error(f"Image generation failed: {e}")
            result.error_message = str(e)
            return result

        predictions = data.get("predictions", [])
        if not predictions:
            logger.warning("Imagen returned no predictions")
            return result

        image_data = predictions[0].get("bytesBase64Encoded")
        if not image_data:
            logger.warning("Imagen prediction carried no image data")
            return result

        result.image = base64.b64decode(image_data)
        result.mime_type = predictions[0].get("mimeType", "image/png")
        logger.info(f"Received {len(result.image)} image bytes")
        return result

    def render_preview(self, prompt: str) -> ImageResult:
        """Render a 16:9 storyboard preview for a scene's image prompt."""
        return self.generate_image(
            PREVIEW_STYLE_PREFIX + strip_highlight(prompt),
            aspect_ratio="16:9",
        )
