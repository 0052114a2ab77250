"""Script segmentation agent."""

from dataclasses import dataclass

from ..errors import GatewayError
from .base import BaseAgent, JSON_ONLY

TERMINAL_PUNCTUATION = (".", "?", "!", "…", '."', '?"', '!"', "”")


@dataclass
class SegmentInput:
    """Input data for the segmenter."""

    text: str
    max_chars: int


class SegmenterAgent(BaseAgent[SegmentInput, list[str]]):
    """Splits a narrated script into short, sentence-terminated segments.

    The model is responsible for keeping the text verbatim and in order;
    the caller only checks what it can (see ``pipeline.segment_script``).
    """

    @property
    def name(self) -> str:
        return "SegmenterAgent"

    @property
    def system_prompt(self) -> str:
        return (
            "You are a professional script editor who counts characters exactly.\n"
            "You split narration scripts into short segments for a storyboard.\n"
            f"{JSON_ONLY} The JSON must be an array of strings."
        )

    def run(self, input_data: SegmentInput) -> list[str]:
        self._logger.info(
            f"Splitting script of {len(input_data.text)} chars "
            f"(limit {input_data.max_chars} per segment)"
        )
        data = self._create_json(
            self._build_prompt(input_data),
            max_tokens=16000,
            temperature=0.0,
        )

        if isinstance(data, dict):
            data = data.get("segments", data)
        if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
            raise GatewayError("Segmenter response is not a list of strings")

        self._logger.info(f"Received {len(data)} segments")
        return data

    def _build_prompt(self, input_data: SegmentInput) -> str:
        limit = input_data.max_chars
        return "\n".join([
            "Split the script below into an ordered list of segments.",
            "",
            "RULES:",
            f"1. LENGTH: no segment may exceed {limit} characters, spaces and punctuation included.",
            "2. BREAK POINT: every segment must end with sentence-final punctuation "
            "('.', '?', '!', '...').",
            f"3. If appending the next sentence would push a segment past {limit} characters, "
            "end the segment at the previous sentence.",
            "4. ORDER: keep every sentence in its original order.",
            "5. CONTENT: copy the text verbatim; do not add, drop, summarize or reword anything.",
            "6. COMPLETENESS: every word of the script must appear in exactly one segment.",
            "",
            f'SCRIPT: "{input_data.text}"',
        ])
