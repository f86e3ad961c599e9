"""
Generation gateway: turns a video request into one chat-completions call
against the upstream model endpoint and interprets the reply.

The gateway never writes history; callers persist results explicitly.
"""

from __future__ import annotations

import json
import re
import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional
from urllib.parse import quote_plus

import requests

from ..utils.config import GenerationSettings
from ..utils.exceptions import (
    GenerationTimeoutError,
    UpstreamError,
    UpstreamFormatError,
    ValidationError,
)
from ..utils.ids import new_id
from ..utils.logger import get_logger

logger = get_logger(__name__)

VIDEO_URL_PATTERN = re.compile(r"(https?://[^\s]+\.(?:mp4|mov|avi|webm))", re.IGNORECASE)

STYLE_DESCRIPTIONS = {
    "cinematic": "cinematic lighting, film-like quality, dramatic composition",
    "realistic": "photorealistic, natural lighting, documentary style",
    "artistic": "artistic interpretation, creative visual effects, stylized",
    "animated": "smooth animation, stylized movement, animated aesthetic",
    "documentary": "documentary style, natural movement, informative visual approach",
}

ASPECT_RATIO_DESCRIPTIONS = {
    "16:9": "widescreen landscape format",
    "9:16": "vertical portrait format for mobile",
    "1:1": "square format",
    "4:3": "standard format",
}

DIMENSIONS = {
    "16:9": (1920, 1080),
    "9:16": (1080, 1920),
}

CHUNK_SIZE = 1024


class GenerationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    AWAITING_RESPONSE = "awaiting_response"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class UrlSource(str, Enum):
    """Whether the video URL came from the upstream reply or was synthesized"""
    EXTRACTED = "extracted"
    PLACEHOLDER = "placeholder"


class UpstreamReply(NamedTuple):
    status_code: int
    ok: bool
    body: bytes


class GenerationRequest(NamedTuple):
    prompt: Optional[str]
    duration: Optional[int]
    aspect_ratio: str = "16:9"
    style: str = "cinematic"


class GenerationResult(NamedTuple):
    id: str
    video_url: str
    url_source: UrlSource
    metadata: Dict[str, Any]

    def to_public(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "videoUrl": self.video_url,
            "urlSource": self.url_source.value,
            "metadata": self.metadata,
        }


def extract_video_url(content: Any) -> Optional[str]:
    """First URL ending in a known video extension, or None."""
    if not isinstance(content, str):
        return None
    match = VIDEO_URL_PATTERN.search(content)
    return match.group(1) if match else None


class _DeadlineExceeded(Exception):
    pass


def _transition(state: GenerationState) -> None:
    logger.debug("Generation state changed", state=state.value)


class GenerationGateway:
    """Client for the upstream video model endpoint"""

    def __init__(self, settings: GenerationSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.api_key:
            headers["Authorization"] = f"Bearer {self.settings.api_key}"
        if self.settings.customer_id:
            headers["customerId"] = self.settings.customer_id
        return headers

    def validate(self, request: GenerationRequest) -> None:
        """
        Raises:
            ValidationError: Blank prompt or duration outside the allowed range
        """
        if not isinstance(request.prompt, str) or not request.prompt.strip():
            raise ValidationError("Invalid or missing prompt")
        low, high = self.settings.min_duration, self.settings.max_duration
        if request.duration is None or not (low <= request.duration <= high):
            raise ValidationError(f"Duration must be between {low} and {high} seconds")

    def enhance_prompt(self, request: GenerationRequest) -> str:
        aspect = ASPECT_RATIO_DESCRIPTIONS.get(request.aspect_ratio, request.aspect_ratio)
        style = STYLE_DESCRIPTIONS.get(request.style, request.style)
        return (
            f"Create a {request.duration}-second video in {aspect} aspect ratio with {style} style.\n\n"
            f"Video description: {request.prompt.strip()}\n\n"
            "Technical requirements:\n"
            f"- Duration: exactly {request.duration} seconds\n"
            f"- Aspect ratio: {request.aspect_ratio}\n"
            f"- Style: {request.style}\n"
            "- High quality output with smooth motion\n"
            "- Consistent visual theme throughout\n\n"
            "Please generate this video and return the direct video URL."
        )

    def build_payload(self, request: GenerationRequest) -> Dict[str, Any]:
        return {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": self.settings.system_prompt},
                {"role": "user", "content": self.enhance_prompt(request)},
            ],
        }

    def placeholder_url(self, request: GenerationRequest) -> str:
        """Synthesized stand-in URL encoding the requested dimensions, duration and style."""
        width, height = DIMENSIONS.get(request.aspect_ratio, (1080, 1080))
        style = (request.style or "").capitalize()
        text = quote_plus(f"AI Generated Video {request.duration}s {style} Style")
        base = self.settings.placeholder_base_url.rstrip("/")
        return f"{base}/{width}x{height}?text={text}"

    def _post(self, payload: Dict[str, Any]) -> UpstreamReply:
        """
        POST the payload and read the whole reply within timeout_seconds.

        The budget is a wall-clock deadline covering connect, headers and
        body. The request runs on a worker thread so a slow-dripping upstream
        cannot hold the caller past the deadline.
        """
        budget = self.settings.timeout_seconds
        deadline = time.monotonic() + budget
        cancelled = threading.Event()
        outcome: Dict[str, Any] = {}

        def worker():
            try:
                outcome["reply"] = self._send(payload, deadline, cancelled)
            except Exception as e:
                outcome["error"] = e

        thread = threading.Thread(target=worker, daemon=True, name="generation-upstream")
        thread.start()
        thread.join(budget)

        if thread.is_alive():
            cancelled.set()
            raise self._timed_out("deadline exceeded")

        error = outcome.get("error")
        if isinstance(error, (_DeadlineExceeded, requests.exceptions.Timeout)):
            raise self._timed_out(str(error))
        if isinstance(error, requests.exceptions.RequestException):
            _transition(GenerationState.FAILED)
            logger.error("Generation request failed", error=str(error))
            raise UpstreamError(f"AI service request failed: {str(error)}")
        if error is not None:
            raise error
        return outcome["reply"]

    def _send(self, payload: Dict[str, Any], deadline: float, cancelled: threading.Event) -> UpstreamReply:
        response = self.session.post(
            self.settings.endpoint,
            json=payload,
            headers=self.headers,
            timeout=(self.settings.connect_timeout, self.settings.timeout_seconds),
            stream=True,
        )
        try:
            chunks = []
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if cancelled.is_set() or time.monotonic() > deadline:
                    raise _DeadlineExceeded("deadline exceeded while reading reply")
                chunks.append(chunk)
            return UpstreamReply(response.status_code, response.ok, b"".join(chunks))
        finally:
            response.close()

    def _timed_out(self, reason: str) -> GenerationTimeoutError:
        _transition(GenerationState.TIMED_OUT)
        logger.error(
            "Generation request timed out",
            timeout_seconds=self.settings.timeout_seconds,
            reason=reason,
        )
        return GenerationTimeoutError(
            "Video generation timed out. Please try again with a shorter duration or simpler prompt."
        )

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Validate, call the upstream endpoint once, and return the video URL.

        Raises:
            ValidationError: Bad prompt or duration
            GenerationTimeoutError: Upstream did not finish replying within timeout_seconds
            UpstreamError: Transport failure or non-2xx upstream status
            UpstreamFormatError: 2xx reply without choices[0].message.content
        """
        _transition(GenerationState.VALIDATING)
        try:
            self.validate(request)
        except ValidationError:
            _transition(GenerationState.FAILED)
            raise

        logger.info(
            "Generating video",
            prompt=request.prompt[:100],
            duration=request.duration,
            aspect_ratio=request.aspect_ratio,
            style=request.style,
        )
        _transition(GenerationState.AWAITING_RESPONSE)
        reply = self._post(self.build_payload(request))

        if not reply.ok:
            _transition(GenerationState.FAILED)
            logger.error(
                "AI service error",
                status_code=reply.status_code,
                body=reply.body[:500].decode("utf-8", "replace"),
            )
            raise UpstreamError(
                f"AI service error: {reply.status_code}. Please try again.",
                upstream_status=reply.status_code,
            )

        content = self._extract_content(reply.body)
        video_url = extract_video_url(content)
        source = UrlSource.EXTRACTED
        if video_url is None:
            video_url = self.placeholder_url(request)
            source = UrlSource.PLACEHOLDER

        _transition(GenerationState.SUCCEEDED)
        result = GenerationResult(
            id=new_id("video"),
            video_url=video_url,
            url_source=source,
            metadata={
                "prompt": request.prompt,
                "duration": request.duration,
                "aspectRatio": request.aspect_ratio,
                "style": request.style,
                "createdAt": datetime.now(timezone.utc).isoformat(),
            },
        )
        logger.info("Video generated", video_id=result.id, url_source=source.value)
        return result

    def _extract_content(self, body: bytes) -> Any:
        try:
            data = json.loads(body)
            return data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            _transition(GenerationState.FAILED)
            logger.error("Invalid AI response format", error=str(e))
            raise UpstreamFormatError("Invalid response from AI service")

    def describe(self) -> Dict[str, Any]:
        """Static service descriptor"""
        return {
            "service": "AI Video Generation API",
            "model": self.settings.model,
            "endpoint": self.settings.endpoint,
            "status": "active",
            "features": [
                "Video generation from text prompts",
                "Multiple aspect ratios (16:9, 9:16, 1:1, 4:3)",
                "Various styles (cinematic, realistic, artistic, animated, documentary)",
                f"Duration control ({self.settings.min_duration}-{self.settings.max_duration} seconds)",
                "High-quality output",
            ],
        }

    def check_health(self) -> bool:
        """Send a minimal request; True when the endpoint answers 2xx."""
        try:
            response = self.session.post(
                self.settings.endpoint,
                json={"model": self.settings.model, "messages": [{"role": "user", "content": "test"}]},
                headers=self.headers,
                timeout=(self.settings.connect_timeout, self.settings.connect_timeout),
            )
            return response.ok
        except requests.exceptions.RequestException as e:
            logger.warning("AI service health check failed", error=str(e))
            return False
