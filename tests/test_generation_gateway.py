"""Tests for the GenerationGateway (upstream mocked unless noted)"""

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from vidforge.services.generation_gateway import (
    GenerationGateway,
    GenerationRequest,
    UrlSource,
    extract_video_url,
)
from vidforge.utils.config import GenerationSettings
from vidforge.utils.exceptions import (
    GenerationTimeoutError,
    UpstreamError,
    UpstreamFormatError,
    ValidationError,
)

from .helpers import UPSTREAM_URL, chat_reply, make_response


@pytest.fixture
def gateway(vidforge):
    return vidforge.generation_gateway


def _request(**overrides):
    values = {"prompt": "A lighthouse at dusk", "duration": 10, "aspect_ratio": "16:9", "style": "cinematic"}
    values.update(overrides)
    return GenerationRequest(**values)


@pytest.mark.parametrize("duration", [None, 0, 3, 4, 61, 120])
def test_validate_rejects_out_of_range_duration(gateway, duration):
    with pytest.raises(ValidationError):
        gateway.validate(_request(duration=duration))


@pytest.mark.parametrize("duration", [5, 30, 60])
def test_validate_accepts_duration_bounds(gateway, duration):
    gateway.validate(_request(duration=duration))


@pytest.mark.parametrize("prompt", [None, "", "   "])
def test_validate_rejects_blank_prompt(gateway, prompt):
    with pytest.raises(ValidationError):
        gateway.validate(_request(prompt=prompt))


def test_build_payload_restates_parameters(gateway):
    payload = gateway.build_payload(_request(duration=12, aspect_ratio="9:16", style="animated"))
    assert payload["model"] == "test-model"
    system, user = payload["messages"]
    assert system["role"] == "system"
    assert user["role"] == "user"
    assert "12-second video" in user["content"]
    assert "vertical portrait format for mobile" in user["content"]
    assert "smooth animation" in user["content"]
    assert "A lighthouse at dusk" in user["content"]


def test_build_payload_unknown_style_passes_through(gateway):
    payload = gateway.build_payload(_request(style="noir", aspect_ratio="21:9"))
    content = payload["messages"][1]["content"]
    assert "noir style" in content
    assert "21:9 aspect ratio" in content


def test_generate_extracts_video_url(gateway, http_session):
    http_session.post.return_value = make_response(
        payload=chat_reply("Done! Here it is: https://cdn.test/out/clip.MP4 enjoy")
    )

    result = gateway.generate(_request())

    assert result.video_url == "https://cdn.test/out/clip.MP4"
    assert result.url_source == UrlSource.EXTRACTED
    assert result.id.startswith("video_")
    assert result.metadata["duration"] == 10
    assert result.metadata["aspectRatio"] == "16:9"

    args, kwargs = http_session.post.call_args
    assert args[0] == UPSTREAM_URL
    assert kwargs["timeout"] == (30, 900)
    assert kwargs["stream"] is True
    http_session.post.return_value.close.assert_called_once()
    assert kwargs["headers"]["Authorization"] == "Bearer test-key"
    assert kwargs["headers"]["customerId"] == "cus_test"
    assert kwargs["json"]["messages"][0]["role"] == "system"


def test_generate_falls_back_to_placeholder(gateway, http_session):
    http_session.post.return_value = make_response(payload=chat_reply("I cannot render video, sorry."))

    result = gateway.generate(_request(duration=15, aspect_ratio="9:16", style="documentary"))

    assert result.url_source == UrlSource.PLACEHOLDER
    assert "/1080x1920?" in result.video_url
    assert "15s" in result.video_url
    assert "Documentary" in result.video_url


def test_placeholder_dimensions(gateway):
    assert "/1920x1080?" in gateway.placeholder_url(_request(aspect_ratio="16:9"))
    assert "/1080x1080?" in gateway.placeholder_url(_request(aspect_ratio="4:3"))


def test_generate_upstream_error_surfaces_status(gateway, http_session):
    http_session.post.return_value = make_response(status_code=503, text="overloaded")
    with pytest.raises(UpstreamError) as exc_info:
        gateway.generate(_request())
    assert exc_info.value.upstream_status == 503
    assert exc_info.value.status_code == 502
    assert "503" in exc_info.value.message


def test_generate_bad_shape_is_format_error(gateway, http_session):
    http_session.post.return_value = make_response(payload={"result": "ok"})
    with pytest.raises(UpstreamFormatError):
        gateway.generate(_request())


def test_generate_non_json_is_format_error(gateway, http_session):
    http_session.post.return_value = make_response(payload=ValueError("no json"))
    with pytest.raises(UpstreamFormatError):
        gateway.generate(_request())


def test_generate_timeout(gateway, http_session, vidforge):
    http_session.post.side_effect = requests.exceptions.ReadTimeout("read timed out")
    with pytest.raises(GenerationTimeoutError) as exc_info:
        gateway.generate(_request())
    assert exc_info.value.status_code == 408
    assert len(vidforge.videos) == 0


def test_generate_connection_error(gateway, http_session):
    http_session.post.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(UpstreamError):
        gateway.generate(_request())


def test_generate_validation_skips_upstream(gateway, http_session):
    with pytest.raises(ValidationError):
        gateway.generate(_request(duration=3))
    http_session.post.assert_not_called()


def test_extract_video_url():
    assert extract_video_url("see http://x.test/a.webm and https://x.test/b.mp4") == "http://x.test/a.webm"
    assert extract_video_url("https://x.test/image.png") is None
    assert extract_video_url(None) is None


def test_describe_and_health(gateway, http_session):
    info = gateway.describe()
    assert info["model"] == "test-model"
    assert info["status"] == "active"

    http_session.post.return_value = make_response(payload=chat_reply("pong"))
    assert gateway.check_health() is True
    http_session.post.side_effect = requests.exceptions.ConnectionError("down")
    assert gateway.check_health() is False


class _SlowDripHandler(BaseHTTPRequestHandler):
    """Answers 200 but sends the body one byte every 50 ms"""

    body = b'{"choices":[{"message":{"content":"https://cdn.test/slow/clip.mp4"}}]}'

    def do_POST(self):
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(self.body)))
        self.end_headers()
        try:
            for i in range(len(self.body)):
                self.wfile.write(self.body[i:i + 1])
                self.wfile.flush()
                time.sleep(0.05)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_upstream():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _SlowDripHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/chat/completions"
    server.shutdown()
    server.server_close()


def test_generate_enforces_wall_clock_deadline(slow_upstream):
    gateway = GenerationGateway(
        GenerationSettings(endpoint=slow_upstream, model="test-model", timeout_seconds=1, connect_timeout=1),
        session=requests.Session(),
    )

    started = time.monotonic()
    with pytest.raises(GenerationTimeoutError):
        gateway.generate(_request())
    elapsed = time.monotonic() - started

    # The full reply would take about 3.5 s to drip in
    assert elapsed < 2.5
