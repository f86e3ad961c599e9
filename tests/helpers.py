"""Fakes for the upstream model endpoint"""

import json
from unittest.mock import Mock

import requests

UPSTREAM_URL = "https://upstream.test/chat/completions"


def make_response(status_code=200, payload=None, text=""):
    """Fake streamed requests.Response; an exception payload means a non-JSON body"""
    if isinstance(payload, Exception):
        body = b"<html>not json</html>"
    elif payload is not None:
        body = json.dumps(payload).encode("utf-8")
    else:
        body = text.encode("utf-8")

    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.iter_content.side_effect = lambda *args, **kwargs: iter([body])
    return response


def chat_reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}
