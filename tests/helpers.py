import json
from typing import Callable, List

import httpx

OPENAI_OK = {"id": "chatcmpl-1", "choices": [{"message": {"role": "assistant", "content": "42"}}]}
ANTHROPIC_OK = {
    "id": "msg_1",
    "type": "message",
    "content": [{"type": "text", "text": "Hello, "}, {"type": "text", "text": "world"}],
}
GOOGLE_OK = {
    "responseId": "resp-1",
    "candidates": [{"content": {"parts": [{"thoughtSignature": "sig"}, {"text": "ok"}], "role": "model"}}],
}


def json_response(payload: dict, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, text=json.dumps(payload))


def recording_transport(
    handler: Callable[[httpx.Request], httpx.Response], seen: List[httpx.Request]
) -> httpx.MockTransport:
    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    return httpx.MockTransport(record)
