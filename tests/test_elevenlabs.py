import pytest
import requests

from config import ELEVENLABS_API_URL
from elevenlabs import (
    compose_music, build_compose_prompt, clamp_duration, content_type_for, mask_key
)
from errors import ComposeError
from schemas import GenerateRequest

API_KEY = "sk_test_1234567890abcdef"


@pytest.fixture(autouse=True)
def api_key(monkeypatch):
    monkeypatch.setenv("ELEVENLABS_API_KEY", API_KEY)


def test_plain_prompt_passes_through():
    assert build_compose_prompt(GenerateRequest(prompt="ambient pads")) == "ambient pads"


def test_rich_prompt_with_lyrics_drops_description():
    request = GenerateRequest(prompt="ignored", title="Home", style="folk", lyrics="la la")
    assert build_compose_prompt(request) == "Title: Home. Style: folk. Lyrics:\nla la"


def test_rich_prompt_without_lyrics_keeps_description():
    request = GenerateRequest(prompt="slow and sad", style="blues")
    assert build_compose_prompt(request) == "Style: blues. Description: slow and sad"


@pytest.mark.parametrize("requested,expected", [(1, 15), (15, 15), (60, 60), (330, 330), (900, 330)])
def test_clamp_duration(requested, expected):
    assert clamp_duration(requested) == expected


def test_content_type_and_mask():
    assert content_type_for("mp3_44100_128") == "audio/mpeg"
    assert content_type_for("weird_format") == "application/octet-stream"
    assert mask_key(API_KEY) == "sk_t…cdef"
    assert mask_key("short") == "present"


def test_empty_prompt_rejected(record_posts):
    calls = record_posts()
    with pytest.raises(ComposeError) as exc_info:
        compose_music(GenerateRequest(prompt=""))
    assert exc_info.value.status_code == 400
    assert calls == []


@pytest.mark.parametrize("key", ["", "your_elevenlabs_api_key"])
def test_missing_key(monkeypatch, record_posts, key):
    monkeypatch.setenv("ELEVENLABS_API_KEY", key)
    calls = record_posts()
    with pytest.raises(ComposeError) as exc_info:
        compose_music(GenerateRequest(prompt="jazz"))
    assert exc_info.value.status_code == 500
    assert exc_info.value.body["code"] == "MISSING_API_KEY"
    assert calls == []


def test_success(record_posts, make_response):
    calls = record_posts(make_response(200, content=b"mp3-data"))
    result = compose_music(GenerateRequest(prompt="jazz", duration_seconds=10, instrumental=True))

    assert result.audio == b"mp3-data"
    assert result.duration_seconds == 15
    assert result.content_type == "audio/mpeg"
    assert calls[0]["url"] == ELEVENLABS_API_URL
    assert calls[0]["headers"] == {"xi-api-key": API_KEY}
    assert calls[0]["json"] == {
        "prompt": "jazz",
        "duration_ms": 15000,
        "instrumental": True,
        "output_format": "mp3_44100_128",
    }


def test_connection_failure(record_posts):
    record_posts(requests.exceptions.ConnectionError("dns"))
    with pytest.raises(ComposeError) as exc_info:
        compose_music(GenerateRequest(prompt="jazz"))
    assert exc_info.value.status_code == 502
    assert exc_info.value.body["code"] == "CONNECTION_ERROR"


def test_upstream_unauthorized(record_posts, make_response):
    record_posts(make_response(401, json_body={"detail": {"message": "invalid"}}))
    with pytest.raises(ComposeError) as exc_info:
        compose_music(GenerateRequest(prompt="jazz"))
    assert exc_info.value.status_code == 401
    assert exc_info.value.body["code"] == "INVALID_API_KEY"
    assert "elevenlabs.io" in exc_info.value.body["hint"]


def test_bad_prompt_suggestion(record_posts, make_response):
    body = {"detail": {"status": "bad_prompt", "prompt_suggestion": "a rock anthem about freedom"}}
    record_posts(make_response(400, json_body=body))
    with pytest.raises(ComposeError) as exc_info:
        compose_music(GenerateRequest(prompt="in the style of a famous band"))
    assert exc_info.value.status_code == 400
    assert exc_info.value.body == {
        "error": "Prompt contains restricted content",
        "suggestion": "a rock anthem about freedom",
    }


def test_other_json_error(record_posts, make_response):
    record_posts(make_response(429, json_body={"detail": {"message": "quota exceeded"}}))
    with pytest.raises(ComposeError) as exc_info:
        compose_music(GenerateRequest(prompt="jazz"))
    assert exc_info.value.status_code == 429
    assert exc_info.value.body["error"] == "quota exceeded"
    assert exc_info.value.body["code"] == "ELEVENLABS_API_ERROR"


def test_non_json_error(record_posts, make_response):
    record_posts(make_response(503, content=b"Service Unavailable"))
    with pytest.raises(ComposeError) as exc_info:
        compose_music(GenerateRequest(prompt="jazz"))
    assert exc_info.value.status_code == 503
    assert exc_info.value.body["error"] == "ElevenLabs API error: Service Unavailable"
