"""
SongForge Studio - ElevenLabs Compose Proxy
Server-side forwarding of compose requests to the ElevenLabs music API.

Holds the API key so clients never see it, clamps duration to the range
ElevenLabs accepts, and turns upstream failures into structured JSON
bodies ({error, code, hint, suggestion}) for the generation client.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import requests

from config import (
    ELEVENLABS_API_URL, ELEVENLABS_KEY_PLACEHOLDER, ELEVENLABS_KEYS_URL,
    MIN_DURATION_SECONDS, MAX_DURATION_SECONDS, GENERATION_TIMEOUT,
    get_elevenlabs_api_key
)
from errors import ComposeError
from schemas import GenerateRequest

CONTENT_TYPES = {
    "mp3": "audio/mpeg",
    "pcm": "audio/L16",
    "ulaw": "audio/basic",
    "opus": "audio/ogg",
}


@dataclass
class ComposeResult:
    audio: bytes
    duration_seconds: int
    content_type: str

# ============================================================================
# Request Preparation
# ============================================================================

def build_compose_prompt(request: GenerateRequest) -> str:
    """Merge title/style/lyrics into the prompt when they are sent separately."""
    if not (request.lyrics or request.style or request.title):
        return request.prompt or ""

    parts = []
    if request.title:
        parts.append(f"Title: {request.title}")
    if request.style:
        parts.append(f"Style: {request.style}")
    if request.lyrics:
        parts.append(f"Lyrics:\n{request.lyrics}")

    # Explicit lyrics take priority over a generic description
    if request.prompt and not request.lyrics:
        parts.append(f"Description: {request.prompt}")

    return ". ".join(parts)


def clamp_duration(duration_seconds: int) -> int:
    return max(MIN_DURATION_SECONDS, min(MAX_DURATION_SECONDS, duration_seconds))


def content_type_for(output_format: str) -> str:
    codec = output_format.split("_", 1)[0].lower()
    return CONTENT_TYPES.get(codec, "application/octet-stream")


def mask_key(api_key: str) -> str:
    if len(api_key) > 8:
        return f"{api_key[:4]}…{api_key[-4:]}"
    return "present"

# ============================================================================
# Upstream Error Mapping
# ============================================================================

def _upstream_error(resp: requests.Response) -> ComposeError:
    error_text = resp.text
    print(f"[ELEVENLABS] API error {resp.status_code}: {error_text[:500]}", flush=True)

    if resp.status_code == 401:
        return ComposeError(401, {
            "error": "Invalid API key. Please check your ELEVENLABS_API_KEY environment variable.",
            "code": "INVALID_API_KEY",
            "hint": ("Make sure your API key is correct and has not expired. "
                     f"You can get a new key from {ELEVENLABS_KEYS_URL}"),
        })

    try:
        error_json = resp.json()
    except ValueError:
        return ComposeError(resp.status_code, {
            "error": f"ElevenLabs API error: {error_text}",
            "code": "ELEVENLABS_API_ERROR",
        })

    detail = error_json.get("detail") if isinstance(error_json, dict) else None
    if not isinstance(detail, dict):
        detail = {}

    # ElevenLabs proposes a replacement for prompts it refuses
    if detail.get("status") == "bad_prompt" and detail.get("prompt_suggestion"):
        return ComposeError(400, {
            "error": "Prompt contains restricted content",
            "suggestion": detail["prompt_suggestion"],
        })

    message = detail.get("message")
    if not message and isinstance(error_json, dict):
        message = error_json.get("message")

    return ComposeError(resp.status_code, {
        "error": message or "ElevenLabs API error",
        "details": error_json,
        "code": "ELEVENLABS_API_ERROR",
    })

# ============================================================================
# Compose
# ============================================================================

def compose_music(request: GenerateRequest, api_key: Optional[str] = None) -> ComposeResult:
    """Forward one compose request to ElevenLabs (blocking).

    Raises ComposeError carrying the status code and JSON body to return
    to the caller.
    """
    prompt = build_compose_prompt(request)
    print(f"[ELEVENLABS] Request received: duration={request.duration_seconds}s, "
          f"instrumental={request.instrumental}, prompt_length={len(prompt)}, "
          f"has_lyrics={bool(request.lyrics)}", flush=True)

    if not prompt:
        raise ComposeError(400, {"error": "Prompt is required"})

    valid_duration = clamp_duration(request.duration_seconds)
    print(f"[ELEVENLABS] Duration: requested={request.duration_seconds}s, "
          f"validated={valid_duration}s", flush=True)

    api_key = api_key or get_elevenlabs_api_key()
    if not api_key or api_key == ELEVENLABS_KEY_PLACEHOLDER:
        print("[ELEVENLABS] ELEVENLABS_API_KEY is not set", flush=True)
        raise ComposeError(500, {
            "error": ("Server configuration error: ELEVENLABS_API_KEY environment variable "
                      "is not set. Please add it to your environment."),
            "code": "MISSING_API_KEY",
        })

    print(f"[ELEVENLABS] API key detected ({mask_key(api_key)}), generating with prompt: "
          f"{prompt[:200]}", flush=True)

    body = {
        "prompt": prompt,
        "duration_ms": valid_duration * 1000,
        "instrumental": request.instrumental,
        "output_format": request.output_format,
    }

    try:
        resp = requests.post(
            ELEVENLABS_API_URL,
            json=body,
            headers={"xi-api-key": api_key},
            timeout=GENERATION_TIMEOUT,
        )
    except requests.exceptions.ConnectionError as e:
        print(f"[ELEVENLABS] Connection failed: {e}", flush=True)
        raise ComposeError(502, {
            "error": "Failed to connect to ElevenLabs API",
            "details": str(e),
            "code": "CONNECTION_ERROR",
        }) from e
    except requests.exceptions.RequestException as e:
        print(f"[ELEVENLABS] Request failed: {e}", flush=True)
        raise ComposeError(500, {
            "error": "Failed to generate music",
            "details": str(e),
        }) from e

    print(f"[ELEVENLABS] Response status: {resp.status_code}", flush=True)

    if not resp.ok:
        raise _upstream_error(resp)

    audio = resp.content
    print(f"[ELEVENLABS] Audio generated successfully, size: {len(audio)} bytes", flush=True)
    return ComposeResult(
        audio=audio,
        duration_seconds=valid_duration,
        content_type=content_type_for(request.output_format),
    )


async def compose_music_async(request: GenerateRequest) -> ComposeResult:
    """Forward one compose request to ElevenLabs (non-blocking)."""
    return await asyncio.to_thread(compose_music, request)
