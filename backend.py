"""
SongForge Studio - Generation Backend Communication
Submits compiled prompts to the generation backend and classifies failures.
"""

import asyncio
from typing import Optional

import requests

from config import GENERATION_BACKEND_URL, OUTPUT_FORMAT
from errors import (
    ConnectivityError, CredentialError, BackendUnavailableError,
    PromptRejectedError, GenerationFailedError
)

CONNECTIVITY_HINT = (
    'Make sure the API server is running with "python main.py" '
    "and GENERATION_BACKEND_URL points at it."
)

# ============================================================================
# Response Classification
# ============================================================================

def _error_body(resp: requests.Response) -> dict:
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def raise_for_backend_error(resp: requests.Response):
    """Map a non-success backend response onto a typed GenerationError."""
    data = _error_body(resp)
    code = data.get("code")
    hint = data.get("hint") if isinstance(data.get("hint"), str) else None

    # A suggested replacement means the prompt was refused, whatever the code
    if data.get("suggestion"):
        error = data.get("error") or "Prompt was rejected"
        raise PromptRejectedError(
            f"{error}. Suggested prompt: {data['suggestion']}",
            suggestion=data["suggestion"],
        )

    if resp.status_code == 401 or code == "INVALID_API_KEY":
        message = "Invalid API key. Please check your ELEVENLABS_API_KEY environment variable."
        if hint:
            message = f"{message}\n\n{hint}"
        raise CredentialError(message, hint=hint)

    if code == "MISSING_API_KEY":
        raise CredentialError(
            "Server configuration error: ELEVENLABS_API_KEY is not set.",
            hint=hint, status_code=500,
        )

    if code == "CONNECTION_ERROR":
        raise BackendUnavailableError(
            "Failed to connect to ElevenLabs API. Please check your internet connection and API key.",
            hint=hint,
        )

    raise GenerationFailedError(
        data.get("error") or f"Failed to generate music via ElevenLabs (Status: {resp.status_code})",
        hint=hint,
        status_code=resp.status_code,
    )

# ============================================================================
# Backend Requests
# ============================================================================

def compose_via_backend(prompt: str, duration_seconds: int, instrumental: bool,
                        timeout: Optional[float] = None,
                        url: Optional[str] = None) -> bytes:
    """Send one compose request to the generation backend (blocking).

    Returns the raw audio payload unmodified. Raises a GenerationError
    subclass on any failure; never retries.
    """
    payload = {
        "prompt": prompt,
        "duration_seconds": duration_seconds,
        "instrumental": instrumental,
        "output_format": OUTPUT_FORMAT,
    }
    target = url or GENERATION_BACKEND_URL

    try:
        resp = requests.post(target, json=payload, timeout=timeout)
    except requests.exceptions.ConnectionError as e:
        print(f"[BACKEND] Cannot reach {target}: {e}", flush=True)
        raise ConnectivityError(
            "Cannot connect to the API server.", hint=CONNECTIVITY_HINT
        ) from e
    except requests.exceptions.RequestException as e:
        print(f"[BACKEND] Request failed: {e}", flush=True)
        raise ConnectivityError(f"Network error: {e}", hint=CONNECTIVITY_HINT) from e

    print(f"[BACKEND] Response status: {resp.status_code}", flush=True)

    if not resp.ok:
        raise_for_backend_error(resp)

    return resp.content


async def compose_via_backend_async(prompt: str, duration_seconds: int, instrumental: bool,
                                    timeout: Optional[float] = None,
                                    url: Optional[str] = None) -> bytes:
    """Send one compose request to the generation backend (non-blocking)."""
    return await asyncio.to_thread(
        compose_via_backend, prompt, duration_seconds, instrumental, timeout, url
    )
