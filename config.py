"""
SongForge Studio - Configuration
Paths, backend endpoints, and generation defaults.
"""

import os
from pathlib import Path
from typing import Optional

# ============================================================================
# Paths
# ============================================================================

BASE_DIR = Path(__file__).parent.resolve()
STATIC_DIR = BASE_DIR / "static"

# ============================================================================
# Server
# ============================================================================

HOST = os.environ.get("SONGFORGE_HOST", "127.0.0.1")
PORT = int(os.environ.get("SONGFORGE_PORT", "8000"))

COMPOSE_ROUTE = "/api/elevenlabs/generate"
WILDCARD_HOSTS = ("", "0.0.0.0", "::")


def resolve_backend_url(host: str, port: int) -> str:
    """Where the orchestrator sends compiled prompts.

    GENERATION_BACKEND_URL wins when set; otherwise this app's own compose
    proxy route on the host and port the server actually listens on.
    """
    override = os.environ.get("GENERATION_BACKEND_URL", "").strip()
    if override:
        return override
    if host in WILDCARD_HOSTS:
        host = "127.0.0.1"
    return f"http://{host}:{port}{COMPOSE_ROUTE}"


GENERATION_BACKEND_URL = resolve_backend_url(HOST, PORT)

# ============================================================================
# ElevenLabs
# ============================================================================

ELEVENLABS_API_URL = os.environ.get(
    "ELEVENLABS_API_URL", "https://api.elevenlabs.io/v1/music/compose"
)
ELEVENLABS_KEY_PLACEHOLDER = "your_elevenlabs_api_key"
ELEVENLABS_KEYS_URL = "https://elevenlabs.io/app/settings/api-keys"

# ============================================================================
# Generation Defaults
# ============================================================================

OUTPUT_FORMAT = "mp3_44100_128"
DEFAULT_DURATION_SECONDS = 60
MIN_DURATION_SECONDS = 15   # ElevenLabs compose minimum
MAX_DURATION_SECONDS = 330  # ElevenLabs compose maximum


def _read_timeout() -> Optional[float]:
    value = os.environ.get("GENERATION_TIMEOUT", "").strip()
    if not value:
        return None
    return float(value)


# None means no client-side timeout; the transport decides.
GENERATION_TIMEOUT = _read_timeout()


def get_elevenlabs_api_key() -> Optional[str]:
    """Read the ElevenLabs key at call time so rotated keys are picked up."""
    key = os.environ.get("ELEVENLABS_API_KEY", "").strip()
    return key or None


def log_startup_info():
    """Log effective configuration on startup"""
    print(f"[CONFIG] Base directory: {BASE_DIR}")
    print(f"[CONFIG] Generation backend: {GENERATION_BACKEND_URL}")
    print(f"[CONFIG] ElevenLabs endpoint: {ELEVENLABS_API_URL}")
    key = get_elevenlabs_api_key()
    if key and key != ELEVENLABS_KEY_PLACEHOLDER:
        print("[CONFIG] ElevenLabs API key: configured")
    else:
        print("[CONFIG] ElevenLabs API key: NOT SET (compose proxy will reject requests)")
    if GENERATION_TIMEOUT is not None:
        print(f"[CONFIG] Generation timeout: {GENERATION_TIMEOUT}s")
