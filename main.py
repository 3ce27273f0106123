"""
SongForge Studio - Main Application
FastAPI app, routes, and entry point.
"""

import argparse

from fastapi import FastAPI, Query, Request, Response
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

# Local imports
from config import (
    HOST, PORT, STATIC_DIR, GENERATION_BACKEND_URL, GENERATION_TIMEOUT,
    ELEVENLABS_KEY_PLACEHOLDER, resolve_backend_url, get_elevenlabs_api_key, log_startup_info
)
from schemas import (
    CreateSongParams, GenerateRequest, PromptRequest, ValidationResult,
    PromptFeedback, CompiledPrompt
)
from errors import GenerationError, ComposeError
from prompt_validation import validate_prompt, get_prompt_feedback
from generation import build_song_prompt, generate_track_async
from elevenlabs import compose_music_async
from timing import estimate_generation_time

# ============================================================================
# Startup Initialization
# ============================================================================

log_startup_info()

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(title="SongForge Studio", version="1.0.0")
app.state.backend_url = GENERATION_BACKEND_URL

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    print(f"[API] {request.url.path} failed: {exc.code}: {exc.message}", flush=True)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

# ============================================================================
# API Routes
# ============================================================================

@app.get("/")
async def root():
    index_path = STATIC_DIR / "index.html"
    if index_path.exists():
        response = FileResponse(index_path)
        response.headers["Cache-Control"] = "no-cache"
        return response
    return {"message": "SongForge Studio API", "status": "running"}


@app.get("/api/health")
async def health_check(request: Request):
    key = get_elevenlabs_api_key()
    return {
        "status": "ok",
        "backend_url": request.app.state.backend_url,
        "api_key_configured": bool(key) and key != ELEVENLABS_KEY_PLACEHOLDER,
    }


@app.post("/api/validate-prompt", response_model=ValidationResult)
async def validate_prompt_endpoint(request: PromptRequest):
    return validate_prompt(request.prompt)


@app.post("/api/prompt-feedback", response_model=PromptFeedback)
async def prompt_feedback_endpoint(request: PromptRequest):
    return get_prompt_feedback(request.prompt)


@app.post("/api/compile-prompt", response_model=CompiledPrompt)
async def compile_prompt(params: CreateSongParams):
    return CompiledPrompt(
        prompt=build_song_prompt(params),
        estimated_seconds=estimate_generation_time(params.duration_seconds),
    )


@app.get("/api/estimate")
async def estimate(duration_seconds: int = Query(..., ge=1)):
    return {
        "duration_seconds": duration_seconds,
        "estimated_seconds": estimate_generation_time(duration_seconds),
    }


@app.post("/api/elevenlabs/generate")
async def elevenlabs_generate(request: GenerateRequest):
    try:
        result = await compose_music_async(request)
    except ComposeError as e:
        return JSONResponse(status_code=e.status_code, content=e.body)

    return Response(
        content=result.audio,
        media_type=result.content_type,
        headers={"X-Duration-Seconds": str(result.duration_seconds)},
    )


@app.post("/api/generate")
async def generate_song(params: CreateSongParams, request: Request):
    warnings = []
    for field in ("prompt", "custom_style"):
        result = validate_prompt(getattr(params, field))
        if not result.is_valid:
            print(f"[API] Blocked {field}: {result.error}", flush=True)
            return JSONResponse(status_code=400, content={
                "error": result.error,
                "code": "PROMPT_BLOCKED",
                "suggestion": result.suggestion,
            })
        if result.warning_level == "warning" and result.suggestion:
            warnings.append(result.suggestion)

    audio = await generate_track_async(
        params, timeout=GENERATION_TIMEOUT, url=request.app.state.backend_url
    )

    headers = {}
    if warnings:
        headers["X-Prompt-Warning"] = warnings[0]
    return Response(content=audio, media_type="audio/mpeg", headers=headers)


# Static files
if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="SongForge Studio API Server")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args()
    app.state.backend_url = resolve_backend_url(args.host, args.port)

    print()
    print("=" * 60)
    print("  SongForge Studio")
    print(f"  API listening on http://{args.host}:{args.port}")
    print(f"  Generation backend: {app.state.backend_url}")
    print("=" * 60)
    print()

    uvicorn.run(app, host=args.host, port=args.port)
