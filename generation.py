"""
SongForge Studio - Generation Logic
Prompt compilation, lyrics formatting, and track generation.
"""

import re
from types import MappingProxyType
from typing import Optional

from config import DEFAULT_DURATION_SECONDS
from schemas import CreateSongParams
from errors import EmptyPromptError
from backend import compose_via_backend, compose_via_backend_async

# ============================================================================
# Descriptor Tables
# ============================================================================

# (upper bound, phrase); the 40-60 band is neutral and adds nothing
CREATIVITY_BANDS = (
    (20, "conventional, familiar song structure"),
    (40, "accessible, radio-friendly arrangement"),
    (60, ""),
    (80, "creative, unexpected arrangement choices"),
    (None, "experimental, avant-garde sound design"),
)

ENERGY_BANDS = (
    (20, "chill, relaxed, laid-back"),
    (40, "mellow, easygoing groove"),
    (60, ""),
    (80, "energetic, driving rhythm"),
    (None, "intense, high-energy, powerful"),
)

VOCAL_DESCRIPTORS = MappingProxyType({
    "male": "male vocals, male singer",
    "female": "female vocals, female singer",
    "duet": "duet, two singers harmonizing, male and female vocals",
    "choir": "choir vocals, multiple singers, harmonized vocals",
    "auto": "",  # Let the model decide
})

INSTRUMENTAL_PRESETS = MappingProxyType({
    "cinematic": "cinematic orchestral score with sweeping strings",
    "lofi": "lo-fi hip hop beats with dusty vinyl texture",
    "ambient": "ambient atmospheric soundscape",
    "jazz": "smooth jazz ensemble",
    "electronic": "electronic synth-driven production",
    "acoustic": "warm acoustic instrumentation",
})

STRUCTURE_DESCRIPTORS = MappingProxyType({
    "intro": "atmospheric intro",
    "verse": "melodic verse section",
    "buildup": "rising buildup with growing tension",
    "drop": "powerful drop with energy release",
    "breakdown": "stripped-back breakdown",
    "bridge": "contrasting bridge",
    "loop": "hypnotic repeating loop",
    "outro": "fading outro",
})

VOCAL_FALLBACK = "with vocals"
INSTRUMENTAL_MARKER = "instrumental only, no vocals"

LYRICS_STRUCTURE_REGEX = re.compile(
    r"\[(Verse|Chorus|Bridge|Intro|Outro|Pre-Chorus|Hook)\s*\d?\]", re.IGNORECASE
)

# ============================================================================
# Descriptor Lookups
# ============================================================================

def _band_phrase(bands, value: int) -> str:
    for upper, phrase in bands:
        if upper is None or value < upper:
            return phrase
    return ""


def get_creativity_descriptor(creativity: int) -> str:
    return _band_phrase(CREATIVITY_BANDS, creativity)


def get_energy_descriptor(energy: int) -> str:
    return _band_phrase(ENERGY_BANDS, energy)


def get_vocal_descriptor(vocal_style: Optional[str]) -> str:
    if not vocal_style:
        return ""
    return VOCAL_DESCRIPTORS.get(vocal_style, "")


def build_instrumental_details(params: CreateSongParams) -> str:
    """Preset, featured instruments, and section structure for instrumentals."""
    details = []

    if params.instrumental_preset:
        details.append(INSTRUMENTAL_PRESETS[params.instrumental_preset])

    if params.instruments:
        details.append(f"featuring {', '.join(params.instruments)}")

    if params.structure_sections:
        flow = ", then ".join(STRUCTURE_DESCRIPTORS[s.type] for s in params.structure_sections)
        details.append(f"structure: {flow}")

    return ", ".join(details)

# ============================================================================
# Lyrics Formatting
# ============================================================================

def format_lyrics(lyrics: str) -> str:
    """Wrap unstructured lyrics in [Verse]/[Chorus] markers.

    Lyrics that already carry a section tag are passed through unchanged.
    """
    if not lyrics.strip():
        return ""

    if LYRICS_STRUCTURE_REGEX.search(lyrics):
        return lyrics

    lines = [line for line in lyrics.split("\n") if line.strip()]
    if len(lines) <= 4:
        return f"[Verse]\n{lyrics}"

    midpoint = len(lines) // 2
    verse = "\n".join(lines[:midpoint])
    chorus = "\n".join(lines[midpoint:])
    return f"[Verse 1]\n{verse}\n\n[Chorus]\n{chorus}"

# ============================================================================
# Prompt Compilation
# ============================================================================

def build_song_prompt(params: CreateSongParams) -> str:
    """Assemble all generation parameters into one ordered instruction.

    Segment order matters to the backend: style, creativity, energy,
    vocals, tempo, key, instrumental details or lyrics. The title goes in
    front and the exclusion clause goes last.
    """
    parts = []

    if params.custom_style:
        parts.append(params.custom_style)
    elif params.prompt:
        parts.append(params.prompt)

    creativity = get_creativity_descriptor(params.creativity)
    if creativity:
        parts.append(creativity)

    energy = get_energy_descriptor(params.energy)
    if energy:
        parts.append(energy)

    if not params.is_instrumental:
        # A vocal track must always carry a vocal cue
        parts.append(get_vocal_descriptor(params.vocal_style) or VOCAL_FALLBACK)

    if params.bpm:
        parts.append(f"{params.bpm} BPM")

    if params.key_signature:
        parts.append(f"in {params.key_signature}")

    if params.is_instrumental:
        parts.append(INSTRUMENTAL_MARKER)
        details = build_instrumental_details(params)
        if details:
            parts.append(details)
    elif params.custom_lyrics and params.custom_lyrics.strip():
        parts.append(f"\n\nLyrics:\n{format_lyrics(params.custom_lyrics)}")

    if params.custom_title:
        parts.insert(0, f'Song: "{params.custom_title}"')

    if params.exclude_styles:
        parts.append(f"exclude styles: {params.exclude_styles}")

    return ", ".join(parts).replace(", \n", "\n")

# ============================================================================
# Track Generation
# ============================================================================

def _prepare(params: CreateSongParams) -> str:
    prompt = build_song_prompt(params)
    if not prompt.strip():
        raise EmptyPromptError("Prompt is required for music generation")

    preview = prompt[:200] + ("..." if len(prompt) > 200 else "")
    print(f"[GEN] Prompt: {preview}", flush=True)
    print(f"[GEN] Duration: {params.duration_seconds or DEFAULT_DURATION_SECONDS}s, "
          f"instrumental={params.is_instrumental}", flush=True)
    return prompt


def generate_track(params: CreateSongParams, timeout: Optional[float] = None,
                   url: Optional[str] = None) -> bytes:
    """Compile the prompt and submit it to the generation backend.

    Returns raw audio bytes. Raises EmptyPromptError before any network
    call when the compiled prompt is blank.
    """
    prompt = _prepare(params)
    audio = compose_via_backend(
        prompt,
        params.duration_seconds or DEFAULT_DURATION_SECONDS,
        params.is_instrumental,
        timeout=timeout,
        url=url,
    )
    print(f"[GEN] Received {len(audio)} bytes of audio", flush=True)
    return audio


async def generate_track_async(params: CreateSongParams, timeout: Optional[float] = None,
                               url: Optional[str] = None) -> bytes:
    """Compile the prompt and submit it to the generation backend (non-blocking)."""
    prompt = _prepare(params)
    audio = await compose_via_backend_async(
        prompt,
        params.duration_seconds or DEFAULT_DURATION_SECONDS,
        params.is_instrumental,
        timeout=timeout,
        url=url,
    )
    print(f"[GEN] Received {len(audio)} bytes of audio", flush=True)
    return audio
