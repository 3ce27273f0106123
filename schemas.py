"""
SongForge Studio - Pydantic Schemas
Data models for API requests and responses.
"""

from typing import Optional, List, Literal
from pydantic import BaseModel, Field

from config import DEFAULT_DURATION_SECONDS, OUTPUT_FORMAT

VocalStyle = Literal["auto", "male", "female", "duet", "choir"]
InstrumentalPreset = Literal["cinematic", "lofi", "ambient", "jazz", "electronic", "acoustic"]
SectionType = Literal["intro", "verse", "buildup", "drop", "breakdown", "bridge", "loop", "outro"]
WarningLevel = Literal["none", "info", "warning", "error"]

# ============================================================================
# Prompt Validation
# ============================================================================

class ValidationResult(BaseModel):
    is_valid: bool
    error: Optional[str] = None
    suggestion: Optional[str] = None
    warning_level: WarningLevel = "none"


class PromptFeedback(BaseModel):
    status: Literal["valid", "warning", "error"]
    message: Optional[str] = None


class PromptRequest(BaseModel):
    prompt: str = ""

# ============================================================================
# Song Creation
# ============================================================================

class StructureSection(BaseModel):
    type: SectionType


class CreateSongParams(BaseModel):
    prompt: Optional[str] = None
    custom_style: Optional[str] = None
    custom_title: Optional[str] = None
    custom_lyrics: Optional[str] = None
    is_instrumental: bool = False
    vocal_style: VocalStyle = "auto"
    # Sliders (0-100); 50 sits in the neutral band
    creativity: int = Field(default=50, ge=0, le=100)
    energy: int = Field(default=50, ge=0, le=100)
    bpm: Optional[int] = None
    key_signature: Optional[str] = None  # e.g. "C major", "A minor"
    instrumental_preset: Optional[InstrumentalPreset] = None
    instruments: List[str] = Field(default_factory=list)
    structure_sections: List[StructureSection] = Field(default_factory=list)
    exclude_styles: Optional[str] = None  # Negative prompt
    duration_seconds: int = Field(default=DEFAULT_DURATION_SECONDS, ge=1)


class CompiledPrompt(BaseModel):
    prompt: str
    estimated_seconds: int

# ============================================================================
# Compose Proxy
# ============================================================================

class GenerateRequest(BaseModel):
    prompt: Optional[str] = None
    duration_seconds: int = DEFAULT_DURATION_SECONDS
    instrumental: bool = False
    output_format: str = OUTPUT_FORMAT
    lyrics: Optional[str] = None
    style: Optional[str] = None
    title: Optional[str] = None
