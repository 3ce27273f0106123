"""
SongForge Studio - Prompt Validation
Heuristic content gate for free-text music prompts.

Allows generic musical references (genres, instruments, classical works,
generic name shapes) while blocking pasted lyrics, famous copyrighted
phrases, and explicit language. Best effort only, not a classifier.
"""

import re
from typing import Callable, Optional, Tuple

from schemas import ValidationResult, PromptFeedback

# ============================================================================
# Rule Sets
# ============================================================================

# Public-domain / well-known classical works and composers (substring match)
ALLOWED_CLASSICAL_WORKS = (
    "canon in d", "canon d", "pachelbel", "pachelbel canon",
    "fur elise", "moonlight sonata", "clair de lune",
    "swan lake", "nutcracker", "four seasons", "vivaldi",
    "beethoven", "mozart", "bach", "chopin", "debussy",
    "symphony no", "concerto", "sonata", "prelude", "fugue",
    "nocturne", "waltz", "etude", "rhapsody", "requiem",
    "ave maria", "hallelujah", "ode to joy",
    "ride of the valkyries", "flight of the bumblebee",
    "hungarian rhapsody", "turkish march", "spring",
    "winter", "summer", "autumn", "the planets",
)

ALLOWED_MUSICAL_TERMS = (
    # Genres
    "rock", "pop", "jazz", "blues", "country", "folk", "classical",
    "electronic", "edm", "hip hop", "rap", "r&b", "soul", "funk",
    "reggae", "metal", "punk", "indie", "ambient", "lo-fi", "lofi",
    "trap", "house", "techno", "dubstep", "drum and bass", "dnb",
    "trance", "progressive", "psychedelic", "disco", "synthwave",
    "vaporwave", "chillwave", "shoegaze", "grunge", "alternative",
    "orchestra", "orchestral", "cinematic", "epic", "dramatic",
    "acoustic", "unplugged", "ballad", "anthem", "hymn",
    # Instruments
    "piano", "guitar", "violin", "cello", "drums", "bass",
    "saxophone", "trumpet", "flute", "clarinet", "oboe",
    "harp", "organ", "synthesizer", "synth", "keyboard",
    "strings", "brass", "woodwinds", "percussion",
    # Theory and arrangement
    "melody", "harmony", "rhythm", "beat", "tempo", "bpm",
    "chord", "progression", "key", "minor", "major", "scale",
    "verse", "chorus", "bridge", "intro", "outro", "hook",
    "riff", "solo", "instrumental", "vocal", "vocals",
    "soprano", "alto", "tenor", "baritone", "bass voice",
    "duet", "trio", "quartet", "choir", "ensemble",
    # Moods
    "upbeat", "mellow", "chill", "relaxing", "energetic",
    "melancholic", "nostalgic", "romantic", "dark", "bright",
    "dreamy", "ethereal", "powerful", "gentle", "aggressive",
    "happy", "sad", "angry", "peaceful", "intense",
    # Descriptors
    "catchy", "groovy", "smooth", "raw", "polished",
    "minimalist", "complex", "simple", "layered",
)

# Generic song/band name shapes, matched against the whole trimmed prompt
ALLOWED_NAME_PATTERNS = tuple(re.compile(p, re.IGNORECASE | re.ASCII) for p in (
    r"^los\s+\w+$",
    r"^las\s+\w+$",
    r"^el\s+\w+$",
    r"^la\s+\w+$",
    r"^tres\s+\w+$",
    r"^hermanos?\s*$",
    r"^the\s+\w+$",
    r"^(black|white|red|blue|green)\s+\w+$",
    r"^(midnight|sunrise|sunset|dawn|dusk)\s+\w+$",
    r"^(fire|water|earth|wind|air)\s+\w+$",
    r"^(electric|acoustic|cosmic|stellar)\s+\w+$",
))

COPYRIGHT = "copyright"
EXPLICIT = "explicit"

# Ordered; evaluated before any allow-list
BLOCKED_PATTERNS = (
    (re.compile(r"(.+\n){10,}"), COPYRIGHT),  # more than 10 lines, likely pasted lyrics
    (re.compile(r"never gonna give you up.*never gonna let you down", re.IGNORECASE), COPYRIGHT),
    (re.compile(r"we will we will rock you", re.IGNORECASE), COPYRIGHT),
    (re.compile(r"all you need is love.*love is all you need", re.IGNORECASE), COPYRIGHT),
    (re.compile(r"yesterday.*all my troubles seemed so far away", re.IGNORECASE), COPYRIGHT),
    (re.compile(r"bohemian rhapsody", re.IGNORECASE), COPYRIGHT),
    (re.compile(r"\b(fuck|shit|bitch|nigga|nigger)\b", re.IGNORECASE | re.ASCII), EXPLICIT),
)

BLOCK_REASONS = {
    EXPLICIT: "Prompt contains explicit language. Consider using cleaner alternatives.",
    COPYRIGHT: "This appears to contain copyrighted lyrics. Try describing the song you want instead.",
}

MUSICAL_TERM_RATIO = 0.3
SHORT_PROMPT_LENGTH = 200
LONG_PROMPT_LENGTH = 500

LONG_PROMPT_SUGGESTION = (
    "Long prompts work better when they describe style and mood "
    "rather than including full lyrics."
)

# ============================================================================
# Rule Predicates
# ============================================================================

def find_blocked_category(prompt: str) -> Optional[str]:
    """Return the category of the first blocked pattern found, if any."""
    for pattern, category in BLOCKED_PATTERNS:
        if pattern.search(prompt):
            return category
    return None


def contains_allowed_classical(prompt: str) -> bool:
    lower = prompt.lower()
    return any(work in lower for work in ALLOWED_CLASSICAL_WORKS)


def is_primarily_musical_terms(prompt: str) -> bool:
    """True when more than 30% of the words (longer than 2 chars) are musical terms.

    Matching is substring in either direction, so "guitars" matches "guitar"
    and "hip" matches "hip hop".
    """
    words = [w for w in prompt.lower().split() if len(w) > 2]
    if not words:
        return False

    musical = [
        word for word in words
        if any(term in word or word in term for term in ALLOWED_MUSICAL_TERMS)
    ]
    return len(musical) / len(words) > MUSICAL_TERM_RATIO


def matches_allowed_name_pattern(prompt: str) -> bool:
    stripped = prompt.strip()
    return any(pattern.search(stripped) for pattern in ALLOWED_NAME_PATTERNS)


def is_short_description(prompt: str) -> bool:
    return len(prompt) < SHORT_PROMPT_LENGTH and "\n" not in prompt


# First match wins; order is part of the contract
ALLOW_RULES: Tuple[Tuple[str, Callable[[str], bool]], ...] = (
    ("classical_work", contains_allowed_classical),
    ("musical_terms", is_primarily_musical_terms),
    ("name_pattern", matches_allowed_name_pattern),
    ("short_description", is_short_description),
)

# ============================================================================
# Validation
# ============================================================================

def generate_suggestion(prompt: str) -> str:
    """Pick a rewrite hint for a blocked prompt."""
    if "\n" in prompt and len(prompt.split("\n")) > 5:
        return ('Instead of pasting lyrics, try describing the song: '
                '"A melancholic ballad about lost love with piano and strings"')

    lower = prompt.lower()
    if "song" in lower or "track" in lower or "single" in lower:
        return ('Try describing the mood and style you want: '
                '"An upbeat pop song with 80s synthesizers and energetic drums"')

    return "Describe the music you want: genre, mood, instruments, tempo, and theme work best!"


def validate_prompt(prompt: Optional[str]) -> ValidationResult:
    """Classify a free-text prompt as allowed, warned, or blocked."""
    if not prompt or not prompt.strip():
        return ValidationResult(is_valid=True, warning_level="none")

    trimmed = prompt.strip()

    category = find_blocked_category(trimmed)
    if category is not None:
        return ValidationResult(
            is_valid=False,
            error=BLOCK_REASONS[category],
            suggestion=generate_suggestion(trimmed),
            warning_level="error",
        )

    for _name, predicate in ALLOW_RULES:
        if predicate(trimmed):
            return ValidationResult(is_valid=True, warning_level="none")

    if len(trimmed) > LONG_PROMPT_LENGTH:
        return ValidationResult(
            is_valid=True,
            warning_level="warning",
            suggestion=LONG_PROMPT_SUGGESTION,
        )

    return ValidationResult(is_valid=True, warning_level="none")


def get_prompt_feedback(prompt: Optional[str]) -> PromptFeedback:
    """Real-time feedback for a prompt as the user types."""
    result = validate_prompt(prompt)

    if not result.is_valid:
        return PromptFeedback(status="error", message=result.error)

    if result.warning_level == "warning":
        return PromptFeedback(status="warning", message=result.suggestion)

    return PromptFeedback(status="valid")
