import pytest

from prompt_validation import (
    validate_prompt, get_prompt_feedback, generate_suggestion,
    is_primarily_musical_terms, matches_allowed_name_pattern,
    BLOCK_REASONS, EXPLICIT, COPYRIGHT, LONG_PROMPT_SUGGESTION
)

PROSE_600 = ("the quick brown fox jumps over the lazy dog " * 14).strip()


@pytest.mark.parametrize("text", ["", "   ", "\n\t ", None])
def test_empty_prompt_is_valid(text):
    result = validate_prompt(text)
    assert result.is_valid
    assert result.warning_level == "none"
    assert result.error is None


@pytest.mark.parametrize("text", [
    "a dreamy synthwave track about neon nights",
    "something for a rainy afternoon",
    "Los Hermanos",
    "x" * 199,
])
def test_short_single_line_prompts_pass(text):
    result = validate_prompt(text)
    assert result.is_valid
    assert result.warning_level == "none"


def test_explicit_language_is_blocked():
    result = validate_prompt("fuck this")
    assert not result.is_valid
    assert result.warning_level == "error"
    assert "explicit language" in result.error
    assert result.error == BLOCK_REASONS[EXPLICIT]
    assert result.suggestion


def test_explicit_match_is_case_insensitive_and_word_bounded():
    assert not validate_prompt("SHIT happens").is_valid
    # "shitake" is not the blocked word
    assert validate_prompt("shitake mushroom jazz").is_valid


def test_word_boundaries_are_ascii_only():
    # Accented letters are not word characters, so the boundary still holds
    result = validate_prompt("éfuck")
    assert not result.is_valid
    assert result.error == BLOCK_REASONS[EXPLICIT]


def test_known_lyric_is_blocked_as_copyright():
    result = validate_prompt("Never gonna give you up, never gonna let you down")
    assert not result.is_valid
    assert result.error == BLOCK_REASONS[COPYRIGHT]


def test_blocked_patterns_run_before_allow_lists():
    # "rhapsody" is on the classical allow-list but the title is blocked first
    result = validate_prompt("bohemian rhapsody piano cover")
    assert not result.is_valid
    assert result.warning_level == "error"


def test_many_lines_are_treated_as_pasted_lyrics():
    lyrics = "\n".join(f"line number {i} of my song" for i in range(12))
    result = validate_prompt(lyrics)
    assert not result.is_valid
    assert result.error == BLOCK_REASONS[COPYRIGHT]
    assert "Instead of pasting lyrics" in result.suggestion


def test_classical_work_allowed_regardless_of_length():
    assert validate_prompt("Pachelbel's Canon in D").is_valid
    long_text = "Pachelbel's Canon in D\n" + ("arranged for a small string ensemble " * 20)
    result = validate_prompt(long_text)
    assert result.is_valid
    assert result.warning_level == "none"


def test_musical_terms_ratio_allows_long_multiline_text():
    text = "\n".join(["ambient piano strings", "mellow drums and bass", "dreamy synth pads"] * 3)
    assert is_primarily_musical_terms(text)
    result = validate_prompt(text)
    assert result.is_valid
    assert result.warning_level == "none"


def test_musical_terms_ignores_short_tokens():
    assert not is_primarily_musical_terms("a an of to")


def test_name_patterns_are_anchored():
    assert matches_allowed_name_pattern("  Midnight Express ")
    assert matches_allowed_name_pattern("the wanderers")
    assert not matches_allowed_name_pattern("the wanderers return")


def test_name_patterns_match_ascii_words_only():
    assert matches_allowed_name_pattern("Los Hermanos")
    assert not matches_allowed_name_pattern("Los Pájaros")


def test_long_prose_gets_warning():
    assert len(PROSE_600) > 500
    result = validate_prompt(PROSE_600)
    assert result.is_valid
    assert result.warning_level == "warning"
    assert result.suggestion == LONG_PROMPT_SUGGESTION


def test_medium_multiline_prose_passes_without_warning():
    text = "the quick brown fox jumps over the lazy dog\nand then it sat down for a while"
    result = validate_prompt(text)
    assert result.is_valid
    assert result.warning_level == "none"


def test_suggestion_mentions_song_template():
    assert "upbeat pop song" in generate_suggestion("play me that song")
    assert "upbeat pop song" in generate_suggestion("the new single")


def test_suggestion_default_tip():
    assert generate_suggestion("fuck") == (
        "Describe the music you want: genre, mood, instruments, tempo, and theme work best!"
    )


def test_feedback_statuses():
    blocked = get_prompt_feedback("fuck this")
    assert blocked.status == "error"
    assert blocked.message == BLOCK_REASONS[EXPLICIT]

    warned = get_prompt_feedback(PROSE_600)
    assert warned.status == "warning"
    assert warned.message == LONG_PROMPT_SUGGESTION

    ok = get_prompt_feedback("lofi beats to study to")
    assert ok.status == "valid"
    assert ok.message is None
