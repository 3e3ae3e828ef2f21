import pytest

from ai_content_generator.content.prompts import (
    FONT_THEMES,
    INSTRUCTION_TEMPLATES,
    build_generation_params,
    compose_contents,
)
from ai_content_generator.content.types import ContentType, FontTheme, ResponseLength


@pytest.mark.parametrize("content_type", list(ContentType))
def test_contents_is_template_followed_by_literal_topic(content_type: ContentType) -> None:
    topic = 'Neon rain over "Sector 7"'
    contents = compose_contents(topic, content_type)
    assert contents == f'{INSTRUCTION_TEMPLATES[content_type]}\n\nTOPIC: "{topic}"'
    assert contents.startswith(INSTRUCTION_TEMPLATES[content_type])


def test_every_content_type_has_a_distinct_template() -> None:
    assert set(INSTRUCTION_TEMPLATES) == set(ContentType)
    assert len(set(INSTRUCTION_TEMPLATES.values())) == len(ContentType)
    assert "hashtags" in INSTRUCTION_TEMPLATES[ContentType.CAPTION]


@pytest.mark.parametrize(
    ("length", "max_tokens", "thinking"),
    [
        (ResponseLength.SHORT, 512, 128),
        (ResponseLength.MEDIUM, 1024, 256),
        (ResponseLength.LONG, 2048, 512),
    ],
)
def test_length_budgets(length: ResponseLength, max_tokens: int, thinking: int) -> None:
    params = build_generation_params("topic", ContentType.ARTICLE, 0.7, length)
    assert params.max_output_tokens == max_tokens
    assert params.thinking_budget == thinking == max_tokens // 4


def test_creativity_maps_to_temperature_and_accepts_raw_values() -> None:
    params = build_generation_params("topic", "Social Media Caption", 0.25, "short")  # type: ignore[arg-type]
    assert params.temperature == 0.25
    assert params.contents.startswith(INSTRUCTION_TEMPLATES[ContentType.CAPTION])
    assert params.as_meta()["max_output_tokens"] == 512


def test_font_themes_cover_every_theme() -> None:
    assert set(FONT_THEMES) == set(FontTheme)
    display, body = FONT_THEMES[FontTheme.RETRO]
    assert "VT323" in display
    assert "Share Tech Mono" in body
