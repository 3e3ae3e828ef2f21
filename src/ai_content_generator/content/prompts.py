from dataclasses import dataclass

from ai_content_generator.content.types import ContentType, FontTheme, ResponseLength

INSTRUCTION_TEMPLATES: dict[ContentType, str] = {
    ContentType.ARTICLE: (
        "Write a comprehensive, well-structured article on the following topic. Use clear headings, "
        "engaging language, and provide detailed information in a cyberpunk, futuristic tone. "
        "Format the response in Markdown."
    ),
    ContentType.SUMMARY: (
        "Provide a concise and accurate summary of the following text or topic. Capture the main points "
        "and key takeaways. The tone should be sharp and technological. Format the response in Markdown."
    ),
    ContentType.CAPTION: (
        "Generate an engaging and creative social media caption for the following topic or idea. "
        "Make it sound like it's from a high-tech future. Include relevant futuristic hashtags and a "
        "compelling call-to-action."
    ),
    ContentType.PARAGRAPH: (
        "Write a clear and coherent paragraph about the following subject. Ensure it is well-written, "
        "focused, and has a distinct cyberpunk feel."
    ),
}

RESPONSE_LENGTH_TOKENS: dict[ResponseLength, int] = {
    ResponseLength.SHORT: 512,
    ResponseLength.MEDIUM: 1024,
    ResponseLength.LONG: 2048,
}

# (display, body) font stacks per theme
FONT_THEMES: dict[FontTheme, tuple[str, str]] = {
    FontTheme.CYBERPUNK: ('"Orbitron", sans-serif', '"Roboto Mono", monospace'),
    FontTheme.RETRO: ('"VT323", monospace', '"Share Tech Mono", monospace'),
    FontTheme.MODERN: ('"Exo 2", sans-serif', '"Space Mono", monospace'),
}


@dataclass(frozen=True)
class GenerationParams:
    """Everything the outbound call needs, derived from one user selection."""

    contents: str
    temperature: float
    max_output_tokens: int
    thinking_budget: int

    def as_meta(self) -> dict:
        return {
            "temperature": self.temperature,
            "max_output_tokens": self.max_output_tokens,
            "thinking_budget": self.thinking_budget,
            "contents_chars": len(self.contents),
        }


def compose_contents(prompt: str, content_type: ContentType) -> str:
    return f'{INSTRUCTION_TEMPLATES[ContentType(content_type)]}\n\nTOPIC: "{prompt}"'


def build_generation_params(
    prompt: str,
    content_type: ContentType,
    creativity: float,
    length: ResponseLength,
) -> GenerationParams:
    max_output_tokens = RESPONSE_LENGTH_TOKENS[ResponseLength(length)]
    return GenerationParams(
        contents=compose_contents(prompt, content_type),
        temperature=float(creativity),
        max_output_tokens=max_output_tokens,
        thinking_budget=max_output_tokens // 4,
    )
