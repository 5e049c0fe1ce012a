"""Extract one answer string from any supported response shape."""

from .models import NO_CONTENT_FOUND, ChatResponse


def extract(response: ChatResponse) -> str:
    """
    Return the canonical answer text of a decoded response.

    Shapes are tried in a fixed order because a response may populate more
    than one of the optional fields:

    1. Anthropic content blocks: every block's text, joined. Returned even
       when empty.
    2. OpenAI choices: the first choice's message content.
    3. Google candidates: every text part of the first candidate, joined.
       Parts without text (e.g. a bare thought signature) are skipped.

    Returns ``NO_CONTENT_FOUND`` when none of them yields an answer.
    """
    if response.content is not None:
        return "".join(block.text for block in response.content if block.text is not None)

    if response.choices:
        content = response.choices[0].message.content
        return content if content is not None else ""

    if response.candidates:
        candidate = response.candidates[0]
        # Some models split thoughts and answer across parts; keep them all.
        parts = candidate.content.parts if candidate.content is not None else []
        text = "".join(part.text for part in parts if part.text is not None)
        if text:
            return text

    return NO_CONTENT_FOUND


def has_content(text: str) -> bool:
    return text != NO_CONTENT_FOUND
