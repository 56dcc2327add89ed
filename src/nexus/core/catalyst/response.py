"""
Post-processing of raw LLM responses.

Reasoning models emit their chain of thought before the answer, closed by a
``</think>`` tag (the opening ``<think>`` is sometimes omitted). Only the
text after the closing tag is the document. Some models also wrap the
document in a ```markdown fence, which is stripped.

Example:
    >>> extract_reasoning_and_answer("<think>plan</think>\\n## Doc\\nbody")
    ('plan', '## Doc\\nbody')
    >>> extract_reasoning_and_answer("## Doc\\nbody")
    (None, '## Doc\\nbody')
"""

from __future__ import annotations

OPEN_TAG = "<think>"
CLOSE_TAG = "</think>"

_FENCE_OPENERS = ("```markdown", "```md", "```")


def extract_reasoning_and_answer(response: str) -> tuple[str | None, str]:
    """
    Split a response into (reasoning, answer).

    Splits at the first closing tag. Reasoning is the text before it with an
    optional leading opening tag removed. If no closing tag is present the
    whole trimmed response is the answer. If nothing follows the closing tag
    the whole trimmed response is returned as the answer, so a malformed
    reply is validated (and fails) instead of silently becoming empty.

    Args:
        response: Raw completion text.

    Returns:
        Tuple of (reasoning or None, answer).
    """
    trimmed = response.strip()
    head, sep, tail = trimmed.partition(CLOSE_TAG)
    if not sep:
        return None, trimmed

    answer = tail.strip()
    if not answer:
        return None, trimmed

    reasoning = head.strip()
    if reasoning.startswith(OPEN_TAG):
        reasoning = reasoning[len(OPEN_TAG) :].strip()
    return (reasoning or None), answer


def clean_llm_response(answer: str) -> str:
    """Strip a code fence wrapping the whole document, if there is one."""
    text = answer.strip()
    for opener in _FENCE_OPENERS:
        if text.startswith(opener) and text.endswith("```") and len(text) > len(opener) + 3:
            first_newline = text.find("\n")
            if first_newline == -1 or text[len(opener) : first_newline].strip():
                # Opener carries another info string (```python) or nothing follows
                continue
            return text[first_newline + 1 : -3].strip()
    return text
