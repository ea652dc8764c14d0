from __future__ import annotations

"""
LLM Prompt Builder.

Wraps a rendered composite into the user's prompt template and optionally
appends a template note as a structure guide for the generated note.
"""

from notegraph4ai.domain.constants import TEMPLATE_GUIDE_HEADER


def generate_llm_prompt(
        filename: str,
        content: str,
        depth: int,
        template: str,
        template_content: str = "",
) -> str:
    """
    Fill the prompt template placeholders.

    Only the first occurrence of each of '{filename}', '{depth}' and
    '{content}' is replaced, in that order, so braces inside the composite
    are left untouched.

    Args:
        filename: Display name of the root document.
        content: Rendered composite text.
        depth: Depth bound used for the traversal.
        template: Prompt template text.
        template_content: Optional template note content to append.

    Returns:
        str: The final prompt.
    """
    prompt = (
        template
        .replace("{filename}", filename, 1)
        .replace("{depth}", str(depth), 1)
        .replace("{content}", content, 1)
    )

    if template_content:
        prompt += f"{TEMPLATE_GUIDE_HEADER}{template_content}"

    return prompt
