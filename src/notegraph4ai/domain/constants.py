from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to application-wide constants, including the
default LLM prompt template, traversal depth bounds, template discovery
hints and the AI model price registry.
"""

from typing import Any, Dict, Tuple

CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_MODEL_KEY = "- Default Model -"

DEFAULT_DEPTH = 1
MAX_DEPTH_LIMIT = 4

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".md",)

# Markers used by template discovery (matched against lower-cased paths/names)
TEMPLATE_PATH_MARKER = "template"
TEMPLATE_NAME_PREFIX = "template"

TEMPLATE_GUIDE_HEADER = (
    "\n\nPlease follow this template structure when creating the new note:\n\n"
)

DEFAULT_PROMPT_TEMPLATE = """Based on the following content from "{filename}", its backlinks, and forward links (recursion depth: {depth}), analyze and synthesize the information to create an enhanced Obsidian note. Consider the following aspects:

1. Key Concepts:
   - Identify and explain main ideas
   - Highlight important relationships between concepts
   - Suggest potential connections to other topics

2. Knowledge Structure:
   - Create a hierarchical organization of information
   - Identify gaps in the current content
   - Propose areas for further research

3. Obsidian-Specific Features:
   - Suggest relevant internal links ([[link]])
   - Recommend appropriate tags (#tag)
   - Identify opportunities for MOCs (Maps of Content)

Here's the source content:

{content}

Please provide a comprehensive response that includes:
1. A structured summary of the key points
2. Suggested connections and relationships
3. Potential areas for expansion
4. Recommended tags and links
5. Any additional insights or patterns you've identified

Format the response in an Obsidian-flavored Markdown codeblock, utilizing appropriate syntax for links, tags, and other Obsidian features."""

# -----------------------------------------------------------------------------
# AI PROVIDER REGISTRY
# -----------------------------------------------------------------------------
AI_MODELS: Dict[str, Dict[str, Any]] = {
    "- Default Model -": {
        "id": "gpt-4o",
        "provider": "- Default -",
        "input_cost_1k": 0.0025,
        "output_cost_1k": 0.010
    },
    "ChatGPT 4o": {
        "id": "chatgpt-4o-latest",
        "provider": "OPENAI",
        "input_cost_1k": 0.0025,
        "output_cost_1k": 0.010
    },
    "OpenAI o3": {
        "id": "o3",
        "provider": "OPENAI",
        "input_cost_1k": 0.015,
        "output_cost_1k": 0.060
    },
    "GPT-4 Turbo (Legacy)": {
        "id": "gpt-4-turbo",
        "provider": "OPENAI",
        "input_cost_1k": 0.010,
        "output_cost_1k": 0.030
    },
    "Claude 4.5 Sonnet": {
        "id": "claude-sonnet-4-5-20250929",
        "provider": "ANTHROPIC",
        "input_cost_1k": 0.003,
        "output_cost_1k": 0.015
    },
    "Gemini 2.5 Pro": {
        "id": "gemini-2.5-pro",
        "provider": "GOOGLE",
        "input_cost_1k": 0.00125,
        "output_cost_1k": 0.00375
    },
    "Gemini 2.5 Flash": {
        "id": "gemini-2.5-flash",
        "provider": "GOOGLE",
        "input_cost_1k": 0.0001,
        "output_cost_1k": 0.0003
    },
    "DeepSeek Chat V3.2": {
        "id": "deepseek-chat",
        "provider": "HF_LOCAL",
        "input_cost_1k": 0.00014,
        "output_cost_1k": 0.00028
    },
}
