"""TenseTrainer utilities."""

from .prompt_loader import (
    PROMPTS_DIR,
    PromptTemplate,
    RenderedPrompt,
    get_available_prompts,
    load_prompt,
    render_prompt,
)

__all__ = [
    "PROMPTS_DIR",
    "PromptTemplate",
    "RenderedPrompt",
    "get_available_prompts",
    "load_prompt",
    "render_prompt",
]
