"""
Prompt templates for TenseTrainer.

Each template is a YAML file in tensetrainer/prompts/:

    meta:
      version: 1
      temperature: 0.9
    system: |
      ...
    user_template: |
      ... {tense} ... {count} ...

Templates are validated on load; rendering fills the user template.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


class PromptMeta(BaseModel):
    version: int = 1
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)


class PromptTemplate(BaseModel):
    name: str
    meta: PromptMeta = Field(default_factory=PromptMeta)
    system: str
    user_template: str


@dataclass
class RenderedPrompt:
    """A prompt template filled in and ready to send."""
    name: str
    system: str
    user: str
    temperature: Optional[float] = None

    @property
    def full_text(self) -> str:
        """System and user parts joined into a single prompt."""
        return f"{self.system}\n\n---\n\n{self.user}"


def get_available_prompts(prompts_dir: Path | None = None) -> list[str]:
    """Sorted template names (file stems) in the prompts directory."""
    dir_path = prompts_dir or PROMPTS_DIR
    if not dir_path.exists():
        return []
    return sorted(p.stem for p in dir_path.glob("*.yaml"))


def load_prompt(name: str, prompts_dir: Path | None = None) -> PromptTemplate:
    """
    Load and validate a prompt template by name.

    Raises:
        FileNotFoundError: If no template has this name
        ValueError: If the file is not a mapping with system and user_template
    """
    dir_path = prompts_dir or PROMPTS_DIR
    available = get_available_prompts(dir_path)
    if name not in available:
        raise FileNotFoundError(
            f"Prompt template '{name}' not found in {dir_path} "
            f"(available: {', '.join(available) or 'none'})"
        )

    with open(dir_path / f"{name}.yaml", "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Prompt template '{name}' must be a YAML mapping")
    return PromptTemplate.model_validate({"name": name, **data})


def render_prompt(name: str, prompts_dir: Path | None = None, **kwargs) -> RenderedPrompt:
    """
    Load a template and fill its {placeholders} from kwargs.

    Unused kwargs are ignored; a placeholder without a value raises KeyError.
    """
    template = load_prompt(name, prompts_dir)
    return RenderedPrompt(
        name=name,
        system=template.system.strip(),
        user=template.user_template.format(**kwargs).strip(),
        temperature=template.meta.temperature,
    )
