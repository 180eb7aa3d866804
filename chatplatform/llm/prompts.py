# chatplatform/llm/prompts.py
from typing import Iterable, List, Dict

from chatplatform.db.models import Message, Project, Prompt

ADDITIONAL_CONTEXT_HEADER = "\n\nAdditional context:\n"


def build_system_prompt(project: Project, prompts: Iterable[Prompt]) -> str:
    """Project system prompt followed by each prompt snippet, in order."""
    system_prompt = project.system_prompt or ""
    prompts = list(prompts)
    if prompts:
        system_prompt += ADDITIONAL_CONTEXT_HEADER
        for prompt in prompts:
            system_prompt += f"\n{prompt.name}:\n{prompt.content}\n"
    return system_prompt


def history_to_messages(history: Iterable[Message]) -> List[Dict[str, str]]:
    return [{"role": m.role, "content": m.content} for m in history]
