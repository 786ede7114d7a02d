"""System prompt assembly for assistants that answer from vault notes."""

from __future__ import annotations

DEFAULT_SYSTEM_PROMPT = """You are a helpful AI assistant integrated into Obsidian.
You have access to the user's notes for context.
Answer questions based on the provided context when relevant.
Be concise and helpful. Use markdown formatting."""


def build_system_message(system_prompt: str, context: str) -> str:
    """Append the formatted note *context* to *system_prompt*, if there is any."""

    if not context:
        return system_prompt
    return f"{system_prompt}\n\nRelevant notes from vault:\n{context}"
