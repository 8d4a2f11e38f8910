"""Flattened-prompt builder for providers without native history support."""

from collections.abc import Sequence

from chatstore.core.llm.models import ConversationTurn, MessageSender

CONTEXT_HEADER = "Previous conversation:\n\n"
HUMAN_LABEL = "Human"
ASSISTANT_LABEL = "Assistant"


def build_contextual_prompt(
    current_text: str,
    history: Sequence[ConversationTurn],
) -> str:
    """Render *history* plus *current_text* as one transcript-style prompt.

    With no history the text is returned unchanged.
    """
    if not history:
        return current_text

    parts = [CONTEXT_HEADER]
    for turn in history:
        label = HUMAN_LABEL if turn.sender is MessageSender.USER else ASSISTANT_LABEL
        parts.append(f"{label}: {turn.content}\n\n")
    parts.append(f"{HUMAN_LABEL}: {current_text}\n\n")
    parts.append(f"{ASSISTANT_LABEL}: ")
    return "".join(parts)
