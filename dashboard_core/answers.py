from __future__ import annotations

import random
from typing import Any, Mapping, Optional

from dashboard_core.coerce import as_text

ANSWER_KEYS = ("answer", "result", "message")

ASSISTANT_REPLIES = (
    "Sure thing! I drafted a quick summary for you. Let me know if you want a deeper dive.",
    "I've got a few ideas that could help. Want me to outline the next steps?",
    "Done! I added it to your action items for follow-up later today.",
    "Consider pairing this task with a quick stand-up note so the team stays aligned.",
    "I just checked your backlog. Two items might need refinement before the next sprint planning.",
    "Remember to celebrate the wins! I highlighted three tasks that wrapped up ahead of schedule.",
    "Noted. I shuffled a couple of tasks to balance the workload across the team.",
    "Great question! The timeline still looks healthy, but keep an eye on the review column.",
    "Heads-up: I spotted a dependency that could block progress tomorrow. Shall I flag it?",
    "All set! I captured your question in the retrospective notes so it is not forgotten.",
)
ASSISTANT_FAILURE_REPLY = "I'm sorry, I couldn't fetch that right now. Please try asking again in a moment."


def extract_answer(payload: Any) -> Optional[str]:
    """A bare string, or the first of answer/result/message as non-empty text."""
    if isinstance(payload, str):
        return as_text(payload)
    if isinstance(payload, Mapping):
        for key in ANSWER_KEYS:
            value = payload.get(key)
            if value is not None:
                return as_text(value)
    return None


def canned_reply(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(ASSISTANT_REPLIES)
