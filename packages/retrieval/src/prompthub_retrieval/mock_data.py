"""Built-in demo corpus served when no prompt store is configured.

Platform prompts have no owner. Community prompts carry an owner id and
may be posted anonymously.
"""

from datetime import datetime, timezone

from prompthub_contracts import Prompt


def _at(iso: str) -> datetime:
    return datetime.fromisoformat(iso).replace(tzinfo=timezone.utc)


MOCK_PROMPTS: tuple[Prompt, ...] = (
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440001",
        title="Code Blue Debrief Assistant",
        content=(
            "Act as my Code Blue debrief assistant. I've just participated in a code "
            "and need help grounding myself so I can document what happened accurately. "
            "Walk me through a 30 second mindfulness moment, then give me a checklist "
            "of what post-code documentation usually includes: start and end times, "
            "initial rhythm, airway management, IV/IO access, medications, "
            "defibrillation, total CPR time, ROSC and outcome. Do not request names "
            "or any personal health information."
        ),
        category="Code Blue Debrief",
        specialty="icu",
        tags=["code-blue", "documentation", "mindfulness", "professional-development"],
        vote_count=24,
        created_at=_at("2024-01-15T10:30:00"),
        has_alternate_versions=True,
    ),
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440002",
        title="Post-Shift Reset Coach",
        content=(
            "Act as my post-shift reset coach. Guide me through one slow 4-7-8 breath. "
            "Ask me how tense my body is from 1 to 10, which emotion is strongest, and "
            "one good thing that happened today. Suggest two quick resets and close "
            "with a calming affirmation."
        ),
        category="Burnout Self-Check",
        specialty="med-surg",
        tags=["self-care", "mindfulness", "stress-management", "emotional-wellness"],
        vote_count=42,
        created_at=_at("2024-01-14T14:20:00"),
        has_alternate_versions=True,
    ),
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440003",
        title="Mental Report Prep Partner",
        content=(
            "Act as my mental report prep partner. I'm about to give handoff and want "
            "to make sure I've covered the important pieces. Use SBAR format to "
            "organize my thoughts and remind me to check priority concerns, pending "
            "labs or meds, new orders, and safety or pain updates. Keep it quick."
        ),
        category="Shift Report Prep",
        specialty="er",
        tags=["sbar", "handoff-communication", "patient-safety", "organization"],
        vote_count=31,
        created_at=_at("2024-01-13T09:15:00"),
    ),
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440004",
        title="Clinical Decision Partner",
        content=(
            "Act as a calm clinical decision partner. I'm in the middle of a busy shift "
            "deciding what to tackle next. Help me weigh airway, safety, pain, "
            "time-sensitive meds and new orders, then recap the top priorities and "
            "remind me to take a breath before I move."
        ),
        category="Prioritization Support",
        specialty="icu",
        tags=["prioritization", "time-management", "clinical-decisions", "patient-safety"],
        vote_count=35,
        created_at=_at("2024-01-12T16:45:00"),
    ),
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440005",
        title="Care Plan Selection Assistant",
        content=(
            "I'm finishing my shift and want to select the most appropriate care plan. "
            "Help me identify nursing diagnoses using standard terminology, draft SMART "
            "goals, and suggest evidence-based interventions that fit common "
            "documentation standards."
        ),
        category="Care Plan Helper",
        specialty="pediatrics",
        tags=["care-planning", "nursing-diagnoses", "evidence-based-practice", "documentation"],
        vote_count=27,
        created_at=_at("2024-01-11T11:30:00"),
    ),
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440009",
        title="Hydration & Bio-Break Check",
        content=(
            "If I've been on shift for four hours with no active alarms or "
            "time-critical tasks, remind me to drink water and take a restroom break."
        ),
        category="Self-Care",
        specialty="med-surg",
        tags=["hydration", "self-care", "wellness", "break-reminders"],
        vote_count=15,
        created_at=_at("2024-01-16T08:00:00"),
    ),
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440006",
        title="Rapid Response Team Debrief",
        content=(
            "Act as my rapid response debrief facilitator. Walk me through a recent "
            "RRT call: recognition of deterioration, escalation timing, communication "
            "with the medical team, and system factors that contributed. Keep the "
            "focus on learning while maintaining patient confidentiality."
        ),
        category="Code Blue Debrief",
        specialty="med-surg",
        tags=["rapid-response", "early-warning-signs", "escalation", "patient-safety"],
        vote_count=18,
        created_at=_at("2024-01-10T13:20:00"),
        owner_id="550e8400-e29b-41d4-a716-446655440106",
    ),
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440007",
        title="Compassion Fatigue Check-In",
        content=(
            "Act as my compassion fatigue counselor. Help me recognize early signs of "
            "emotional exhaustion and reduced empathy, assess my emotional reserves, "
            "and suggest strategies for rebuilding resilience."
        ),
        category="Burnout Self-Check",
        specialty="mental-health",
        tags=["compassion-fatigue", "emotional-wellness", "resilience", "self-assessment"],
        vote_count=29,
        created_at=_at("2024-01-09T08:45:00"),
        owner_id="550e8400-e29b-41d4-a716-446655440107",
        is_anonymous=True,
    ),
    Prompt(
        id="550e8400-e29b-41d4-a716-446655440008",
        title="ICU Handoff Excellence",
        content=(
            "Act as my ICU report specialist. Help me prepare efficient handoffs for "
            "critically ill patients: ventilator settings, vasoactive drips, "
            "neurological trends, family communication needs, and pending procedures."
        ),
        category="Shift Report Prep",
        specialty="icu",
        tags=["critical-care", "handoff-communication", "ventilator-management", "complex-patients"],
        vote_count=22,
        created_at=_at("2024-01-08T15:10:00"),
        owner_id="550e8400-e29b-41d4-a716-446655440108",
    ),
)

MOCK_SUGGESTIONS: tuple[str, ...] = (
    "code blue",
    "handoff",
    "burnout",
    "self-care",
    "documentation",
    "prioritization",
    "medication administration",
    "patient education",
    "time management",
    "stress reduction",
)
