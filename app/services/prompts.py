"""Prompt text for the generation endpoints."""
from typing import Sequence

QUESTIONS_SYSTEM_PROMPT = """
You generate *three short clarifying questions* to help a user define a goal or problem.
Return ONLY a JSON object:

{
  "questions": [string, string, string]
}

Rules:
- Ask exactly 3 short conversational questions.
- No advice, no solutions, no steps.
- No bullet points or numbering.
- All output must be valid JSON only.
"""

SMART_SYSTEM_PROMPT = """
You generate a simple SMART breakdown based on the user's goal.
Return ONLY a JSON object:

{
  "goalTitle": string,
  "smart": {
    "specific": string,
    "measurable": string,
    "achievable": string,
    "relevant": string,
    "timeBased": string
  }
}

Rules:
- goalTitle must be 6-12 words.
- Each SMART field must be 1-2 friendly sentences.
- No solutions or action steps.
- No extra fields.
- JSON must be valid.
"""

_ACTION_SHAPE = """{
  "actions": [
    {
      "actionId": string,
      "targetId": string,
      "title": string,
      "description": string,
      "frequency": "daily" | "weekly" | "monthly" | "once",
      "repeatConfig": {
        "onDays": ["mon", "tue", "wed", "thu", "fri", "sat", "sun"],
        "dayOfMonth": number
      },
      "order": number,
      "completedDates": [timestamp, ...],
      "isArchived": boolean,
      "createdAt": timestamp
    }
  ]
}"""

_ACTION_RULES = """- Titles should be short and action-oriented, without repeating SMART text.
- Description in 3-4 sentences that is easy to understand.
- frequency must be one of: daily, weekly, monthly, or once.
- repeatConfig is only needed when frequency is weekly or monthly (for daily or once, keep it empty or null).
- completedDates should be an array of timestamps (can be empty).
- createdAt should be a timestamp for when the suggestion was created.
- Do not add any extra fields or commentary.
Ensure JSON is valid."""

ACTIONS_SYSTEM_PROMPT = f"""You are a friendly coach who creates practical, beginner-friendly actions based on a SMART goal.
Return ONLY a JSON object with this exact shape:
{_ACTION_SHAPE}
Rules:
- Generate between 6 and 10 actions.
- Each action must be clear, concise, and directly tied to the SMART goal.
- Include a mix of quick wins, medium steps, and slightly longer tasks.
- Avoid overlapping or redundant tasks.
{_ACTION_RULES}"""

MORE_ACTIONS_SYSTEM_PROMPT = f"""You are a friendly coach who proposes fresh, practical actions for a SMART goal.
Return ONLY a JSON object with this exact shape:
{_ACTION_SHAPE}
Rules:
- Generate 4 to 8 new actions that are meaningfully different from any provided previous actions.
- Avoid overlapping, rephrasing, or merging previous ideas. Introduce new angles (resources, accountability, routines, checkpoints).
- Each action must be clear, concise, and tied to the SMART goal.
{_ACTION_RULES}"""


def questions_user_prompt(user_input: str) -> str:
    return f'User wants help with: "{user_input}". Generate exactly 3 clarifying questions.'


def smart_user_prompt(user_input: str, answers: Sequence[str]) -> str:
    joined = " | ".join(answers) if answers else "None"
    return (
        f'User goal: "{user_input}"\n'
        f"Clarifying answers: {joined}\n"
        "Generate the SMART breakdown only."
    )


def _smart_details(goal_title: str, smart: dict) -> str:
    return (
        f'Goal title: "{goal_title}"\n'
        "SMART details:\n"
        f"- Specific: {smart['specific']}\n"
        f"- Measurable: {smart['measurable']}\n"
        f"- Achievable: {smart['achievable']}\n"
        f"- Relevant: {smart['relevant']}\n"
        f"- Time-based: {smart['timeBased']}\n"
    )


def actions_user_prompt(goal_title: str, smart: dict) -> str:
    return _smart_details(goal_title, smart) + "Generate 6-10 action ideas as instructed."


def more_actions_user_prompt(goal_title: str, smart: dict, previous_actions: Sequence[dict]) -> str:
    lines = []
    for index, action in enumerate(previous_actions, start=1):
        line = f"{index}. {action['title']}"
        if action.get("description"):
            line += f" - {action['description']}"
        lines.append(line)

    return (
        _smart_details(goal_title, smart)
        + "Previously suggested actions:\n"
        + ("\n".join(lines) or "None provided")
        + "\nGenerate 4-8 new action ideas that are clearly different from all previous actions."
    )
