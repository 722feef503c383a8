from __future__ import annotations

from dsa_coach.schemas.problems import ProblemDetails
from dsa_coach.services.html import strip_html

SNIPPET_LENGTH = 300

INTRODUCTION_MARKER = 'I\'ve found the problem "{title}"'


def introduction_marker(title: str) -> str:
    return INTRODUCTION_MARKER.format(title=title)


def problem_snippet(problem: ProblemDetails, length: int = SNIPPET_LENGTH) -> str:
    plain_content = strip_html(problem.content)
    if len(plain_content) > length:
        return f"{plain_content[:length]}..."
    return plain_content


def format_introduction(problem: ProblemDetails) -> str:
    """
    Canned reply sent instead of an LLM completion when a problem is first surfaced.
    """

    return (
        f"{introduction_marker(problem.title)} ({problem.difficulty}).\n"
        "\n"
        "Here's what it's asking:\n"
        f"{problem_snippet(problem)}\n"
        "\n"
        "Let me know if you'd like to work on this problem, or if you meant a different one."
    )
