from dsa_coach.schemas.problems import ProblemDetails
from dsa_coach.services.formatter import format_introduction, problem_snippet


def make_problem(content: str) -> ProblemDetails:
    return ProblemDetails(title_slug="sample", title="Sample", difficulty="Medium", content=content)


def test_long_content_is_cut_at_300_characters_with_ellipsis():
    body = "a" * 450
    snippet = problem_snippet(make_problem(f"<p>{body}</p>"))

    assert snippet == "a" * 300 + "..."


def test_short_content_is_shown_in_full():
    body = "b" * 300
    snippet = problem_snippet(make_problem(f"<div>{body}</div>"))

    assert snippet == body
    assert not snippet.endswith("...")


def test_introduction_layout(two_sum):
    assert format_introduction(two_sum) == (
        'I\'ve found the problem "Two Sum" (Easy).\n'
        "\n"
        "Here's what it's asking:\n"
        "Find two numbers...\n"
        "\n"
        "Let me know if you'd like to work on this problem, or if you meant a different one."
    )
