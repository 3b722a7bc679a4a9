import pytest

from llm_bridge_toolkit.tokens import estimate_tokens


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", 0),
        ("hello", 2),  # ceil(1.2)
        ("hello world", 4),  # ceil(2.4 + 1 space run -> 1)
        ("你好", 2),
        ("42", 1),  # ceil(0.8)
        ("Hi, there!", 5),  # ceil(2.4 + 2 * 0.5 + 1)
    ],
)
def test_estimate_tokens(text: str, expected: int) -> None:
    assert estimate_tokens(text) == expected


def test_space_runs_are_grouped() -> None:
    five_runs = "a b c d e f"
    six_runs = "a b c d e f g"
    # 6 words * 1.2 + ceil(5/5) vs 7 words * 1.2 + ceil(6/5)
    assert estimate_tokens(five_runs) == 9
    assert estimate_tokens(six_runs) == 11


def test_estimate_grows_with_text() -> None:
    short = "The quick brown fox."
    assert estimate_tokens(short * 10) > estimate_tokens(short)
