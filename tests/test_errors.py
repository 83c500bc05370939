import pytest

from abacus.errors import (
    CalcError,
    DivisionByZero,
    EvalError,
    LexError,
    MismatchedParentheses,
    MissingTokens,
    TooDeeplyNested,
)
from abacus.runtime import calculate


def test_message_without_position() -> None:
    assert str(CalcError("boom")) == "[Calculator error] boom"
    assert str(DivisionByZero(code="1 / 0")) == "[Evaluation error] Division by zero"


def test_caret_points_at_error() -> None:
    with pytest.raises(DivisionByZero) as exc_info:
        calculate("10 / 0")
    assert str(exc_info.value) == "\n".join(
        [
            "[Evaluation error] Division by zero",
            "10 / 0",
            "     ^",
        ]
    )


def test_caret_after_end_of_input() -> None:
    with pytest.raises(MissingTokens) as exc_info:
        calculate("2 +")
    assert str(exc_info.value).splitlines()[1:] == ["2 +", "   ^"]


def test_long_input_is_windowed() -> None:
    code = "0123456789" * 5
    error = MismatchedParentheses(code=code, position=25)
    assert str(error).splitlines() == [
        "[Lexer error] Mismatched parentheses",
        "..." + code[15:35] + "...",
        " " * 13 + "^",
    ]


def test_window_at_start_of_input() -> None:
    code = "(" + "1 + " * 10 + "1"
    error = MismatchedParentheses(code=code, position=0)
    assert str(error).splitlines()[1:] == [code[:10] + "...", "^"]


def test_too_deeply_nested_belongs_to_both_families() -> None:
    error = TooDeeplyNested(code="((1))")
    assert isinstance(error, LexError)
    assert isinstance(error, EvalError)
    assert str(error) == "[Nesting error] Expression is too deeply nested"
