import logging
import math

import pytest

from abacus.environment import Environment
from abacus.errors import (
    CalcError,
    CannotParseNumber,
    DivisionByZero,
    EmptyInput,
    EmptyTokens,
    EvalError,
    FactorialDomainError,
    FunctionDomainError,
    IllegalToken,
    InvalidOrder,
    LexError,
    MismatchedParentheses,
    MissingTokens,
    TooDeeplyNested,
    UndefinedVariable,
)
from abacus.lexer import lex
from abacus.runtime import calculate, evaluate
from abacus.tokens import Sub, Token, TokenType


@pytest.mark.parametrize(
    "code, error_type, position",
    [
        pytest.param("10 / 0", DivisionByZero, 5),
        pytest.param("(5-5)/(2-2)", DivisionByZero, 6),
        pytest.param("1 / (2 - 2) + 1", DivisionByZero, 4),
        pytest.param("2 + * 3", InvalidOrder, 4),
        pytest.param("2 +", MissingTokens, 3),
        pytest.param("1 } 2", IllegalToken, 2),
        pytest.param("$", IllegalToken, 0),
        pytest.param("1.2.3", CannotParseNumber, 0),
        pytest.param("2 + y", UndefinedVariable, 4),
        pytest.param("(5 + 3]", MismatchedParentheses, 6),
        pytest.param("(5 + 3", MismatchedParentheses, 0),
        pytest.param("3.5!", FactorialDomainError, 3),
        pytest.param("171!", FactorialDomainError, 3),
        pytest.param("(-1)!", FactorialDomainError, 4),
        pytest.param("sqrt(-1)", FunctionDomainError, 0),
        pytest.param("1 + log(0)", FunctionDomainError, 4),
        pytest.param("ln(-1)", FunctionDomainError, 0),
    ],
)
def test_positioned_errors(code: str, error_type: type[CalcError], position: int) -> None:
    with pytest.raises(error_type) as exc_info:
        calculate(code)
    assert exc_info.value.position == position
    assert exc_info.value.code == code


@pytest.mark.parametrize(
    "code, error_type",
    [
        pytest.param("", EmptyInput),
        pytest.param("   ", EmptyTokens),
        pytest.param("()", EmptyTokens),
        pytest.param("2 * []", EmptyTokens),
    ],
)
def test_nothing_to_evaluate(code: str, error_type: type[CalcError]) -> None:
    with pytest.raises(error_type):
        calculate(code)


def test_error_families() -> None:
    with pytest.raises(LexError):
        calculate("(1")
    with pytest.raises(EvalError):
        calculate("1 / 0")


def test_largest_factorial() -> None:
    assert calculate("170!") == pytest.approx(7.257415615307994e306)


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("round(2.5)", 3.0),
        pytest.param("round(-2.5)", -3.0),
        pytest.param("round(-3.5)", -4.0),
        pytest.param("round(2.4)", 2.0),
        pytest.param("floor(-2.5)", -3.0),
        pytest.param("ceil(-2.5)", -2.0),
        pytest.param("tan(0)", 0.0),
    ],
)
def test_functions(code: str, expected: float) -> None:
    assert calculate(code) == expected


def test_power_follows_ieee() -> None:
    assert calculate("0 ^ -1") == math.inf
    assert calculate("-0 ^ -1") == -math.inf
    assert calculate("-0 ^ -2") == math.inf
    assert calculate("(-0) ^ -3") == -math.inf
    assert calculate("10 ^ 400") == math.inf
    assert math.isnan(calculate("(-8) ^ 0.5"))


def test_variables_persist_in_environment() -> None:
    env = Environment()
    assert calculate("x = 5", env) == 5.0
    assert calculate("x * 2", env) == 10.0
    assert calculate("x = x + 1", env) == 6.0
    assert calculate("[x - 10]", env) == 4.0
    assert env.get("x") == 6.0


def test_variables_are_case_sensitive() -> None:
    env = Environment()
    calculate("x = 1", env)
    with pytest.raises(UndefinedVariable) as exc_info:
        calculate("X + 1", env)
    assert exc_info.value.name == "X"


def test_assignment_of_absolute_value() -> None:
    env = Environment()
    assert calculate("y = [2 - 5]", env) == 3.0
    assert calculate("z = [y - 10] * 2", env) == 14.0


def test_factorial_of_variable() -> None:
    env = Environment()
    calculate("n = 3", env)
    assert calculate("n!", env) == 6.0
    assert calculate("(n + 1)!", env) == 24.0


def test_function_names_can_be_variables() -> None:
    env = Environment()
    assert calculate("sin = 3", env) == 3.0
    assert calculate("sin * 2", env) == 6.0
    assert calculate("sin(0)", env) == 0.0


def test_failed_assignment_keeps_environment() -> None:
    env = Environment()
    calculate("x = 1", env)
    with pytest.raises(DivisionByZero):
        calculate("x = 1 / 0", env)
    assert env.get("x") == 1.0


def test_calculate_uses_fresh_environment() -> None:
    calculate("x = 1")
    with pytest.raises(UndefinedVariable):
        calculate("x")


def test_lex_too_deeply_nested() -> None:
    depth = 2000
    code = "(" * depth + "1" + ")" * depth
    with pytest.raises(TooDeeplyNested):
        lex(code)


def test_evaluate_too_deeply_nested() -> None:
    sub = Sub([Token(type=TokenType.NUMBER, lexeme="1", span=(0, 0))])
    for _ in range(5000):
        sub = Sub([Token.subexp(sub.tokens)])
    with pytest.raises(TooDeeplyNested) as exc_info:
        evaluate(sub, "1", Environment())
    assert isinstance(exc_info.value, EvalError)


def test_lex_too_deeply_nested_with_debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    depth = 2000
    code = "(" * depth + "1" + ")" * depth
    with caplog.at_level(logging.DEBUG, logger="abacus"):
        with pytest.raises(TooDeeplyNested):
            lex(code)


def test_function_without_argument() -> None:
    sub = Sub([Token(type=TokenType.FUNCTION, lexeme="sqrt", span=(0, 3))])
    with pytest.raises(MissingTokens) as exc_info:
        evaluate(sub, "sqrt", Environment())
    assert exc_info.value.position == 4


def test_function_with_operator_argument() -> None:
    sub = Sub(
        [
            Token(type=TokenType.FUNCTION, lexeme="sqrt", span=(0, 3)),
            Token(type=TokenType.PLUS, lexeme="+", span=(5, 5)),
        ]
    )
    with pytest.raises(MissingTokens):
        evaluate(sub, "sqrt +", Environment())


def test_function_with_variable_argument() -> None:
    env = Environment()
    env.set("x", 16.0)
    sub = Sub(
        [
            Token(type=TokenType.FUNCTION, lexeme="Sqrt", span=(0, 3)),
            Token(type=TokenType.IDENTIFIER, lexeme="x", span=(5, 5)),
        ]
    )
    assert evaluate(sub, "Sqrt x", env) == 4.0
