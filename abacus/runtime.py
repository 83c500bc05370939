import logging
import math
from typing import Optional

from abacus.builtins import BUILTIN_FUNCS, factorial
from abacus.environment import Environment
from abacus.errors import (
    CannotParseNumber,
    DivisionByZero,
    EmptyTokens,
    IllegalToken,
    InvalidOrder,
    MissingTokens,
    TooDeeplyNested,
    UndefinedVariable,
)
from abacus.lexer import lex
from abacus.tokens import OPERATORS, SIGNS, UNKNOWN_SPAN, Method, Sub, Token, TokenType

logger = logging.getLogger(__name__)


def calculate(code: str, env: Optional[Environment] = None) -> float:
    if env is None:
        env = Environment()
    return evaluate(lex(code), code, env)


def evaluate(sub: Sub, code: str, env: Environment) -> float:
    try:
        result = evaluate_sub(sub, code, env)
    except RecursionError:
        raise TooDeeplyNested(code=code) from None
    logger.debug("%r evaluated to %s", code, result)
    return result


def evaluate_sub(sub: Sub, code: str, env: Environment) -> float:
    tokens = sub.tokens
    if not tokens:
        raise EmptyTokens(code=code)

    if len(tokens) >= 3 and tokens[0].type is TokenType.IDENTIFIER and tokens[1].type is TokenType.ASSIGN:
        name = tokens[0].lexeme
        result = evaluate_sub(Sub(tokens[2:]), code, env)
        env.set(name, result)
        logger.debug("Assigned %s = %s", name, result)
    elif len(tokens) == 2 and tokens[1].type is TokenType.FACTORIAL:
        operand, _ = _consume_operand(tokens, 0, code, env)
        result = factorial(operand, code=code, position=_position(tokens[1]))
    else:
        result = _reduce(tokens, code, env)

    if sub.method is Method.ABSOLUTE_VALUE:
        return abs(result)
    else:
        return result


def _position(token: Token, end: bool = False) -> Optional[int]:
    if token.span == UNKNOWN_SPAN:
        return None
    return token.span[1] + 1 if end else token.span[0]


def _reduce(tokens: list[Token], code: str, env: Environment) -> float:
    """Folds ``operand (operator operand)*`` left to right, a leading sign applies to an implicit zero"""
    i = 1 if tokens[0].type in SIGNS else 0
    result = 0.0
    while True:
        if i >= len(tokens):
            raise MissingTokens(code=code, position=_position(tokens[-1], end=True))
        operator = _take_operator(tokens, i, code)
        y, next_i = _consume_operand(tokens, i, code, env)
        result = y if i == 0 else _execute_operation(result, y, operator, code, tokens[i])
        if next_i >= len(tokens):
            return result
        i = next_i + 1


def _take_operator(tokens: list[Token], i: int, code: str) -> TokenType:
    if i == 0:
        return TokenType.PLUS

    prev_token = tokens[i - 1]
    if prev_token.type is TokenType.ILLEGAL:
        raise IllegalToken(
            f"Illegal character {prev_token.lexeme!r}",
            code=code,
            position=_position(prev_token),
            literal=prev_token.lexeme,
        )
    if prev_token.type in OPERATORS:
        return prev_token.type
    raise InvalidOrder(code=code, position=_position(prev_token))


def _consume_operand(tokens: list[Token], i: int, code: str, env: Environment) -> tuple[float, int]:
    """Returns the value of the operand at ``i`` and the index right after it"""
    token = tokens[i]
    if token.type is TokenType.NUMBER:
        try:
            return float(token.lexeme), i + 1
        except ValueError:
            raise CannotParseNumber(
                f"Cannot parse {token.lexeme!r} as a number",
                code=code,
                position=_position(token),
                literal=token.lexeme,
            ) from None
    elif token.type is TokenType.IDENTIFIER:
        value = env.get(token.lexeme)
        if value is None:
            raise UndefinedVariable(
                f"Undefined variable {token.lexeme!r}", code=code, position=_position(token), name=token.lexeme
            )
        return value, i + 1
    elif token.type is TokenType.SUBEXP:
        return evaluate_sub(token.sub, code, env), i + 1  # type: ignore
    elif token.type is TokenType.FUNCTION:
        if i + 1 >= len(tokens) or tokens[i + 1].type not in (
            TokenType.NUMBER,
            TokenType.IDENTIFIER,
            TokenType.SUBEXP,
        ):
            raise MissingTokens(
                f"{token.lexeme!r} expects an argument", code=code, position=_position(token, end=True)
            )
        arg, _ = _consume_operand(tokens, i + 1, code, env)
        return BUILTIN_FUNCS[token.lexeme.lower()](arg, code=code, position=_position(token)), i + 2
    elif token.type is TokenType.ILLEGAL:
        raise IllegalToken(
            f"Illegal character {token.lexeme!r}", code=code, position=_position(token), literal=token.lexeme
        )
    else:
        raise InvalidOrder(f"Operand expected, found {token.type}", code=code, position=_position(token))


def _execute_operation(x: float, y: float, operator: TokenType, code: str, y_token: Token) -> float:
    if operator is TokenType.DIVIDE and y == 0.0:
        raise DivisionByZero(code=code, position=_position(y_token))

    if operator is TokenType.PLUS:
        return x + y
    elif operator is TokenType.MINUS:
        return x - y
    elif operator is TokenType.PRODUCT:
        return x * y
    elif operator is TokenType.DIVIDE:
        return x / y
    elif operator is TokenType.PERCENTAGE:
        return (x / 100.0) * y
    elif operator is TokenType.POWER:
        return _power(x, y)
    else:
        raise RuntimeError(f"Unexpected operator: {operator}")


def _power(x: float, y: float) -> float:
    """math.pow with IEEE results instead of exceptions: 0 ^ -1 is inf, -0 ^ -1 is -inf, (-8) ^ 0.5 is nan"""
    odd_exponent = y.is_integer() and y % 2 == 1
    try:
        return math.pow(x, y)
    except ValueError:
        if x == 0.0:
            return math.copysign(math.inf, x) if odd_exponent else math.inf
        return math.nan
    except OverflowError:
        return -math.inf if x < 0 and odd_exponent else math.inf
