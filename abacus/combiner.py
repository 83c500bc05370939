from typing import Callable, Collection

from abacus.builtins import BUILTIN_FUNCS
from abacus.nester import NestedTokens, nest
from abacus.tokens import PRODUCT_OPERATORS, Method, Sub, Token, TokenType


def break_nesting(level: int, nested: NestedTokens, code: str) -> list[Token]:
    """Resolves the pointers at ``level`` back into SUBEXP tokens"""
    result: list[Token] = []
    level_tokens, _ = nested.get(level, ([], False))
    for t in level_tokens:
        if t.type is not TokenType.POINTER:
            result.append(t)
            continue

        pointed_tokens, has_nested_brackets = nested[t.level]  # type: ignore
        if has_nested_brackets:
            pointed_tokens = break_nesting(0, nest(pointed_tokens, code), code)

        combined = combine_tokens(pointed_tokens)
        method = Method.ABSOLUTE_VALUE if t.lexeme == "[" else Method.PARENTHESIZED
        result.append(Token(type=TokenType.SUBEXP, lexeme="", span=t.span, sub=Sub(combined.tokens, method)))
    return result


def combine_tokens(tokens: list[Token]) -> Sub:
    """Regroups a bracket-free token list so that grouping encodes operator precedence.

    Function calls and factorials become atomic operands, implicit multiplication
    is made explicit, power chains are nested right to left and product chains
    (``*``, ``/``, ``%``) are wrapped in sub-expressions. Sums and differences stay
    on the top level and are thus applied last.
    """
    tokens = _bind_calls(tokens)
    tokens = _insert_implicit_products(tokens)
    tokens = _group_chains(tokens, {TokenType.POWER}, combine_powers)
    tokens = _group_chains(tokens, PRODUCT_OPERATORS, lambda chain: chain)
    return Sub(tokens)


def combine_powers(tokens: list[Token]) -> list[Token]:
    """
    5 ^ 2 ^ 3 ^ 2 => 5 ^ (2 ^ (3 ^ 2))
    """
    if len(tokens) <= 3:
        return tokens
    return tokens[:2] + [Token.subexp(combine_powers(tokens[2:]))]


def _is_function_name(t: Token) -> bool:
    return t.type is TokenType.IDENTIFIER and t.lexeme.lower() in BUILTIN_FUNCS


def _bind_calls(tokens: list[Token]) -> list[Token]:
    """sqrt (16) => (sqrt (16)), 5 ! => (5 !)"""
    result: list[Token] = []
    i = 0
    while i < len(tokens):
        current = tokens[i]
        next_ = tokens[i + 1] if i + 1 < len(tokens) else None
        if (
            _is_function_name(current)
            and next_ is not None
            and next_.type in (TokenType.NUMBER, TokenType.SUBEXP)
        ):
            function = Token(type=TokenType.FUNCTION, lexeme=current.lexeme, span=current.span)
            result.append(Token.subexp([function, next_]))
            i += 2
        elif current.type is TokenType.FACTORIAL and result and result[-1].is_operand:
            result.append(Token.subexp([result.pop(), current]))
            i += 1
        else:
            result.append(current)
            i += 1
    return result


def _insert_implicit_products(tokens: list[Token]) -> list[Token]:
    """4 (2 + 10) => 4 * (2 + 10)"""
    multipliable = (TokenType.NUMBER, TokenType.SUBEXP)
    result: list[Token] = []
    for t in tokens:
        if result and result[-1].type in multipliable and t.type in multipliable:
            result.append(Token(type=TokenType.PRODUCT, lexeme="*"))
        result.append(t)
    return result


def _group_chains(
    tokens: list[Token], operators: Collection[TokenType], fold: Callable[[list[Token]], list[Token]]
) -> list[Token]:
    """Wraps every ``operand (operator operand)+`` run into a single SUBEXP.

    A run spanning the whole list is kept on the top level instead of being
    wrapped into a sub-expression of its own.
    """
    result: list[Token] = []
    i = 0
    while i < len(tokens):
        end = i
        if tokens[i].is_operand:
            while (
                end + 2 < len(tokens)
                and tokens[end + 1].type in operators
                and tokens[end + 2].is_operand
            ):
                end += 2

        if end == i:
            result.append(tokens[i])
        elif i == 0 and end == len(tokens) - 1:
            return fold(tokens)
        else:
            result.append(Token.subexp(fold(tokens[i : end + 1])))
        i = end + 1
    return result
