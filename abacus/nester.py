"""Groups a flat token stream by bracket depth.

Each bracketed group is cut out of its surrounding level and replaced by a
POINTER token naming the level it was stored under. For example
``5 + (2 + 4) : (4 + 5 * (3 + 5))`` is stored as::

    0: 5 + {1} : {2}
    1: 2 + 4
    2: 4 + 5 * (3 + 5)    <- still has brackets, re-nested by the combiner

Only the outermost groups of the given stream get their own level; a group
that still contains brackets is flagged so that it is nested again when it is
resolved.
"""
import logging

from abacus.errors import MismatchedParentheses
from abacus.tokens import LEFT_BRACKETS, RIGHT_BRACKETS, Token, TokenType

logger = logging.getLogger(__name__)

NestedTokens = dict[int, tuple[list[Token], bool]]


def nest(tokens: list[Token], code: str) -> NestedTokens:
    nested: NestedTokens = {0: ([], False)}
    level = 0

    i = 0
    while i < len(tokens):
        t = tokens[i]
        if t.type in LEFT_BRACKETS:
            level += 1
            collected, end_idx, has_nested_brackets = take_till_end(tokens, i, code)
            pointer = Token(
                type=TokenType.POINTER,
                lexeme=t.lexeme,
                span=(t.span[0], tokens[end_idx].span[1]),
                level=level,
            )
            nested[0][0].append(pointer)
            nested[level] = (collected, has_nested_brackets)
            i = end_idx + 1
        elif t.type in RIGHT_BRACKETS:
            raise MismatchedParentheses(errmsg=f"Unexpected {t.lexeme!r}", code=code, position=t.span[0])
        else:
            nested[0][0].append(t)
            i += 1

    if logger.isEnabledFor(logging.DEBUG):
        for lvl, (level_tokens, renest) in nested.items():
            logger.debug("Level %d%s: %s", lvl, " (renest)" if renest else "", " ".join(str(t) for t in level_tokens))
    return nested


def take_till_end(tokens: list[Token], start: int, code: str) -> tuple[list[Token], int, bool]:
    """Collects the tokens enclosed by the bracket at ``start``.

    Returns the enclosed tokens, the index of the matching closing bracket and
    whether the enclosed tokens contain brackets themselves.
    """
    start_token = tokens[start]
    if start_token.type not in LEFT_BRACKETS:
        raise MismatchedParentheses(
            errmsg=f"Expected an opening bracket, found {start_token.lexeme!r}",
            code=code,
            position=start_token.span[0],
        )

    # open brackets of both families, innermost last
    open_stack = [start_token]
    has_nested_brackets = False
    collected: list[Token] = []
    for j in range(start + 1, len(tokens)):
        t = tokens[j]
        if t.type in LEFT_BRACKETS:
            has_nested_brackets = True
            open_stack.append(t)
        elif t.type in RIGHT_BRACKETS:
            innermost = open_stack[-1]
            if RIGHT_BRACKETS[t.type] is not innermost.type:
                raise MismatchedParentheses(
                    errmsg=f"{t.lexeme!r} does not close {innermost.lexeme!r}",
                    code=code,
                    position=t.span[0],
                )
            open_stack.pop()
            if not open_stack:
                return collected, j, has_nested_brackets
        collected.append(t)

    raise MismatchedParentheses(
        errmsg=f"Unclosed {open_stack[-1].lexeme!r}",
        code=code,
        position=open_stack[-1].span[0],
    )
