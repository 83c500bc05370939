import logging
from dataclasses import dataclass

from abacus.errors import EmptyInput
from abacus.tokens import Token, TokenType

logger = logging.getLogger(__name__)

WHITESPACE = " \t\r\n"

SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.PRODUCT,
    "•": TokenType.PRODUCT,
    "/": TokenType.DIVIDE,
    ":": TokenType.DIVIDE,
    "%": TokenType.PERCENTAGE,
    "^": TokenType.POWER,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LABS,
    "]": TokenType.RABS,
    "!": TokenType.FACTORIAL,
    "=": TokenType.ASSIGN,
}


def _is_valid_in_number(s: str) -> bool:
    return s.isdigit() or s == "."


def _is_number_like_end(s: str) -> bool:
    """Characters that can end an operand, after which a sign is a binary operator"""
    return _is_valid_in_number(s) or s.isalpha() or s in ")]!"


@dataclass
class _Cursor:
    code: str
    pos: int = 0

    @property
    def char(self) -> str:
        return self.code[self.pos] if self.pos < len(self.code) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.code)

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.char in WHITESPACE:
            self.pos += 1

    def prev_significant(self) -> str:
        i = self.pos - 1
        while i >= 0 and self.code[i] in WHITESPACE:
            i -= 1
        return self.code[i] if i >= 0 else ""

    def next_significant(self, start: int) -> str:
        i = start
        while i < len(self.code) and self.code[i] in WHITESPACE:
            i += 1
        return self.code[i] if i < len(self.code) else ""


def scan(code: str) -> list[Token]:
    if not code:
        raise EmptyInput(code=code)

    cursor = _Cursor(code)
    tokens: list[Token] = []
    while True:
        cursor.skip_whitespace()
        if cursor.at_end():
            break
        tokens.append(_next_token(cursor))

    logger.debug("Scanned %d tokens: %s", len(tokens), " ".join(str(t) for t in tokens))
    return tokens


def _next_token(cursor: _Cursor) -> Token:
    ch = cursor.char
    start = cursor.pos

    if ch in "+-" and _is_signed_number(cursor):
        return _read_number(cursor)
    elif ch in SINGLE_CHAR_TOKENS:
        cursor.pos += 1
        return Token(type=SINGLE_CHAR_TOKENS[ch], lexeme=ch, span=(start, start))
    elif _is_valid_in_number(ch):
        return _read_number(cursor)
    elif ch.isalpha():
        while not cursor.at_end() and cursor.char.isalpha():
            cursor.pos += 1
        return Token(type=TokenType.IDENTIFIER, lexeme=cursor.code[start : cursor.pos], span=(start, cursor.pos - 1))
    else:
        cursor.pos += 1
        return Token(type=TokenType.ILLEGAL, lexeme=ch, span=(start, start))


def _is_signed_number(cursor: _Cursor) -> bool:
    prev = cursor.prev_significant()
    if prev and _is_number_like_end(prev):
        return False
    return _is_valid_in_number(cursor.next_significant(cursor.pos + 1))


def _read_number(cursor: _Cursor) -> Token:
    """Reads a number run starting at the cursor, including a leading sign and embedded spaces"""
    start = cursor.pos
    if cursor.char in "+-":
        cursor.pos += 1
        cursor.skip_whitespace()

    end = cursor.pos
    while not cursor.at_end():
        if _is_valid_in_number(cursor.char):
            end = cursor.pos
            cursor.pos += 1
        elif cursor.char == " " and _is_valid_in_number(cursor.next_significant(cursor.pos)):
            cursor.pos += 1
        else:
            break

    literal = "".join(c for c in cursor.code[start : end + 1] if c not in WHITESPACE)
    return Token(type=TokenType.NUMBER, lexeme=literal, span=(start, end))
