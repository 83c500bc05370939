import enum
import re
from dataclasses import dataclass, field
from typing import Optional


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


class TokenType(PrintableEnum):
    NUMBER = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    PRODUCT = enum.auto()
    DIVIDE = enum.auto()
    PERCENTAGE = enum.auto()
    POWER = enum.auto()
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    LABS = enum.auto()
    RABS = enum.auto()
    IDENTIFIER = enum.auto()
    FUNCTION = enum.auto()
    FACTORIAL = enum.auto()
    ASSIGN = enum.auto()
    POINTER = enum.auto()
    SUBEXP = enum.auto()
    ILLEGAL = enum.auto()


class Method(PrintableEnum):
    PARENTHESIZED = enum.auto()
    ABSOLUTE_VALUE = enum.auto()


OPERATORS = frozenset(
    [
        TokenType.PLUS,
        TokenType.MINUS,
        TokenType.PRODUCT,
        TokenType.DIVIDE,
        TokenType.PERCENTAGE,
        TokenType.POWER,
    ]
)
SIGNS = frozenset([TokenType.PLUS, TokenType.MINUS])
PRODUCT_OPERATORS = frozenset([TokenType.PRODUCT, TokenType.DIVIDE, TokenType.PERCENTAGE])

LEFT_BRACKETS = {TokenType.LPAREN: Method.PARENTHESIZED, TokenType.LABS: Method.ABSOLUTE_VALUE}
RIGHT_BRACKETS = {TokenType.RPAREN: TokenType.LPAREN, TokenType.RABS: TokenType.LABS}

UNKNOWN_SPAN = (-1, -1)


@dataclass
class Sub:
    tokens: list["Token"] = field(default_factory=list)
    method: Method = Method.PARENTHESIZED


@dataclass
class Token:
    type: TokenType
    lexeme: str
    span: tuple[int, int] = UNKNOWN_SPAN
    sub: Optional[Sub] = None
    level: Optional[int] = None

    def __str__(self) -> str:
        if self.sub is not None:
            return f"<{self.type}>{untokenize([self])}"
        return f"<{self.type}>{self.lexeme}"

    @classmethod
    def subexp(cls, tokens: list["Token"], method: Method = Method.PARENTHESIZED) -> "Token":
        return cls(type=TokenType.SUBEXP, lexeme="", span=spanning(tokens), sub=Sub(tokens, method))

    @property
    def is_operand(self) -> bool:
        return self.type in (TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.SUBEXP)


def spanning(tokens: list[Token]) -> tuple[int, int]:
    """Smallest source range covering every positioned token, UNKNOWN_SPAN if none is positioned"""
    known = [t.span for t in tokens if t.span != UNKNOWN_SPAN]
    if not known:
        return UNKNOWN_SPAN
    return min(s[0] for s in known), max(s[1] for s in known)


def untokenize(tokens: list[Token]) -> str:
    parts = []
    for t in tokens:
        if t.sub is None:
            parts.append(t.lexeme)
        elif t.sub.method is Method.ABSOLUTE_VALUE:
            parts.append("[" + untokenize(t.sub.tokens) + "]")
        else:
            parts.append("(" + untokenize(t.sub.tokens) + ")")
    result = " ".join(parts)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"([(\[])\s+", r"\1", result)
    result = re.sub(r"\s+([)\]])", r"\1", result)

    # 5 ! => 5!, sqrt (16) => sqrt(16)
    result = re.sub(r"\s+!", "!", result)
    result = re.sub(r"([A-Za-z])\s+\(", r"\1(", result)
    return result


def format_tree(sub: Sub, depth: int = 0) -> str:
    lines = []
    indent = "  " * depth
    for t in sub.tokens:
        if t.sub is not None:
            lines.append(f"{indent}{t.type} -> {{{t.sub.method}}}")
            lines.append(format_tree(t.sub, depth + 1))
        else:
            lines.append(f"{indent}{t.type}({t.lexeme})")
    return "\n".join(line for line in lines if line)
