from dataclasses import dataclass
from typing import ClassVar, Optional

WINDOW = 10


@dataclass
class CalcError(Exception):
    errmsg: str
    code: str = ""
    position: Optional[int] = None

    kind: ClassVar[str] = "Calculator error"

    def __str__(self) -> str:
        header = f"[{self.kind}] {self.errmsg}"
        if self.position is None or not self.code:
            return header

        error_char_idx = min(max(self.position, 0), len(self.code))
        print_start_idx = max(0, error_char_idx - WINDOW)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.code), error_char_idx + WINDOW)
        print_ellipsis_post = print_end_idx < len(self.code)
        return "\n".join(
            [
                header,
                (
                    ("..." if print_ellipsis_pre else "")
                    + f"{self.code[print_start_idx:print_end_idx]}"
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


class LexError(CalcError):
    kind = "Lexer error"


class EvalError(CalcError):
    kind = "Evaluation error"


@dataclass
class EmptyInput(LexError):
    errmsg: str = "Empty input"


@dataclass
class MismatchedParentheses(LexError):
    errmsg: str = "Mismatched parentheses"


@dataclass
class TooDeeplyNested(LexError, EvalError):
    errmsg: str = "Expression is too deeply nested"

    kind = "Nesting error"


@dataclass
class EmptyTokens(EvalError):
    errmsg: str = "Nothing to evaluate"


@dataclass
class IllegalToken(EvalError):
    literal: str = ""


@dataclass
class CannotParseNumber(EvalError):
    literal: str = ""


@dataclass
class InvalidOrder(EvalError):
    errmsg: str = "Operators and operands are in invalid order"


@dataclass
class MissingTokens(EvalError):
    errmsg: str = "Expression ended unexpectedly"


@dataclass
class DivisionByZero(EvalError):
    errmsg: str = "Division by zero"


@dataclass
class UndefinedVariable(EvalError):
    name: str = ""


@dataclass
class FactorialDomainError(EvalError):
    value: float = 0.0


@dataclass
class FunctionDomainError(EvalError):
    value: float = 0.0
