import math
from dataclasses import dataclass
from typing import Callable, Optional

from abacus.errors import FactorialDomainError, FunctionDomainError

MAX_FACTORIAL = 170


@dataclass
class BuiltinFunc:
    name: str
    fn: Callable[[float], Optional[float]]

    def __call__(self, arg: float, code: str = "", position: Optional[int] = None) -> float:
        maybe_res = self.fn(arg)
        if maybe_res is None:
            raise FunctionDomainError(
                f"{self.name!r} is not defined for {arg}", code=code, position=position, value=arg
            )
        else:
            return maybe_res


BUILTIN_FUNCS: dict[str, BuiltinFunc] = dict()


def register_builtin_func(name: str):
    def decorator(fn: Callable[[float], Optional[float]]) -> BuiltinFunc:
        BUILTIN_FUNCS[name] = BuiltinFunc(name=name, fn=fn)
        return BUILTIN_FUNCS[name]

    return decorator


@register_builtin_func("sqrt")
def sqrt_(arg: float) -> float | None:
    if arg < 0:
        return None
    else:
        return math.sqrt(arg)


# sin(inf) is NaN rather than a ValueError
@register_builtin_func("sin")
def sin_(arg: float) -> float:
    return math.sin(arg) if math.isfinite(arg) else math.nan


@register_builtin_func("cos")
def cos_(arg: float) -> float:
    return math.cos(arg) if math.isfinite(arg) else math.nan


@register_builtin_func("tan")
def tan_(arg: float) -> float:
    return math.tan(arg) if math.isfinite(arg) else math.nan


@register_builtin_func("log")
def log_(arg: float) -> float | None:
    if arg <= 0:
        return None
    else:
        return math.log10(arg)


@register_builtin_func("ln")
def ln_(arg: float) -> float | None:
    if arg <= 0:
        return None
    else:
        return math.log(arg)


@register_builtin_func("exp")
def exp_(arg: float) -> float:
    try:
        return math.exp(arg)
    except OverflowError:
        return math.inf


@register_builtin_func("floor")
def floor_(arg: float) -> float:
    return float(math.floor(arg)) if math.isfinite(arg) else arg


@register_builtin_func("ceil")
def ceil_(arg: float) -> float:
    return float(math.ceil(arg)) if math.isfinite(arg) else arg


@register_builtin_func("round")
def round_(arg: float) -> float:
    """Rounds half away from zero: round(2.5) == 3, round(-2.5) == -3"""
    if not math.isfinite(arg):
        return arg
    magnitude = math.floor(abs(arg))
    if abs(arg) - magnitude >= 0.5:
        magnitude += 1
    return math.copysign(magnitude, arg)


def factorial(n: float, code: str = "", position: Optional[int] = None) -> float:
    if n < 0:
        raise FactorialDomainError(
            f"Factorial is not defined for negative numbers: {n}", code=code, position=position, value=n
        )
    if not float(n).is_integer():
        raise FactorialDomainError(
            f"Factorial is only defined for integers: {n}", code=code, position=position, value=n
        )
    if n > MAX_FACTORIAL:
        raise FactorialDomainError(
            f"Factorial of {n:g} is too large to compute", code=code, position=position, value=n
        )

    result = 1.0
    for i in range(2, int(n) + 1):
        result *= i
    return result
