import math
import random
import re
import string
import warnings

from abacus.errors import CalcError
from abacus.runtime import calculate

warnings.filterwarnings("ignore")


def to_python(code: str) -> str:
    """[2 - 5] ^ 2 % 3 => abs(2 - 5) ** 2 /100* 3"""
    return code.replace("[", "abs(").replace("]", ")").replace("^", "**").replace("%", "/100*")


def eval_py(code: str) -> float | str:
    try:
        return float(eval(to_python(code)))
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str:
    try:
        return calculate(code)
    except CalcError as e:
        return str(e)


if __name__ == "__main__":
    # no "!": python has no factorial operator
    alphabet = string.digits + ".()[]+-*/%^ "

    def generate(length: int) -> str:
        return "".join(random.choices(alphabet, k=length))

    while True:
        code = generate(10)

        if re.findall(r"\*\s*\*", code):
            continue  # avoid generating python powers (10**4)

        if re.findall(r"/\s*/", code):
            continue  # avoid generating int devision (10 // 3)

        if re.findall(r"[\d.]\s+[\d.]", code):
            continue  # spaces inside a number run are ignored here (1 2 == 12)

        if re.findall(r"[\d.)\]]\s*[(\[]|[)\]]\s*[\d.]", code):
            continue  # implicit multiplication (2(3) == 6)

        if re.findall(r"\^[^^]*\^|\^\D*\d{4,}", code):
            continue  # huge integer powers (9 ^ 9 ^ 9)

        if re.findall(r"(?:^|[^\d.)\]\s])\s*[+-]\s*[\d.]+\s*\^", code):
            continue  # signed literal as power base (-2 ^ 2 == 4, python gives -4)

        res_py = eval_py(code)
        res_my = eval_my(code)
        if isinstance(res_py, float) and isinstance(res_my, float) and math.isclose(res_my, res_py):
            continue
        if isinstance(res_py, str) and isinstance(res_my, str):
            continue
        if isinstance(res_py, str) and isinstance(res_my, float) and not math.isfinite(res_my):
            continue  # python raises where IEEE gives inf or nan (0 ** -1, (-8) ** 0.5)
        if isinstance(res_py, str) and res_py.startswith("leading zeros in decimal integer literals are not permitted"):
            continue
        print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")
