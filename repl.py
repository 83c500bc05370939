import logging
import os

from abacus.environment import Environment
from abacus.errors import CalcError, TooDeeplyNested
from abacus.lexer import lex
from abacus.runtime import evaluate
from abacus.tokens import format_tree

DEFAULT_LOG_LEVEL = logging.WARNING


def log_level(name: str | None) -> int:
    """Resolves a level name like ``debug``, unknown names fall back to WARNING"""
    if not name:
        return DEFAULT_LOG_LEVEL
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


logging.basicConfig(
    level=log_level(os.environ.get("ABACUS_LOG_LEVEL")),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


if __name__ == "__main__":
    env = Environment()

    while True:
        try:
            code = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not code:
            continue
        elif code in ("quit", "exit"):
            break
        elif code == "vars":
            for name in sorted(env.names()):
                print(f"{name} = {env.get(name)}")
            continue
        elif code == "clear":
            env.clear()
            continue

        try:
            if code.startswith("tokens "):
                expr = code[len("tokens ") :]
                try:
                    print(format_tree(lex(expr)))
                except RecursionError:
                    raise TooDeeplyNested(code=expr) from None
                continue
            sub = lex(code)
            result = evaluate(sub, code, env)
        except CalcError as e:
            print(e)
            continue

        print(result)
