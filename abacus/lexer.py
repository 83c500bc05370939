import logging

from abacus.combiner import break_nesting, combine_tokens
from abacus.errors import TooDeeplyNested
from abacus.nester import nest
from abacus.scanner import scan
from abacus.tokens import Sub, untokenize

logger = logging.getLogger(__name__)


def lex(code: str) -> Sub:
    tokens = scan(code)
    try:
        sub = combine_tokens(break_nesting(0, nest(tokens, code), code))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Lexed %r as %s", code, untokenize(sub.tokens))
    except RecursionError:
        raise TooDeeplyNested(code=code) from None
    return sub
