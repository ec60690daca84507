"""Tokenizer for the parameter list of an ``Authorization: Digest`` header.

The grammar accepted here is the subset clients actually send::

    username="Mary", realm="test", nc=00000001, uri="/a?x=1,2"

Parameters are separated by commas that sit outside double quotes. Each
parameter is ``name=value`` with the value either bare or double-quoted.
Anything else is ignored.
"""

from __future__ import annotations

import functools
import re


@functools.lru_cache(maxsize=1)
def _param_pattern() -> re.Pattern[str]:
    return re.compile(r'^(\w+)=(?:"([^"]+)"|([^"]+))$')


def split_params(value: str) -> list[str]:
    """Split on commas outside quoted strings and strip each token.

    A comma separates tokens only when an even number of ``"`` characters
    follows it, so the rest of the string holds balanced quotes.
    """
    quotes_after = value.count('"')
    tokens: list[str] = []
    start = 0
    for index, char in enumerate(value):
        if char == '"':
            quotes_after -= 1
        elif char == "," and quotes_after % 2 == 0:
            tokens.append(value[start:index].strip())
            start = index + 1
    tokens.append(value[start:].strip())
    return tokens


def parse_digest_params(value: str) -> dict[str, str]:
    """Parse the text after ``Digest `` into a name -> value mapping.

    Quoted values have their quotes removed. Tokens that are not
    ``name=value`` (including ones with unbalanced quotes) are dropped and
    the last occurrence of a repeated name wins.

    Args:
        value: Header value with the scheme token removed.

    Returns:
        The parsed parameters; empty when nothing matched.
    """
    if not value or not value.strip():
        return {}

    param = _param_pattern()
    result: dict[str, str] = {}
    for token in split_params(value):
        match = param.match(token)
        if match is None:
            continue
        name, quoted, bare = match.groups()
        result[name] = quoted if quoted is not None else bare
    return result
