"""
Tokenizer — Splits a command line into tokens

Rules:
- Spaces and tabs delimit tokens outside quotes
- 'single' and "double" quotes group text; the quote chars are stripped
- Inside quotes, a backslash escapes the active quote char or a backslash;
  before anything else it is kept literally
- A quote that is never closed raises UnclosedQuoteError

Examples:
    >>> tokenize("add-child --text 'Buy milk'")
    ['add-child', '--text', 'Buy milk']
    >>> tokenize('say "a \\\\"quoted\\\\" word"')
    ['say', 'a "quoted" word']
"""

from typing import List

from .errors import UnclosedQuoteError


QUOTE_CHARS = ('"', "'")
WHITESPACE = (' ', '\t')
ESCAPE = '\\'


def tokenize(text: str) -> List[str]:
    """
    Split a raw command line into tokens.

    Args:
        text: Raw input line

    Returns:
        List of tokens with quotes removed

    Raises:
        UnclosedQuoteError: If a quote is opened and never closed
    """
    tokens: List[str] = []
    current: List[str] = []
    quote = ''
    i = 0
    length = len(text)

    while i < length:
        char = text[i]

        if not quote:
            if char in QUOTE_CHARS:
                quote = char
            elif char in WHITESPACE:
                if current:
                    tokens.append(''.join(current))
                    current = []
            else:
                current.append(char)
        elif char == quote:
            quote = ''
        elif char == ESCAPE and i + 1 < length and text[i + 1] in (quote, ESCAPE):
            current.append(text[i + 1])
            i += 1
        else:
            current.append(char)

        i += 1

    if quote:
        raise UnclosedQuoteError(quote)

    if current:
        tokens.append(''.join(current))

    return tokens
