"""Splitting of a command line into arguments, honouring quotes and escapes."""

ESCAPE = "\\"
SINGLE_QUOTE = "'"
DOUBLE_QUOTE = '"'
BACK_QUOTE = "`"

_QUOTES = frozenset((SINGLE_QUOTE, DOUBLE_QUOTE, BACK_QUOTE))
_NOT_SPACE = frozenset("\x1c\x1d\x1e\x1f")


def is_quote(char: str) -> bool:
    """Return True for a single, double or back quote."""
    return char in _QUOTES


def _is_space(char: str) -> bool:
    return char.isspace() and char not in _NOT_SPACE


def parse(line: str) -> list[str]:
    """Split ``line`` into arguments.

    Quotes group text (the quote characters themselves are dropped), a
    backslash escapes whitespace, quotes and itself, and any other backslash
    is kept as is. Text after an unclosed quote is discarded.
    """
    text = line + " "
    last = len(text) - 1
    args: list[str] = []
    buf: list[str] = []
    quote = ""
    escaped = False
    inside = False

    for pos, char in enumerate(text):
        space = _is_space(char)
        if not space and not inside:
            inside = True

        if escaped:
            escaped = False
        elif char == ESCAPE:
            # Only escape when the next character is not the trailing sentinel.
            if pos + 1 < last:
                following = text[pos + 1]
                if _is_space(following) or is_quote(following) or following == ESCAPE:
                    escaped = True
                    continue
        elif is_quote(char):
            if not quote:
                quote = char
                continue
            if quote == char:
                quote = ""
                continue
        elif space:
            if not inside:
                continue
            if not quote:
                args.append("".join(buf))
                buf.clear()
                inside = False
                continue

        buf.append(char)

    return args