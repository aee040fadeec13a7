import re

from .errors import ResponseParseError

# Fields whose values are free text and keep their commas.
UNSPLIT_KEYS = frozenset({"promotion", "sms", "info_txt"})

_LINE_BREAK = re.compile(r"\r?\n")


def txt_to_dict(txt: str) -> dict[str, str | list[str]]:
    """Parse a provider response body into a dictionary.

    Each line has the form ``key=value``. The line is split on the first ``=``
    only, and one trailing comma is dropped. Values that contain commas become
    lists, except for the keys in ``UNSPLIT_KEYS``. If a key repeats, the last
    line wins.
    """
    body = txt.strip()
    if not body:
        raise ResponseParseError("Empty response body")

    out: dict[str, str | list[str]] = {}
    for number, raw_line in enumerate(_LINE_BREAK.split(body), start=1):
        line = raw_line.strip()
        if not line:
            continue
        if line.endswith(","):
            line = line[:-1]
        key, sep, value = line.partition("=")
        if not sep:
            raise ResponseParseError(
                f"Malformed response line {number}: {line!r}", line_number=number, line=line
            )
        if "," in value and key not in UNSPLIT_KEYS:
            out[key] = value.split(",")
        else:
            out[key] = value
    return out
