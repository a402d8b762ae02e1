"""Percent-encoding primitives shared by every URI component.

encode() never double-encodes: a well-formed ``%XX`` triple already present in
the input is kept (hex digits uppercased) unless ``keep_encoded`` is False.
decode() works on runs of triples so multi-byte UTF-8 sequences decode as a
unit; runs that are not valid UTF-8 stay encoded.
"""

from __future__ import annotations

import re
import string

UNRESERVED = frozenset(string.ascii_letters + string.digits + "-._~")
SUB_DELIMS = "!$&'()*+,;="
GEN_DELIMS = ":/?#[]@"

PATH_SAFE = SUB_DELIMS + ":@"
QUERY_SAFE = SUB_DELIMS + ":@/?"
FRAGMENT_SAFE = SUB_DELIMS + ":@/?"
USERINFO_SAFE = SUB_DELIMS + ":"

_PCT_RE = re.compile(r"%([0-9A-Fa-f]{2})")
_PCT_RUN_RE = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def has_control_chars(value: str) -> bool:
    return bool(_CONTROL_RE.search(value or ""))


def _escape(ch: str) -> str:
    # lone surrogates come from decode(..., errors="surrogateescape")
    if "\udc80" <= ch <= "\udcff":
        return f"%{ord(ch) - 0xDC00:02X}"
    return "".join(f"%{b:02X}" for b in ch.encode("utf-8", "surrogatepass"))


def encode(value: str, safe: str = "", *, keep_encoded: bool = True) -> str:
    out: list[str] = []
    i = 0
    n = len(value)
    while i < n:
        ch = value[i]
        if ch == "%" and keep_encoded and _PCT_RE.match(value, i):
            out.append(value[i : i + 3].upper())
            i += 3
            continue
        if ch in UNRESERVED or (ch.isascii() and ch in safe):
            out.append(ch)
        else:
            out.append(_escape(ch))
        i += 1
    return "".join(out)


def decode(value: str, preserve: str = "", *, errors: str = "strict") -> str:
    """Percent-decode ``value``, re-escaping any decoded character in ``preserve``.

    With the default ``errors`` a run that is not valid UTF-8 stays encoded;
    ``surrogateescape`` decodes it to lone surrogates that encode() restores.
    """

    def repl(match: re.Match[str]) -> str:
        run = match.group(0)
        raw = bytes(int(run[k + 1 : k + 3], 16) for k in range(0, len(run), 3))
        if errors != "strict":
            text = raw.decode("utf-8", errors)
        else:
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError:
                return run.upper()
        if not preserve:
            return text
        return "".join(_escape(c) if c in preserve else c for c in text)

    return _PCT_RUN_RE.sub(repl, value or "")


def normalize_decoded(value: str, safe: str, preserve: str) -> str:
    """Decoded form of ``value`` that survives an encode/decode round trip."""
    return decode(encode(value, safe), preserve)


def normalize_encoded(value: str, safe: str) -> str:
    """Canonical encoded form: reserved escapes kept (uppercased), the rest decoded."""
    return encode(decode(value, preserve="%" + GEN_DELIMS + SUB_DELIMS), safe)
