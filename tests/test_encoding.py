from __future__ import annotations

import sys
from pathlib import Path

# The package lives under ./app; add it to sys.path for tests.
REPO_ROOT = Path(__file__).resolve().parents[1]
APP_ROOT = REPO_ROOT / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from urikit.encoding import (  # noqa: E402
    PATH_SAFE,
    decode,
    encode,
    has_control_chars,
    normalize_decoded,
    normalize_encoded,
)


def test_encode_uses_uppercase_hex_and_keeps_unreserved():
    assert encode("a b~c") == "a%20b~c"
    assert encode("é") == "%C3%A9"
    assert encode("<>") == "%3C%3E"


def test_encode_never_double_encodes():
    assert encode("foo%2fbar") == "foo%2Fbar"
    assert encode("100%25") == "100%25"


def test_encode_escapes_stray_percent():
    assert encode("50%") == "50%25"
    assert encode("%zz") == "%25zz"


def test_encode_without_keeping_escapes():
    assert encode("%41", keep_encoded=False) == "%2541"


def test_encode_respects_safe_characters():
    assert encode("a:b@c", PATH_SAFE) == "a:b@c"
    assert encode("a:b@c") == "a%3Ab%40c"


def test_decode_multibyte_runs():
    assert decode("b%C3%A9b%C3%A9") == "bébé"


def test_decode_keeps_invalid_utf8_encoded():
    assert decode("%ff%41") == "%FF%41"


def test_decode_surrogateescape_round_trips_through_encode():
    decoded = decode("%FF", errors="surrogateescape")
    assert decoded == "\udcff"
    assert encode(decoded) == "%FF"


def test_decode_preserves_requested_characters():
    assert decode("a%2Fb%20c", preserve="/") == "a%2Fb c"


def test_normalize_decoded_and_encoded():
    assert normalize_decoded("a%2fb c", PATH_SAFE + "/", preserve="%/") == "a%2Fb c"
    assert normalize_encoded("%7euser%3Ax", ":") == "~user%3Ax"


def test_has_control_chars():
    assert has_control_chars("a\x00b")
    assert has_control_chars("tab\there")
    assert not has_control_chars("plain")
    assert not has_control_chars("")
