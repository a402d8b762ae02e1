from __future__ import annotations

import sys
from pathlib import Path

import pytest

# The package lives under ./app; add it to sys.path for tests.
REPO_ROOT = Path(__file__).resolve().parents[1]
APP_ROOT = REPO_ROOT / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from urikit.authority import Authority  # noqa: E402
from urikit.errors import UriSyntaxError  # noqa: E402
from urikit.host import Host  # noqa: E402
from urikit.uri import Uri  # noqa: E402


class TestAuthority:
    def test_parse_full_authority(self):
        authority = Authority("user:pass@www.example.com:8042")
        assert authority.userinfo == "user:pass"
        assert authority.user == "user"
        assert authority.password == "pass"
        assert authority.host == Host("www.example.com")
        assert authority.port == 8042
        assert authority.value == "user:pass@www.example.com:8042"

    def test_parse_bracketed_host(self):
        authority = Authority("[fe80::1%25eth0]:443")
        assert authority.host.is_ipv6
        assert authority.port == 443

    def test_userinfo_without_password(self):
        authority = Authority("user@example.com")
        assert authority.user == "user"
        assert authority.password is None

    def test_empty_port_is_dropped(self):
        assert Authority("example.com:").port is None
        assert Authority("example.com:").value == "example.com"

    def test_userinfo_is_normalized(self):
        assert Authority("us%65r%3Ax:p%40ss@example.com").userinfo == "user%3Ax:p%40ss"
        assert Authority("us er@example.com").userinfo == "us%20er"

    @pytest.mark.parametrize("value", ["example.com:65536", "example.com:port", "example.com:-1"])
    def test_invalid_port(self, value):
        with pytest.raises(UriSyntaxError) as excinfo:
            Authority(value)
        assert excinfo.value.code == "invalid_port"

    def test_invalid_bracketed_host(self):
        with pytest.raises(UriSyntaxError):
            Authority("[::1]x")

    def test_from_components(self):
        authority = Authority.from_components("example.com", "user", 80)
        assert authority.value == "user@example.com:80"
        assert Authority.from_components(None).value == ""

    def test_from_uri(self):
        assert Authority.from_uri(Uri("http://example.com:81/")).port == 81
        assert Authority.from_uri(Uri("/path")) is None

    def test_withers(self):
        authority = Authority("user@example.com:80")
        assert authority.with_host("example.org").value == "user@example.org:80"
        assert authority.with_userinfo("john", "s:ecret").value == "john:s:ecret@example.com:80"
        assert authority.with_userinfo(None).value == "example.com:80"
        assert authority.with_port(None).value == "user@example.com"
        assert authority.with_port(80) is authority
        assert authority.with_userinfo("user") is authority
