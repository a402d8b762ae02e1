from __future__ import annotations

import sys
from pathlib import Path

import pytest

# The package lives under ./app; add it to sys.path for tests.
REPO_ROOT = Path(__file__).resolve().parents[1]
APP_ROOT = REPO_ROOT / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from urikit.domain import Domain  # noqa: E402
from urikit.errors import UriSyntaxError  # noqa: E402
from urikit.host import Host  # noqa: E402
from urikit.uri import Uri  # noqa: E402


class TestDomain:
    @pytest.mark.parametrize("value", ["127.0.0.1", "[::1]", "a..b", "", None])
    def test_rejects_non_domain_hosts(self, value):
        with pytest.raises(UriSyntaxError) as excinfo:
            Domain(value)
        assert excinfo.value.code == "invalid_domain"

    def test_accessors(self):
        domain = Domain("www.example.com")
        assert domain.value == "www.example.com"
        assert domain.labels == ("com", "example", "www")
        assert domain.get(0) == "com"
        assert domain.get(-1) == "www"
        assert domain.get(10, "missing") == "missing"
        assert domain.keys("www") == [2]
        assert len(domain) == 3
        assert list(domain) == ["com", "example", "www"]
        assert domain.host == Host("www.example.com")

    def test_factories(self):
        assert Domain.from_labels(["com", "example"]).value == "example.com"
        assert Domain.from_host(Host("example.com")).value == "example.com"
        assert Domain.from_uri(Uri("http://bébé.be/path")).value == "bébé.be"

    def test_edits_return_domains(self):
        domain = Domain("example.com")
        assert domain.prepend("www") == Domain("www.example.com")
        assert domain.append("fr").value == "example.com.fr"
        assert domain.with_label(0, "org").value == "example.org"
        assert domain.without_label(1).value == "com"
        assert domain.with_root_label().is_absolute
        assert domain.with_root_label().without_root_label() == domain

    def test_no_op_returns_same_instance(self):
        domain = Domain("example.com")
        assert domain.prepend(None) is domain
        assert domain.without_label() is domain

    def test_removing_every_label_fails(self):
        with pytest.raises(UriSyntaxError):
            Domain("example.com").without_label(0, 1)

    def test_slice(self):
        domain = Domain("shop.www.example.com")
        assert domain.slice(0, 2).value == "example.com"
        assert domain.slice(1).value == "shop.www.example"
        assert domain.slice(-2).value == "shop.www"
        assert domain.slice(0) is domain

    def test_idna(self):
        domain = Domain("bébé.be")
        assert domain.to_ascii() == "xn--bb-bjab.be"
        assert Domain(domain.to_ascii()).to_unicode() == "bébé.be"

    def test_idna_forms_compare_equal(self):
        assert Domain("bébé.be") == Domain("xn--bb-bjab.be")
