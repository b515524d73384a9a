"""
Unit tests for the HTTP request model.
"""

from httpguard.http import HTTPRequest, REMOTE_ADDR


class TestHTTPRequest:
    """Tests for HTTPRequest class."""

    def test_defaults(self):
        """Test a bare request."""
        request = HTTPRequest()

        assert request.method == "GET"
        assert request.path == "/"
        assert request.accept is None
        assert request.remote_addr is None

    def test_case_insensitive_headers(self):
        """Test header names are normalized to lowercase."""
        request = HTTPRequest(headers={"Accept": "text/html", "User-Agent": "pytest"})

        assert request.headers == {"accept": "text/html", "user-agent": "pytest"}
        assert request.get_header("ACCEPT") == "text/html"
        assert request.accept == "text/html"
        assert request.get_header("User-Agent") == "pytest"

    def test_accept_multiple_values(self):
        """Test an Accept header given as several lines is joined."""
        request = HTTPRequest(headers={"Accept": ["text/html", "application/json;q=0.9"]})

        assert request.accept == "text/html, application/json;q=0.9"

    def test_get_header_default(self):
        """Test default for a missing header."""
        request = HTTPRequest()

        assert request.get_header("X-Missing") == ""
        assert request.get_header("X-Missing", "fallback") == "fallback"

    def test_remote_addr_from_client_address(self):
        """Test REMOTE_ADDR and REMOTE_PORT are filled from the peer."""
        request = HTTPRequest(client_address=("10.0.0.7", 40000))

        assert request.server_params[REMOTE_ADDR] == "10.0.0.7"
        assert request.server_params["REMOTE_PORT"] == "40000"
        assert request.remote_addr == "10.0.0.7"

    def test_explicit_remote_addr_wins(self):
        """Test an explicit server param is not overwritten."""
        request = HTTPRequest(
            client_address=("10.0.0.7", 40000),
            server_params={REMOTE_ADDR: "192.168.1.1"},
        )

        assert request.get_server_param(REMOTE_ADDR) == "192.168.1.1"

    def test_empty_remote_addr(self):
        """Test an empty REMOTE_ADDR reads as unknown."""
        assert HTTPRequest(server_params={REMOTE_ADDR: ""}).remote_addr is None


class TestRequestAttributes:
    """Tests for request attributes."""

    def test_get_attribute_default(self):
        """Test default for a missing attribute."""
        request = HTTPRequest()

        assert request.get_attribute("client_ip") is None
        assert request.get_attribute("client_ip", "n/a") == "n/a"

    def test_with_attribute_returns_copy(self):
        """Test with_attribute leaves the original untouched."""
        original = HTTPRequest(path="/admin")
        updated = original.with_attribute("client_ip", "1.1.1.1")

        assert updated.get_attribute("client_ip") == "1.1.1.1"
        assert original.get_attribute("client_ip") is None
        assert updated.path == "/admin"

    def test_without_attribute(self):
        """Test removing an attribute."""
        request = HTTPRequest(attributes={"a": 1, "b": 2}).without_attribute("a")

        assert request.attributes == {"b": 2}
