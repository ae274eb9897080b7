"""
Full request/response tests against a local HTTP server.
"""

import io

import pytest

from simplehttp import (
    JsonEntityReader,
    JsonEntityWriter,
    ResponseStatusError,
    SimpleHttpClient,
    StringEntityReader,
    StringEntityWriter,
)


@pytest.fixture
def client(local_server) -> SimpleHttpClient:
    """Client targeting the local server."""
    return SimpleHttpClient().set_target(local_server.target)


class TestVerbs:
    """Tests for GET, POST, PUT and DELETE."""

    def test_get_with_path_and_query(self, client, local_server):
        """Test that path and query reach the server."""
        with client.path("a").path("b").query_param("q", "1").get() as response:
            echo = response.read_entity(JsonEntityReader())

        assert echo["method"] == "GET"
        assert echo["path"] == "/a/b?q=1"
        assert local_server.hits == ["GET /a/b?q=1"]

    def test_headers_and_basic_auth_sent(self, client):
        """Test that configured headers arrive."""
        client.header("Accept", "application/json").set_basic_auth("user:pass")

        with client.get() as response:
            headers = response.read_entity(JsonEntityReader())["headers"]

        assert headers["accept"] == "application/json"
        assert headers["authorization"] == "Basic dXNlcjpwYXNz"
        assert headers["cache-control"] == "no-cache"
        assert headers["pragma"] == "no-cache"

    def test_post_json(self, client):
        """Test a POST with a JSON body."""
        client.path("users").header("Content-Type", "application/json")

        with client.post(JsonEntityWriter({"name": "alice"})) as response:
            assert response.get_response_code() == 200
            echo = response.read_entity(JsonEntityReader())

        assert echo["method"] == "POST"
        assert echo["body"] == '{"name":"alice"}'
        assert echo["headers"]["content-type"] == "application/json"

    def test_post_without_writer(self, client):
        """Test that a POST without a writer sends an empty body."""
        with client.post() as response:
            echo = response.read_entity(JsonEntityReader())

        assert echo["method"] == "POST"
        assert echo["body"] == ""

    def test_put(self, client):
        with client.path("users").path("1").put(StringEntityWriter("updated")) as response:
            echo = response.read_entity(JsonEntityReader())

        assert echo["method"] == "PUT"
        assert echo["path"] == "/users/1"
        assert echo["body"] == "updated"

    def test_delete(self, client, local_server):
        with client.path("users").path("1").delete() as response:
            assert response.is_success()

        assert local_server.hits == ["DELETE /users/1"]

    def test_status_known_after_verb(self, client, local_server):
        """Test that the verb itself sends the request."""
        response = client.path("ping").get()

        assert local_server.hits == ["GET /ping"]
        assert response.get_connection().transmissions == 1
        response.disconnect()

    def test_client_reusable(self, client, local_server):
        """Test that one client can issue several requests."""
        client.path("things")
        client.get().disconnect()
        client.delete().disconnect()

        assert local_server.hits == ["GET /things", "DELETE /things"]


class TestResponseBodies:
    """Tests for reading bodies."""

    def test_get_text_response(self, client):
        """Test the lines helper."""
        assert client.path("lines").get_text_response() == ["one", "two", "three"]

    def test_copy_declared_charset(self, client):
        """Test copying an ISO-8859-1 body as UTF-8."""
        out = io.BytesIO()

        with client.path("latin1").get() as response:
            response.copy_to_stream(out)

        assert out.getvalue() == "café".encode("utf-8")

    def test_copy_default_charset(self, client):
        out = io.StringIO()

        with client.path("utf8").get() as response:
            response.copy_to_stream(out)

        assert out.getvalue() == "café"

    def test_copy_binary(self, client):
        """Test a byte-exact copy of a binary body."""
        out = io.BytesIO()

        with client.path("binary").get() as response:
            response.copy_to_stream(out)

        assert out.getvalue() == bytes(range(256))

    def test_redirect_followed(self, client, local_server):
        """Test that a redirect ends at the final resource."""
        out = io.BytesIO()

        with client.path("redirect").get() as response:
            assert response.get_response_code() == 200
            response.copy_to_stream(out)

        assert out.getvalue() == "café".encode("utf-8")
        assert local_server.hits == ["GET /redirect", "GET /latin1"]

    def test_not_modified(self, client):
        """Test that a 304 is read as an empty body, not an error."""
        out = io.BytesIO()

        with client.path("not-modified").get() as response:
            assert response.get_response_code() == 304
            response.copy_to_stream(out)

        assert out.getvalue() == b""

    def test_multiple_choices_body(self, client):
        with client.path("choices").get() as response:
            assert response.read_entity(StringEntityReader()) == ["pick one"]

    def test_post_answered_with_temporary_redirect(self, client, local_server):
        """Test that a 307 after POST is returned as is."""
        out = io.StringIO()

        with client.path("moved").post(StringEntityWriter("data")) as response:
            assert response.get_response_code() == 307
            assert response.get_header("Location") == "/latin1"
            response.copy_to_stream(out)

        assert out.getvalue() == "moved"
        assert local_server.hits == ["POST /moved"]


class TestFailures:
    """Tests for error statuses and transport failures."""

    def test_error_status_does_not_raise_on_verb(self, client):
        """Test that a 400 is reported through the status code."""
        with client.path("bad").get() as response:
            assert response.get_response_code() == 400
            assert not response.is_success()

    def test_error_body_enriches_read(self, client):
        """Test that the server's error text is in the raised error."""
        with client.path("bad").get() as response:
            with pytest.raises(OSError) as exc_info:
                response.read_entity(StringEntityReader())

        assert "400" in str(exc_info.value)
        assert "bad request" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ResponseStatusError)

    def test_empty_error_body(self, client):
        """Test the original status error when the error body is empty."""
        with client.path("empty-error").get() as response:
            with pytest.raises(ResponseStatusError) as exc_info:
                response.get_input_stream()

        assert exc_info.value.status_code == 500

    def test_get_text_response_error(self, client):
        with pytest.raises(OSError, match="bad request"):
            client.path("bad").get_text_response()

    def test_connection_refused(self, free_port):
        """Test that an unreachable server raises an OSError."""
        client = SimpleHttpClient().set_target(f"http://127.0.0.1:{free_port}")

        with pytest.raises(OSError):
            client.get()

    def test_timeout(self, client):
        """Test that a slow server trips the timeout."""
        client.path("slow").set_timeout(200)

        with pytest.raises(OSError):
            client.get()
