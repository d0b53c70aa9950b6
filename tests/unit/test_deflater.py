"""
Unit tests for the Deflater engine and the Brotli application wrapper.
"""
import pytest

from brotliware import Brotli, Deflater, release, __version__
from brotliware.codec import decompress
from brotliware.exceptions import ConfigurationError
from brotliware.instrument import EVENT_NAME, Instrument
from brotliware.stream import BrotliStream

MESSAGE = "An acceptable encoding for the requested resource {} could not be found."


def body_bytes(body) -> bytes:
    return b"".join(body)


class TestDeflaterConfiguration:
    """Construction-time validation."""

    def test_defaults(self):
        deflater = Deflater()
        assert deflater.condition is None
        assert deflater.compressible_types is None
        assert deflater.deflater_options.quality == 5
        assert isinstance(deflater.notifier, Instrument)

    def test_deflater_overrides(self):
        assert Deflater(deflater={"quality": 9}).deflater_options.quality == 9

    def test_include_is_frozen(self):
        deflater = Deflater(include=["text/html", "application/json"])
        assert deflater.compressible_types == frozenset(["text/html", "application/json"])

    @pytest.mark.parametrize(
        "options",
        [
            {"condition": "not callable"},
            {"include": "text/html"},
            {"include": 42},
            {"deflater": {"quality": 99}},
            {"notifier": object()},
            {"codec": None},
        ],
    )
    def test_malformed_options(self, options):
        with pytest.raises(ConfigurationError):
            Deflater(**options)

    def test_unknown_option(self):
        with pytest.raises(TypeError):
            Deflater(minimum_size=10)


class TestDeflaterProcess:
    """Test cases for Deflater.process."""

    def test_compresses_eligible_response(self, make_request, text_headers):
        status, headers, body = Deflater().process(
            make_request(), 200, text_headers, [b"hello world"]
        )
        assert status == 200
        assert headers["content-encoding"] == "br"
        assert "content-length" not in headers
        assert "Accept-Encoding" in headers["vary"].split(",")
        assert headers["content-type"] == "text/plain"
        assert isinstance(body, BrotliStream)
        assert decompress(body_bytes(body)) == b"hello world"

    def test_original_headers_left_untouched(self, make_request, text_headers):
        original = dict(text_headers)
        Deflater().process(make_request(), 200, text_headers, [b"hello world"])
        assert text_headers == original

    def test_vary_is_merged(self, make_request):
        _, headers, _ = Deflater().process(
            make_request(), 200, {"Content-Type": "text/plain", "Vary": "Cookie"}, [b"x"]
        )
        assert headers["vary"] == "Cookie,Accept-Encoding"

    def test_vary_wildcard_is_kept(self, make_request):
        _, headers, _ = Deflater().process(
            make_request(), 200, {"Content-Type": "text/plain", "Vary": "*"}, [b"x"]
        )
        assert headers["vary"] == "*"

    @pytest.mark.parametrize(
        "status,headers",
        [
            (204, {}),
            (304, {"ETag": '"abc"'}),
            (101, {}),
            (200, {"Content-Type": "text/plain", "Cache-Control": "no-transform"}),
            (200, {"Content-Type": "text/plain", "Content-Encoding": "gzip"}),
            (200, {"Content-Type": "text/plain", "Content-Length": "0"}),
        ],
    )
    def test_pass_through_returns_original_objects(self, make_request, status, headers):
        body = [b"hello world"]
        result = Deflater().process(make_request(), status, headers, body)
        assert result[0] == status
        assert result[1] is headers
        assert result[2] is body
        assert headers.get("Content-Encoding") in (None, "gzip")

    def test_include_filtering(self, make_request):
        json_headers = {"Content-Type": "application/json"}
        body = [b'{"a": 1}']

        _, headers, _ = Deflater().process(make_request(), 200, json_headers, body)
        assert headers["content-encoding"] == "br"

        _, headers, _ = Deflater(include=["application/json"]).process(
            make_request(), 200, json_headers, body
        )
        assert headers["content-encoding"] == "br"

        result = Deflater(include=["text/html"]).process(make_request(), 200, json_headers, body)
        assert result == (200, json_headers, body)

    def test_condition(self, make_request, text_headers):
        deflater = Deflater(condition=lambda request, status, headers, body: sum(map(len, body)) > 5)
        small = deflater.process(make_request(), 200, text_headers, [b"hi"])
        assert small[1] is text_headers
        large = deflater.process(make_request(), 200, text_headers, [b"hello world"])
        assert large[1]["content-encoding"] == "br"

    def test_callable_object_condition(self, make_request, text_headers):
        class OnlyOk:
            def __call__(self, request, status, headers, body):
                return status == 200

        _, headers, _ = Deflater(condition=OnlyOk()).process(
            make_request(), 200, text_headers, [b"x"]
        )
        assert headers["content-encoding"] == "br"

    def test_not_acceptable(self, make_request, text_headers, closable_body):
        body = closable_body([b"hello world"])
        request = make_request(path="/articles", query_string=b"page=2", accept_encoding="gzip")
        status, headers, response_body = Deflater().process(request, 200, text_headers, body)

        message = MESSAGE.format("/articles?page=2").encode("utf-8")
        assert status == 406
        assert headers["content-type"] == "text/plain"
        assert headers["content-length"] == str(len(message))
        assert "content-encoding" not in headers
        assert list(response_body) == [message]
        assert body.closed is True

    def test_not_acceptable_without_query(self, make_request, text_headers):
        _, _, body = Deflater().process(
            make_request(path="/x", accept_encoding="br;q=0"), 200, text_headers, [b"x"]
        )
        assert body_bytes(body) == MESSAGE.format("/x").encode("utf-8")

    def test_repeated_no_transform_passes_through(self, make_request):
        headers = [
            ("Content-Type", "text/plain"),
            ("Cache-Control", "public"),
            ("Cache-Control", "no-transform"),
        ]
        body = [b"hello world"]
        result = Deflater().process(make_request(), 200, headers, body)
        assert result == (200, headers, body)

    def test_condition_reading_list_body(self, make_request, text_headers):
        deflater = Deflater(condition=lambda request, status, headers, body: sum(map(len, body)) > 5)
        _, _, body = deflater.process(make_request(), 200, text_headers, [b"hello", b" world"])
        assert decompress(body_bytes(body)) == b"hello world"

    def test_missing_accept_encoding_passes_through(self, make_request, text_headers):
        body = [b"hello world"]
        result = Deflater().process(make_request(accept_encoding=None), 200, text_headers, body)
        assert result == (200, text_headers, body)

    def test_notifier_wraps_transform_only(self, make_request, text_headers, notifier):
        deflater = Deflater(notifier=notifier)
        request = make_request()

        deflater.process(request, 200, text_headers, [b"x"])
        deflater.process(request, 204, {}, [])
        deflater.process(make_request(accept_encoding="gzip"), 200, text_headers, [b"x"])

        assert notifier.events == [{"name": EVENT_NAME, "payload": {"request": request}}]

    def test_custom_codec(self, make_request, text_headers):
        deflater = Deflater(codec=lambda buffer, options: buffer[::-1])
        _, _, body = deflater.process(make_request(), 200, text_headers, [b"ab", b"c"])
        assert body_bytes(body) == b"cba"

    def test_codec_failure_surfaces_on_iteration(self, make_request, text_headers, closable_body):
        def codec(buffer, options):
            raise RuntimeError("broken codec")

        body = closable_body([b"x"])
        _, headers, stream = Deflater(codec=codec).process(make_request(), 200, text_headers, body)
        assert headers["content-encoding"] == "br"
        with pytest.raises(RuntimeError, match="broken codec"):
            with stream:
                list(stream)
        assert body.closed is True


class TestDeflaterMayProcess:
    """Test cases for Deflater.may_process."""

    def test_eligible_response(self, make_request, text_headers):
        assert Deflater().may_process(make_request(), 200, text_headers) is True

    def test_not_acceptable_still_needs_processing(self, make_request, text_headers):
        assert Deflater().may_process(make_request(accept_encoding="gzip"), 200, text_headers) is True

    def test_missing_accept_encoding(self, make_request, text_headers):
        assert Deflater().may_process(make_request(accept_encoding=None), 200, text_headers) is False

    def test_excluded_content_type(self, make_request):
        deflater = Deflater(include=["text/html"])
        assert deflater.may_process(make_request(), 200, {"Content-Type": "text/event-stream"}) is False

    def test_condition_is_not_called(self, make_request, text_headers):
        calls = []
        deflater = Deflater(condition=lambda *args: calls.append(args) or True)
        assert deflater.may_process(make_request(), 200, text_headers) is True
        assert calls == []


class TestBrotli:
    """Test cases for the Brotli application wrapper."""

    def test_wraps_application(self, make_request):
        def app(request):
            return 200, {"Content-Type": "text/html"}, [b"<p>hi</p>"]

        status, headers, body = Brotli(app, deflater={"quality": 11})(make_request())
        assert status == 200
        assert headers["content-encoding"] == "br"
        assert decompress(body_bytes(body)) == b"<p>hi</p>"

    def test_is_chainable(self, make_request):
        def app(request):
            return 200, {"Content-Type": "text/plain"}, [b"once"]

        status, headers, body = Brotli(Brotli(app))(make_request())
        # The outer layer sees Content-Encoding: br and leaves it alone.
        assert headers["content-encoding"] == "br"
        assert decompress(body_bytes(body)) == b"once"

    def test_upstream_errors_propagate(self, make_request):
        def app(request):
            raise LookupError("upstream failed")

        with pytest.raises(LookupError, match="upstream failed"):
            Brotli(app)(make_request())

    def test_app_must_be_callable(self):
        with pytest.raises(ConfigurationError):
            Brotli("not an app")


def test_release():
    assert release() == __version__
