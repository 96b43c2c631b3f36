"""
Tests for the Response wrapper: header lookup and informational headers.
"""

from datetime import datetime, timezone

from helpers import make_http_response

from recurly_client.http import Header, Response


class TestHeaderLookup:

    def test_exact_name_match(self):
        response = Response.from_pairs(200, headers=[("X-Request-Id", "req-1")])
        assert response.get_header("X-Request-Id") == "req-1"
        assert response.request_id == "req-1"

    def test_lookup_is_case_sensitive(self):
        response = Response.from_pairs(200, headers=[("x-request-id", "req-1")])
        assert response.get_header("X-Request-Id") is None
        assert response.request_id is None

    def test_first_header_wins(self):
        response = Response.from_pairs(200, headers=[("A", "1"), ("A", "2")])
        assert response.get_header("A") == "1"

    def test_missing_header_is_none(self):
        response = Response.from_pairs(200)
        assert response.get_header("Anything") is None
        assert response.content_type is None


class TestRateLimitHeaders:

    def test_absent_headers_are_unknown_not_zero(self):
        response = Response.from_pairs(200)
        assert response.rate_limit is None
        assert response.rate_limit_remaining is None
        assert response.rate_limit_reset is None
        assert response.rate_limit_reset_at is None
        assert response.record_count is None

    def test_present_headers_parse(self):
        response = Response.from_pairs(200, headers=[
            ("X-RateLimit-Limit", "2000"),
            ("X-RateLimit-Remaining", "1990"),
            ("X-RateLimit-Reset", "1700000000"),
        ])
        assert response.rate_limit == 2000
        assert response.rate_limit_remaining == 1990
        assert response.rate_limit_reset == 1700000000
        assert response.rate_limit_reset_at == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    def test_out_of_range_reset_has_no_timestamp(self):
        response = Response.from_pairs(200, headers=[("X-RateLimit-Reset", "99999999999999999999")])
        assert response.rate_limit_reset == 99999999999999999999
        assert response.rate_limit_reset_at is None

    def test_unparseable_header_is_unknown(self):
        response = Response.from_pairs(200, headers=[("X-RateLimit-Remaining", "lots")])
        assert response.rate_limit_remaining is None

    def test_zero_is_kept(self):
        response = Response.from_pairs(200, headers=[("X-RateLimit-Remaining", "0")])
        assert response.rate_limit_remaining == 0

    def test_record_count(self):
        response = Response.from_pairs(200, headers=[("Recurly-Total-Records", "37")])
        assert response.record_count == 37


class TestLinkHeader:

    def test_next_and_start_links(self):
        link = (
            '<https://acme.recurly.com/v2/accounts?cursor=1972702718353176814%3A1465932489>; rel="next", '
            '<https://acme.recurly.com/v2/accounts>; rel="start"'
        )
        response = Response.from_pairs(200, headers=[("Link", link)])
        assert response.next_url == "https://acme.recurly.com/v2/accounts?cursor=1972702718353176814%3A1465932489"
        assert response.start_url == "https://acme.recurly.com/v2/accounts"
        assert response.prev_url is None

    def test_no_link_header(self):
        response = Response.from_pairs(200)
        assert response.links == {}
        assert response.next_url is None


class TestBuild:

    def test_build_from_requests_response(self):
        resp = make_http_response(201, "<account/>", {
            "Content-Type": "application/xml; charset=utf-8",
            "X-Request-Id": "abc123",
        })
        response = Response.build(resp)

        assert response.status_code == 201
        assert response.raw_response == b"<account/>"
        assert response.headers == (
            Header("Content-Type", "application/xml; charset=utf-8"),
            Header("X-Request-Id", "abc123"),
        )
        assert response.content_type == "application/xml; charset=utf-8"
        assert response.is_success
        assert response.has_body

    def test_status_helpers(self):
        assert Response.from_pairs(404).is_not_found
        assert Response.from_pairs(404).is_error
        assert not Response.from_pairs(204).has_body
        assert not Response.from_pairs(200, b"  \n").has_body
