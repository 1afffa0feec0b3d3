from starlette.requests import Request

from giftregistry.api.deps import extract_session_token, parse_cookie_header


def _request(headers: dict[str, str] | None = None, query: str = "") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/user/profile",
        "query_string": query.encode(),
        "headers": [(key.lower().encode(), value.encode()) for key, value in (headers or {}).items()],
    }
    return Request(scope)


def test_bearer_header_wins_over_cookie_and_query() -> None:
    request = _request(
        {"Authorization": "Bearer header-token", "Cookie": "session_id=cookie-token"},
        query="session=query-token",
    )
    assert extract_session_token(request) == "header-token"


def test_bearer_scheme_is_case_insensitive() -> None:
    assert extract_session_token(_request({"Authorization": "bEaReR abc"})) == "abc"


def test_non_bearer_authorization_falls_through_to_cookie() -> None:
    request = _request({"Authorization": "Basic dXNlcjpwYXNz", "Cookie": "session_id=cookie-token"})
    assert extract_session_token(request) == "cookie-token"


def test_cookie_wins_over_query() -> None:
    request = _request({"Cookie": "theme=dark; session_id=cookie-token"}, query="session=query-token")
    assert extract_session_token(request) == "cookie-token"


def test_query_parameter_is_last_resort() -> None:
    assert extract_session_token(_request(query="session=query-token")) == "query-token"


def test_no_credentials() -> None:
    assert extract_session_token(_request()) is None


def test_cookie_parsing_trims_and_splits_on_first_equals() -> None:
    header = "  other = 1 ;  session_id =  abc=def  ; last=2"
    assert parse_cookie_header(header, "session_id") == "abc=def"
    assert parse_cookie_header(header, "missing") is None
    assert parse_cookie_header(None, "session_id") is None


def test_empty_bearer_token_does_not_fall_back_to_cookie() -> None:
    request = _request({"Authorization": "Bearer ", "Cookie": "session_id=cookie-token"}, query="session=query-token")
    assert extract_session_token(request) is None
    assert extract_session_token(_request({"Authorization": "Bearer", "Cookie": "session_id=cookie-token"})) is None
