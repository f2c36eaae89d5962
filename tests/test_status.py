"""Tests for HTTP status classification."""

import pytest

from sbqueue.errors import (
    BadRequestError,
    ErrorKind,
    InternalServiceError,
    MessageNotFoundError,
    NoMessagesAvailableError,
    NotAuthorizedError,
    QueueNotFoundError,
    StatusError,
    UnknownStatusError,
)
from sbqueue.status import check_response, error_for_status

ERROR_CASES = [
    (204, NoMessagesAvailableError, ErrorKind.NO_MESSAGES_AVAILABLE),
    (400, BadRequestError, ErrorKind.BAD_REQUEST),
    (401, NotAuthorizedError, ErrorKind.NOT_AUTHORIZED),
    (404, MessageNotFoundError, ErrorKind.MESSAGE_NOT_FOUND),
    (410, QueueNotFoundError, ErrorKind.QUEUE_NOT_FOUND),
    (500, InternalServiceError, ErrorKind.INTERNAL_SERVICE_ERROR),
]


class TestErrorForStatus:
    @pytest.mark.parametrize("code,error_cls,kind", ERROR_CASES)
    def test_known_codes(self, code, error_cls, kind):
        err = error_for_status(code, str(code).encode())
        assert type(err) is error_cls
        assert err.kind is kind
        assert err.status_code == code
        assert err.body == str(code)

    @pytest.mark.parametrize("code", [200, 201])
    def test_success(self, code):
        assert error_for_status(code, b"<garbage>") is None

    def test_unknown_code_message(self):
        err = error_for_status(501, b"hello")
        assert isinstance(err, UnknownStatusError)
        assert err.kind is ErrorKind.UNKNOWN_STATUS
        assert str(err) == "Unknown status 501 with body hello"

    def test_accepts_text_body(self):
        assert error_for_status(400, "bad").body == "bad"


class TestCheckResponse:
    @pytest.mark.parametrize("code,error_cls,kind", ERROR_CASES)
    def test_raises_classified_error(self, make_response, code, error_cls, kind):
        with pytest.raises(error_cls) as excinfo:
            check_response(make_response(code, f"body {code}"))
        assert excinfo.value.body == f"body {code}"
        assert isinstance(excinfo.value, StatusError)

    def test_success_does_not_read_body(self, broken_response):
        check_response(broken_response(200))
        check_response(broken_response(201))

    @pytest.mark.parametrize("code,error_cls,kind", ERROR_CASES)
    def test_unreadable_body_keeps_kind(self, broken_response, code, error_cls, kind):
        with pytest.raises(error_cls) as excinfo:
            check_response(broken_response(code))
        assert excinfo.value.kind is kind
        assert excinfo.value.body == ""

    def test_unknown_status(self, make_response):
        with pytest.raises(UnknownStatusError, match="^Unknown status 418 with body teapot$"):
            check_response(make_response(418, "teapot"))
