"""Tests for exception types."""

from src.client.exceptions import CooldownError, TransportError, TurnkeeperAPIError, TurnkeeperClientError


class TestExceptionHierarchy:
    def test_all_exceptions_inherit_from_client_error(self) -> None:
        for exc in (TransportError, TurnkeeperAPIError, CooldownError):
            assert issubclass(exc, TurnkeeperClientError)

    def test_cooldown_error_is_api_error(self) -> None:
        assert issubclass(CooldownError, TurnkeeperAPIError)


class TestTransportError:
    def test_transport_error_stores_status_code(self) -> None:
        e = TransportError("fail", status_code=500)
        assert e.status_code == 500
        assert str(e) == "fail"

    def test_transport_error_status_code_optional(self) -> None:
        assert TransportError("fail").status_code is None


class TestTurnkeeperAPIError:
    def test_stores_all_fields(self) -> None:
        e = TurnkeeperAPIError("nope", 409, "DUPLICATE_INVITE", {"invitee": "bob"})
        assert e.status_code == 409
        assert e.error_code == "DUPLICATE_INVITE"
        assert e.details == {"invitee": "bob"}
        assert str(e) == "nope"

    def test_details_default_empty(self) -> None:
        assert TurnkeeperAPIError("nope", 500).details == {}

    def test_cooldown_error_fields(self) -> None:
        e = CooldownError("slow down", retry_after=2.5)
        assert e.status_code == 429
        assert e.error_code == "COOLDOWN"
        assert e.retry_after == 2.5
