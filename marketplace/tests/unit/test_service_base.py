from unittest.mock import MagicMock

import pytest

from marketplace.api.errors import error_response, error_status
from marketplace.services.base import BaseService, ErrorCodes, paginate, service_err, service_ok


class FakeQuerySet(list):
    """List with the two queryset methods paginate relies on."""

    def count(self):
        return len(self)


@pytest.mark.unit
class TestServiceResult:
    def test_ok_and_err(self):
        ok = service_ok(5)
        err = service_err(ErrorCodes.QUOTE_NOT_FOUND)

        assert ok.ok and ok.value == 5
        assert not err.ok
        assert err.error_detail == "quote_not_found"

    def test_map_and_flat_map(self):
        assert service_ok(2).map(lambda v: v * 3).value == 6
        assert service_ok(2).flat_map(lambda v: service_err(ErrorCodes.INVALID_STATE)).error == "invalid_state"
        assert service_err("x").map(lambda v: v * 3).error == "x"

    def test_map_captures_exceptions(self):
        result = service_ok(1).map(lambda v: v / 0)

        assert result.error == "transformation_error"

    def test_to_dict(self):
        assert service_ok("a").to_dict() == {"success": True, "data": "a"}
        assert service_err("c", "msg").to_dict() == {"success": False, "error": {"code": "c", "message": "msg"}}


@pytest.mark.unit
class TestErrorStatus:
    @pytest.mark.parametrize(
        "code,expected",
        [
            (ErrorCodes.CONTRACT_NOT_FOUND, 404),
            (ErrorCodes.NOTIFICATION_NOT_FOUND, 404),
            (ErrorCodes.NOT_CONTRACT_PARTY, 403),
            (ErrorCodes.PERMISSION_DENIED, 403),
            (ErrorCodes.ALREADY_SIGNED, 409),
            (ErrorCodes.DUPLICATE_REVIEW, 409),
            (ErrorCodes.VALIDATION_ERROR, 400),
            (ErrorCodes.INTERNAL_ERROR, 500),
        ],
    )
    def test_mapping(self, code, expected):
        assert error_status(code) == expected

    def test_error_response_body(self):
        response = error_response(service_err(ErrorCodes.INVALID_STATE, "Quote is closed"))

        assert response.status_code == 409
        assert response.data == {"detail": "Quote is closed", "code": "invalid_state"}


@pytest.mark.unit
class TestPaginate:
    def test_second_page(self):
        data = paginate(FakeQuerySet(range(45)), page=2, page_size=20)

        assert data["results"] == list(range(20, 40))
        assert data["count"] == 45
        assert data["num_pages"] == 3

    def test_bounds_are_clamped(self):
        data = paginate(FakeQuerySet(range(5)), page=0, page_size=500)

        assert data["page"] == 1
        assert data["page_size"] == 100
        assert data["results"] == [0, 1, 2, 3, 4]

    def test_empty(self):
        data = paginate(FakeQuerySet(), page=3)

        assert data["results"] == []
        assert data["num_pages"] == 0


@pytest.mark.unit
class TestBaseService:
    def setup_method(self):
        class DemoService(BaseService):
            @BaseService.log_performance
            def run(self, fail=False):
                if fail:
                    raise RuntimeError("boom")
                return service_ok("done")

        self.service = DemoService()

    def test_log_performance_passes_result_through(self):
        assert self.service.run().value == "done"

    def test_log_performance_reraises(self):
        with pytest.raises(RuntimeError):
            self.service.run(fail=True)

    def test_publish_event_swallows_bus_errors(self):
        bus = MagicMock()
        bus.publish.side_effect = ConnectionError("redis down")
        event = MagicMock(event_type="quote.submitted", payload={"quote_id": "1"})

        self.service.publish_event(bus, event)

        bus.publish.assert_called_once_with("quote.submitted", {"quote_id": "1"})

    def test_publish_event_without_bus(self):
        self.service.publish_event(None, MagicMock())
