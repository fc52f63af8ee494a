"""Tests for service response payloads."""

from spike_studio.utils.responses import ServiceResponse, service_error, service_ok


class TestServiceResponse:
    """Tests for ServiceResponse dataclass."""

    def test_success_shape(self):
        resp = ServiceResponse(success=True, data={"items": []})
        assert resp.to_dict() == {"success": True, "data": {"items": []}, "error": None}

    def test_error_shape(self):
        resp = ServiceResponse(success=False, error="Spike not found: x")
        assert resp.to_dict() == {"success": False, "data": None, "error": "Spike not found: x"}


class TestHelpers:
    def test_service_ok(self):
        assert service_ok({"id": "a"}) == {"success": True, "data": {"id": "a"}, "error": None}
        assert service_ok() == {"success": True, "data": None, "error": None}

    def test_service_error(self):
        assert service_error("fail") == {"success": False, "data": None, "error": "fail"}

    def test_keys_consistent(self):
        assert set(service_ok([1]).keys()) == set(service_error("e").keys()) == {
            "success",
            "data",
            "error",
        }
