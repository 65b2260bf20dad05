"""Tests for the format_result dispatcher and OutputSettings."""

import json

import pytest

from curator.output.formatters import OutputSettings, format_result
from curator.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="ERR", message=msg),
    )


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(Exception):
            s.quiet = True  # type: ignore[misc]


class TestFormatResult:
    def test_json_mode_returns_valid_json(self) -> None:
        result = ServiceResult(
            ok=True, op="capture", data={"path": "inbox/x.md"}, warnings=["careful"]
        )
        data = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert data == {
            "ok": True,
            "op": "capture",
            "data": {"path": "inbox/x.md"},
            "warnings": ["careful"],
            "error": None,
        }

    def test_json_error(self) -> None:
        output = format_result(_err(msg="boom"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["error"]["code"] == "ERR"
        assert data["error"]["message"] == "boom"

    def test_json_beats_quiet(self) -> None:
        output = format_result(
            _ok(path="inbox/x.md"), settings=OutputSettings(json_output=True, quiet=True)
        )
        assert json.loads(output)["data"]["path"] == "inbox/x.md"

    def test_quiet(self) -> None:
        output = format_result(_ok(path="inbox/x.md"), settings=OutputSettings(quiet=True))
        assert output == "inbox/x.md"

    def test_default_is_human(self) -> None:
        output = format_result(_ok("learning_stats", total_corrections=0))
        assert output.startswith("OK")
        assert "total_corrections: 0" in output
