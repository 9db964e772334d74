"""Tests for rendering responses on the command line."""

from __future__ import annotations

import json

import httpx

from kypi.client.response import extract_response_data, format_api_response
from kypi.output import OutputFormat, OutputManager, set_output


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(
        status_code,
        request=httpx.Request("GET", "https://api.example.com/x"),
        **kwargs,
    )


class TestExtractResponseData:
    def test_json(self) -> None:
        assert extract_response_data(_response(json={"a": 1})) == {"a": 1}

    def test_text_fallback(self) -> None:
        assert extract_response_data(_response(text="plain words")) == "plain words"

    def test_empty_body(self) -> None:
        assert extract_response_data(_response(204)) is None


class TestFormatApiResponse:
    def test_json_body_to_stdout_status_to_stderr(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        format_api_response(_response(json={"id": 7}))
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"id": 7}
        assert "HTTP 200 OK" in captured.err

    def test_quiet_hides_status(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True))
        format_api_response(_response(text="hello"))
        captured = capsys.readouterr()
        assert captured.out.strip() == "hello"
        assert captured.err == ""

    def test_empty_body_prints_nothing(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        format_api_response(_response(204))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "HTTP 204 No Content" in captured.err
