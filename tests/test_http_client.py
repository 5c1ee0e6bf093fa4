from __future__ import annotations

import pytest
import requests

from src.ingest.http import CsvHttpClient


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200, encoding: str | None = None) -> None:
        self.text = text
        self.status_code = status_code
        self.encoding = encoding

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls: list[tuple[str, float]] = []
        self.closed = False

    def get(self, url: str, timeout: float) -> FakeResponse:
        self.calls.append((url, timeout))
        return self.response

    def close(self) -> None:
        self.closed = True


def test_default_client_does_not_retry_failed_requests() -> None:
    with CsvHttpClient() as client:
        for url in ("http://example.org/data.csv", "https://example.org/data.csv"):
            retry = client._session.get_adapter(url).max_retries

            assert retry.total == 0
            assert retry.connect == 0
            assert retry.read == 0
            assert retry.status == 0


def test_retries_are_opt_in() -> None:
    with CsvHttpClient(max_retries=3) as client:
        adapter = client._session.get_adapter("https://example.org/data.csv")

        assert adapter.max_retries.total == 3
        assert 503 in adapter.max_retries.status_forcelist


def test_get_text_uses_timeout_and_defaults_encoding() -> None:
    client = CsvHttpClient(timeout_seconds=7.5)
    session = FakeSession(FakeResponse("Keywords\nsleep\n"))
    client._session = session  # type: ignore[assignment]

    text = client.get_text("https://example.org/keywords.csv")

    assert text == "Keywords\nsleep\n"
    assert session.calls == [("https://example.org/keywords.csv", 7.5)]
    assert session.response.encoding == "utf-8"
    client.close()
    assert session.closed is True


def test_get_text_raises_for_http_errors() -> None:
    client = CsvHttpClient()
    client._session = FakeSession(FakeResponse("", status_code=404))  # type: ignore[assignment]

    with pytest.raises(requests.HTTPError):
        client.get_text("https://example.org/missing.csv")
