from __future__ import annotations

from pathlib import Path

import pytest
import requests

from src.ingest.loaders import DatasetLoadError, load_grant_rows, load_keywords, read_source_text

DEFAULTS = ("sleep", "circadian")


class FakeHttpClient:
    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.urls: list[str] = []

    def get_text(self, url: str) -> str:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.text or ""


def test_load_grant_rows_keeps_cells_as_strings(tmp_path: Path) -> None:
    dataset = tmp_path / "dataset.csv"
    dataset.write_text(
        'ID,Funding_body,Funding,Summary\nG1,NHMRC,"$1,000",Sleep study\nG2,ARC,,\n',
        encoding="utf-8",
    )

    rows = load_grant_rows(dataset)

    assert rows["ID"].tolist() == ["G1", "G2"]
    assert rows["Funding"].tolist() == ["$1,000", ""]
    assert rows["Summary"].tolist() == ["Sleep study", ""]


def test_load_grant_rows_keeps_rows_with_extra_unquoted_commas(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    dataset = tmp_path / "dataset.csv"
    dataset.write_text(
        "ID,Funding_body,Funding,Summary\n"
        "G1,NHMRC,$100,sleep study\n"
        "G2,ARC,$5,cancer, genomics\n"
        "G3,ARC,$7,apnea\n",
        encoding="utf-8",
    )

    with caplog.at_level("WARNING", logger="src.ingest.loaders"):
        rows = load_grant_rows(dataset)

    assert rows["ID"].tolist() == ["G1", "G2", "G3"]
    assert rows["Summary"].tolist() == ["sleep study", "cancer", "apnea"]
    assert "Kept 1 malformed rows" in caplog.text


def test_load_grant_rows_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DatasetLoadError):
        load_grant_rows(tmp_path / "missing.csv")


def test_load_grant_rows_raises_for_http_failure() -> None:
    client = FakeHttpClient(error=requests.ConnectionError("offline"))

    with pytest.raises(DatasetLoadError, match="offline"):
        load_grant_rows("https://example.org/dataset.csv", http_client=client)  # type: ignore[arg-type]

    assert client.urls == ["https://example.org/dataset.csv"]


def test_read_source_text_strips_byte_order_mark(tmp_path: Path) -> None:
    source = tmp_path / "keywords.csv"
    source.write_text("Keywords\nsleep\n", encoding="utf-8-sig")
    client = FakeHttpClient(text="\ufeffKeywords\nsleep\n")

    assert read_source_text(source) == "Keywords\nsleep\n"
    assert read_source_text("http://example.org/k.csv", http_client=client) == "Keywords\nsleep\n"  # type: ignore[arg-type]


def test_load_keywords_reads_keywords_column(tmp_path: Path) -> None:
    source = tmp_path / "keywords.csv"
    source.write_text("Keywords,Notes\nSleep,x\n\ninsomnia,\n  ,blank\n", encoding="utf-8")

    result = load_keywords(source, defaults=DEFAULTS)

    assert result.keywords == ["Sleep", "insomnia"]
    assert result.used_fallback is False
    assert result.error is None


def test_load_keywords_falls_back_when_file_is_missing(tmp_path: Path) -> None:
    result = load_keywords(tmp_path / "missing.csv", defaults=DEFAULTS)

    assert result.keywords == list(DEFAULTS)
    assert result.used_fallback is True
    assert result.error is not None
    assert result.error.startswith("Error loading keywords file. Using default keywords.")


def test_load_keywords_falls_back_without_keywords_header(tmp_path: Path) -> None:
    source = tmp_path / "keywords.csv"
    source.write_text("Terms\nsleep\n", encoding="utf-8")

    result = load_keywords(source, defaults=DEFAULTS)

    assert result.keywords == list(DEFAULTS)
    assert result.used_fallback is True


def test_load_keywords_falls_back_on_http_error() -> None:
    client = FakeHttpClient(error=requests.HTTPError("404 Client Error"))

    result = load_keywords("https://example.org/keywords.csv", defaults=DEFAULTS, http_client=client)  # type: ignore[arg-type]

    assert result.keywords == list(DEFAULTS)
    assert "404" in (result.error or "")


def test_load_keywords_without_source_uses_defaults() -> None:
    result = load_keywords(None, defaults=DEFAULTS)

    assert result.keywords == list(DEFAULTS)
    assert result.source == "defaults"
    assert result.error is None


def test_load_keywords_opens_and_closes_its_own_client_for_urls(monkeypatch: pytest.MonkeyPatch) -> None:
    created: list[FakeHttpClient] = []

    class ClosingFakeClient(FakeHttpClient):
        closed = False

        def __enter__(self) -> ClosingFakeClient:
            return self

        def __exit__(self, *exc_info: object) -> None:
            self.closed = True

    def _factory() -> ClosingFakeClient:
        client = ClosingFakeClient(text="Keywords\napnoea\n")
        created.append(client)
        return client

    monkeypatch.setattr("src.ingest.loaders.CsvHttpClient", _factory)

    result = load_keywords("https://example.org/keywords.csv", defaults=DEFAULTS)

    assert result.keywords == ["apnoea"]
    assert created[0].urls == ["https://example.org/keywords.csv"]
    assert created[0].closed is True
