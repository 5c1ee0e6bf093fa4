from __future__ import annotations

from src.classify.classifier import classify, classify_text
from src.normalize.tokenize import tokenize


def test_classify_matches_whole_tokens_only() -> None:
    tokens = tokenize("Sleepless nights in shift workers")

    assert classify(tokens, ["sleep"]) is False
    assert classify(tokens, ["sleepless"]) is True


def test_classify_lowercases_keywords() -> None:
    assert classify(tokenize("circadian rhythm study"), ["Circadian"]) is True


def test_classify_handles_hyphenated_keywords() -> None:
    assert classify_text("A trial of CBT-I in adolescents", ["cbt-i"]) is True
    assert classify_text("A trial of CBT-I in adolescents", ["cbt"]) is False


def test_classify_with_no_keywords_or_no_summary_is_false() -> None:
    assert classify(tokenize("sleep apnea"), []) is False
    assert classify_text(None, ["sleep"]) is False


def test_classify_agrees_with_exact_membership() -> None:
    summaries = ["sleep apnea treatment", "cancer genomics", "overnight, drowsy drivers"]
    keywords = ["sleep", "drowsy", "genome"]
    for summary in summaries:
        tokens = tokenize(summary)
        expected = any(keyword in tokens for keyword in keywords)
        assert classify(tokens, keywords) is expected
