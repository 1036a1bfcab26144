"""Tests for the review moderation filter."""
import pytest

from globalvote.moderation import ContentFilter, classify


def test_short_text_is_held():
    result = classify("hi")
    assert result.approved is False
    assert result.confidence == 100
    assert "minimum 10 characters" in result.reason


def test_empty_text_is_held():
    assert classify(None).approved is False
    assert classify("").approved is False


def test_long_text_is_held():
    result = classify("a" * 501)
    assert result.approved is False
    assert result.confidence == 100
    assert "maximum 500 characters" in result.reason


@pytest.mark.parametrize("text", ["abcdefghij", "a" * 500])
def test_length_bounds_are_inclusive(text):
    assert classify(text).approved is True


def test_repeated_banned_word_is_held():
    result = classify("spam spam spam spam text")
    assert result.approved is False
    # one list entry matched, no positive words
    assert result.confidence == 75
    assert result.reason == "Potentially inappropriate content detected"


def test_many_banned_words_flagged_as_spam():
    result = classify("This is a scam and a fraud, total garbage")
    assert result.approved is False
    assert result.confidence == 95
    assert result.reason == "Inappropriate language or spam content detected"


def test_positive_words_offset_a_single_banned_word():
    result = classify("Good policies but some fake news around")
    assert result.approved is True
    assert result.confidence == 90
    # one positive, one banned: not more positive than negative
    assert result.sentiment == "neutral"


def test_positive_review_is_approved():
    result = classify("This candidate is good and excellent, truly wonderful")
    assert result.approved is True
    assert result.confidence == 90
    assert result.sentiment == "positive"
    assert result.reason == "Content is appropriate"


def test_repetitive_text_is_held():
    result = classify("vote vote vote vote vote now")
    assert result.approved is False
    assert result.confidence == 80
    assert result.reason == "Repetitive content appears to be spam"


def test_repetition_check_is_case_sensitive():
    result = classify("Vote vote VOTE vOte voTe votE")
    assert result.approved is True
    assert result.sentiment == "neutral"


def test_matching_is_substring_based():
    # "skill" contains "kill"
    result = classify("He has real skill in governance")
    assert result.approved is False
    assert result.confidence == 75


def test_matching_ignores_case():
    result = classify("What a SCAM, Fraud and GARBAGE")
    assert result.confidence == 95


def test_word_lists_are_injected():
    strict = ContentFilter(banned_words=("pineapple",), positive_words=())
    assert strict.classify("I really dislike pineapple pizza").approved is False
    assert strict.classify("This is total garbage honestly").approved is True
