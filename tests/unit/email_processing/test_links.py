"""
Unit tests for link extraction.
"""

from secure_inbox.email_processing.handlers.links import extract_links


def test_extracts_links_in_order():
    text = "Go to https://a.example/login then http://b.example/x?y=1 now"
    assert extract_links(text) == ["https://a.example/login", "http://b.example/x?y=1"]


def test_keeps_duplicates():
    text = "https://a.example https://a.example"
    assert extract_links(text) == ["https://a.example", "https://a.example"]


def test_link_runs_to_next_whitespace():
    assert extract_links("see (https://a.example/path).\nthanks") == ["https://a.example/path)."]


def test_ignores_other_schemes():
    assert extract_links("ftp://files.example mailto:x@example.com www.example.com") == []


def test_empty_and_none_text():
    assert extract_links("") == []
    assert extract_links(None) == []
