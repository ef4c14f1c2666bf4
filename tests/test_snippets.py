"""Tests for snippet capture and the active snippet set."""
import pytest

from pastechat.ai.snippets import ActiveSnippetSet, Snippet, SnippetTracker, line_number_at
from pastechat.core.errors import InvalidInputError

DOCUMENT = "line1\nline2\nline3\n"


@pytest.fixture
def tracker() -> SnippetTracker:
    return SnippetTracker()


def test_capture_resolves_line_range(tracker: SnippetTracker) -> None:
    snippet = tracker.capture(DOCUMENT, "line2\nline3", "notes.txt")

    assert snippet == Snippet("notes.txt", 2, 3, "line2\nline3")


def test_capture_trims_pasted_text(tracker: SnippetTracker) -> None:
    snippet = tracker.capture(DOCUMENT, "\n  line1\nline2 \n\n", "notes.txt")

    assert snippet is not None
    assert (snippet.start_line, snippet.end_line, snippet.code) == (1, 2, "line1\nline2")


@pytest.mark.parametrize("pasted", ["line2", "   ", "", "line2\nmissing", "LINE2\nLINE3"])
def test_capture_misses_return_none(tracker: SnippetTracker, pasted: str) -> None:
    assert tracker.capture(DOCUMENT, pasted, "notes.txt") is None


def test_first_occurrence_wins(tracker: SnippetTracker) -> None:
    snippet = tracker.capture("x\ny\nz\nx\ny\n", "x\ny", "dup.txt")

    assert snippet is not None
    assert (snippet.start_line, snippet.end_line) == (1, 2)


def test_capture_at_end_of_document_without_newline(tracker: SnippetTracker) -> None:
    snippet = tracker.capture("a\nb\nc", "b\nc", "tail.txt")

    assert snippet is not None
    assert (snippet.start_line, snippet.end_line) == (2, 3)


def test_capture_rejects_missing_document(tracker: SnippetTracker) -> None:
    with pytest.raises(InvalidInputError):
        tracker.capture(None, "a\nb", "file.txt")  # type: ignore[arg-type]


def test_line_number_at() -> None:
    assert line_number_at("a\nb\nc", 0) == 1
    assert line_number_at("a\nb\nc", 2) == 2
    assert line_number_at("a\nb\nc", 4) == 3


def test_snippet_rejects_invalid_range() -> None:
    with pytest.raises(InvalidInputError):
        Snippet("a.kt", 5, 4, "x")
    with pytest.raises(InvalidInputError):
        Snippet("a.kt", 0, 2, "x")


def test_snippet_label_and_language() -> None:
    snippet = Snippet("Main.java", 3, 7, "class A {}")

    assert snippet.label == "Main.java (lines 3-7)"
    assert snippet.language == "java"


def test_active_set_tracks_identity_not_value() -> None:
    first = Snippet("a.sh", 1, 2, "ls\npwd")
    second = Snippet("a.sh", 1, 2, "ls\npwd")
    snippets = ActiveSnippetSet()

    snippets.add(first)
    snippets.add(second)
    snippets.add(first)
    assert len(snippets) == 2

    assert snippets.discard(second) is True
    remaining = list(snippets)
    assert len(remaining) == 1 and remaining[0] is first
    assert snippets.discard(second) is False


def test_ordered_is_stable_by_start_line() -> None:
    late = Snippet("a.kt", 10, 11, "a\nb")
    early = Snippet("b.kt", 3, 4, "c\nd")
    tie = Snippet("c.kt", 3, 5, "e\nf")
    snippets = ActiveSnippetSet()
    for snippet in (late, early, tie):
        snippets.add(snippet)

    assert snippets.ordered() == [early, tie, late]
    assert list(snippets) == [late, early, tie]


def test_track_and_remove(tracker: SnippetTracker) -> None:
    snippets = ActiveSnippetSet()

    captured = tracker.track(snippets, DOCUMENT, "line1\nline2", "notes.txt")
    assert captured is not None and snippets.contains(captured)
    assert tracker.track(snippets, DOCUMENT, "nope\nnope", "notes.txt") is None
    assert len(snippets) == 1

    assert tracker.remove_from_set(snippets, captured) is snippets
    assert not snippets
    tracker.remove_from_set(snippets, captured)
    assert len(snippets) == 0
