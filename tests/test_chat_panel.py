"""Widget tests for the chat tool window."""
import pytest
from PySide6.QtCore import QCoreApplication, QEvent, QMimeData, QThread
from PySide6.QtGui import QGuiApplication

from pastechat.ai.ai_client import AIClient
from pastechat.ai.session import AssistantSession
from pastechat.ui.chat_panel import AIChatPanel, PasteAwareEdit, _AIRequestWorker

REPLY = "Try:\n```kotlin\nfun a() = 10\n```"


@pytest.fixture
def client(config) -> AIClient:
    config.set("ai", {"backend": "dummy"})
    return AIClient(config)


@pytest.fixture
def panel(qt_app, client, fake_editor) -> AIChatPanel:
    widget = AIChatPanel(client, AssistantSession())
    widget.set_document_editor(fake_editor)
    return widget


def test_multiline_paste_is_reported(qt_app) -> None:
    edit = PasteAwareEdit()
    pasted = []
    edit.code_pasted.connect(pasted.append)
    mime = QMimeData()
    mime.setText("a()\nb()")

    edit.insertFromMimeData(mime)

    assert pasted == ["a()\nb()"]
    assert edit.toPlainText() == ""


def test_single_line_paste_is_inserted(qt_app) -> None:
    edit = PasteAwareEdit()
    pasted = []
    edit.code_pasted.connect(pasted.append)
    mime = QMimeData()
    mime.setText("hello")

    edit.insertFromMimeData(mime)

    assert pasted == []
    assert edit.toPlainText() == "hello"


def test_paste_from_document_adds_card(panel: AIChatPanel) -> None:
    snippet = panel.handle_paste("    fun a() = 1\n    fun b() = 2\n")

    assert snippet is not None
    assert len(panel.snippet_cards) == 1
    card = panel.snippet_cards[0]
    assert card.label.text() == "<b>Demo.kt (lines 4-5)</b>"
    assert "fun a() = 1" in card.preview.toPlainText()
    assert panel.input.toPlainText() == ""


def test_unmatched_paste_goes_to_prompt_box(panel: AIChatPanel) -> None:
    assert panel.handle_paste("not\nin the file") is None

    assert panel.snippet_cards == []
    assert panel.input.toPlainText() == "not\nin the file"


def test_paste_without_editor_goes_to_prompt_box(panel: AIChatPanel) -> None:
    panel.set_document_editor(None)

    assert panel.handle_paste("class Demo {\n    fun a() = 1") is None
    assert not panel.session.snippets


def test_remove_button_drops_snippet(panel: AIChatPanel) -> None:
    panel.handle_paste("class Demo {\n    fun a() = 1")

    panel.snippet_cards[0].remove_button.click()

    assert panel.snippet_cards == []
    assert not panel.session.snippets


def test_response_shows_actions_and_accept_writes_code(panel: AIChatPanel, fake_editor) -> None:
    panel.handle_paste("    fun a() = 1\n    fun b() = 2")

    panel.show_response(REPLY)
    assert not panel.actions_row.isHidden()
    assert "fun a() = 10" in panel.result_view.toPlainText()
    assert "```" not in panel.result_view.toPlainText()

    panel.accept_button.click()

    assert fake_editor.replacements == [(4, 5, "fun a() = 10")]
    assert panel.actions_row.isHidden()
    assert panel.snippet_cards == []
    assert panel.result_view.toPlainText() == ""


def test_reject_keeps_snippet_cards(panel: AIChatPanel, fake_editor) -> None:
    panel.handle_paste("    fun a() = 1\n    fun b() = 2")
    panel.show_response(REPLY)

    panel.reject_button.click()

    assert panel.actions_row.isHidden()
    assert len(panel.snippet_cards) == 1
    assert fake_editor.replacements == []


def test_empty_response_hides_actions(panel: AIChatPanel) -> None:
    panel.show_response("   ")

    assert panel.actions_row.isHidden()
    assert "Error receiving response." in panel.result_view.toPlainText()


def test_failure_is_rendered_and_unlocks_input(panel: AIChatPanel) -> None:
    panel.session.begin_request("question")
    panel._set_busy(True)

    panel._on_worker_failed("connection refused")

    assert "Error: connection refused" in panel.result_view.toPlainText()
    assert panel.send_button.isEnabled()
    assert not panel.session.in_flight


def test_streamed_chunks_are_accumulated(panel: AIChatPanel) -> None:
    panel._on_worker_partial("Hello ")
    panel._on_worker_partial("**world**")

    assert panel._streamed_text == "Hello **world**"
    assert panel.result_view.toPlainText().strip() == "Hello world"


def test_send_is_ignored_while_request_pending(panel: AIChatPanel) -> None:
    panel.session.begin_request("first")
    panel.input.setPlainText("second")

    panel._send()

    assert panel._active_thread is None


def test_blank_prompt_is_not_sent(panel: AIChatPanel) -> None:
    panel.input.setPlainText("  ")

    panel._send()

    assert panel._active_thread is None
    assert not panel.session.in_flight


def test_worker_streams_dummy_reply(qt_app, client) -> None:
    worker = _AIRequestWorker(client, "ping")
    partial, finished = [], []
    worker.partial.connect(partial.append)
    worker.finished.connect(finished.append)

    worker.run()

    assert partial == ["Echo: ping"]
    assert finished == ["Echo: ping"]


def test_reply_blocks_get_copy_and_insert_rows(panel: AIChatPanel, fake_editor) -> None:
    panel.show_response("One:\n```bash\necho hi\n```\nTwo:\n```\nplain\n```")

    assert [row.block.language for row in panel.block_rows] == ["bash", ""]
    assert panel.block_rows[0].label.text() == "bash (1 line)"

    panel.block_rows[0].copy_button.click()
    assert QGuiApplication.clipboard().text() == "echo hi\n"

    panel.block_rows[1].insert_button.click()
    assert fake_editor.insertions == ["plain\n"]


def test_block_rows_cleared_on_reject(panel: AIChatPanel) -> None:
    panel.show_response(REPLY)
    assert len(panel.block_rows) == 1

    panel.reject_button.click()

    assert panel.block_rows == []


def test_reply_without_fences_has_no_block_rows(panel: AIChatPanel) -> None:
    panel.show_response("Nothing to paste.")

    assert panel.block_rows == []


def test_insert_without_editor_is_ignored(panel: AIChatPanel) -> None:
    panel.show_response(REPLY)
    panel.set_document_editor(None)

    panel.block_rows[0].insert_button.click()

    assert panel.session.has_response


def test_accept_keeps_reply_when_range_is_gone(panel: AIChatPanel, fake_editor) -> None:
    panel.handle_paste("    fun a() = 1\n    fun b() = 2")
    panel.show_response(REPLY)
    fake_editor.range_missing = True

    panel.accept_button.click()

    assert not panel.actions_row.isHidden()
    assert len(panel.snippet_cards) == 1
    assert len(panel.block_rows) == 1
    assert panel.session.last_raw_response == REPLY
    assert "fun a() = 10" in panel.result_view.toPlainText()


def test_request_thread_is_released_after_reply(qt_app, panel: AIChatPanel) -> None:
    panel.input.setPlainText("ping")
    panel._send()
    thread = panel._active_thread
    assert thread is not None
    destroyed = []
    thread.destroyed.connect(lambda *_: destroyed.append(True))

    for _ in range(500):
        qt_app.processEvents()
        QCoreApplication.sendPostedEvents(None, QEvent.DeferredDelete)
        if destroyed:
            break
        QThread.msleep(10)

    assert destroyed
    assert "Echo: ping" in panel.result_view.toPlainText()
    assert panel._active_thread is None
    assert not panel.session.in_flight
