"""Tests for the conversion session state machine."""

from __future__ import annotations

import asyncio

import pytest

from format_converter import session as session_module
from format_converter.catalog import Category
from format_converter.errors import GENERIC_FAILURE_MESSAGE, ConversionFailure
from format_converter.models import ConversionResult, SourceFile
from format_converter.session import ConversionSession, SessionState, SessionStateError


@pytest.fixture()
def progress_log() -> list[int]:
    return []


@pytest.fixture()
def session(test_settings, progress_log) -> ConversionSession:
    return ConversionSession(settings=test_settings, on_progress=progress_log.append)


def _assert_cleared(session: ConversionSession) -> None:
    assert session.state is SessionState.EMPTY
    assert session.source is None
    assert session.selected_format is None
    assert session.result is None
    assert session.error is None
    assert session.progress == 0


def test_new_session_is_empty_document_session(session):
    assert session.category is Category.DOCUMENT
    assert [option.id for option in session.formats] == ["pdf", "docx", "txt"]
    assert session.accept_rule.description.startswith(".pdf")
    _assert_cleared(session)


def test_valid_file_loads(session, text_file):
    assert session.select_file(text_file)
    assert session.state is SessionState.FILE_LOADED
    assert session.source is text_file


def test_invalid_file_is_rejected_and_not_retained(test_settings):
    session = ConversionSession(Category.IMAGE, settings=test_settings)

    accepted = session.select_file(SourceFile(b"ID3", "song.mp3", "audio/mpeg"))

    assert not accepted
    assert session.state is SessionState.ERROR
    assert session.source is None
    assert session.error.message == "Invalid file type for Image."
    assert session.error.error_code == "ERR_VALIDATION_REJECTED"
    assert session.error.recoverable


def test_rejected_file_replaces_previous_selection(session, text_file):
    session.select_file(text_file)

    session.select_file(SourceFile(b"x", "photo.png", "image/png"))

    assert session.state is SessionState.ERROR
    assert session.source is None


def test_oversized_file_is_rejected(session):
    big = SourceFile(b"a" * (1024 * 1024 + 1), "big.txt", "text/plain")

    assert not session.select_file(big)
    assert session.error.error_code == "ERR_FILE_TOO_LARGE"
    assert "big.txt" in session.error.message


def test_select_format_requires_file(session):
    with pytest.raises(SessionStateError):
        session.select_format("txt")


def test_select_format_outside_category_is_contract_violation(session, text_file):
    session.select_file(text_file)

    with pytest.raises(KeyError):
        session.select_format("jpg")
    assert session.state is SessionState.FILE_LOADED


def test_successful_conversion(session, text_file, progress_log):
    session.select_file(text_file)
    option = session.select_format("txt")
    assert session.state is SessionState.FORMAT_CHOSEN
    assert session.selected_format is option

    result = asyncio.run(session.start_conversion())

    assert isinstance(result, ConversionResult)
    assert result.output_bytes == text_file.raw_bytes
    assert session.state is SessionState.DONE
    assert session.result is result
    assert session.progress == 100
    assert progress_log[-1] == 100


def test_start_conversion_without_format_is_ignored(session, text_file):
    session.select_file(text_file)

    assert asyncio.run(session.start_conversion()) is None
    assert session.state is SessionState.FILE_LOADED


def test_second_start_while_converting_is_ignored(session, text_file):
    session.select_file(text_file)
    session.select_format("pdf")

    async def run():
        return await asyncio.gather(session.start_conversion(), session.start_conversion())

    first, second = asyncio.run(run())

    assert isinstance(first, ConversionResult)
    assert second is None
    assert session.result is first


def test_decode_failure_enters_error_with_generic_message(test_settings):
    session = ConversionSession(Category.IMAGE, settings=test_settings)
    session.select_file(SourceFile(b"not an image", "fake.png", "image/png"))
    session.select_format("jpg")

    outcome = asyncio.run(session.start_conversion())

    assert isinstance(outcome, ConversionFailure)
    assert outcome.error_code == "ERR_DECODE_FAILED"
    assert outcome.message == GENERIC_FAILURE_MESSAGE
    assert session.state is SessionState.ERROR
    assert session.error is outcome
    assert session.result is None
    # The file survives a failed conversion so another format can be tried.
    assert session.source is not None
    session.select_format("png")
    assert session.state is SessionState.FORMAT_CHOSEN
    assert session.error is None


def test_unexpected_failure_is_reported_generically(session, text_file, monkeypatch):
    async def exploding_encode(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(session_module, "encode", exploding_encode)
    session.select_file(text_file)
    session.select_format("txt")

    outcome = asyncio.run(session.start_conversion())

    assert isinstance(outcome, ConversionFailure)
    assert outcome.error_code == "ERR_CONVERSION_FAILED"
    assert "disk on fire" not in outcome.message
    assert session.state is SessionState.ERROR


def _reach(session: ConversionSession, state: SessionState, text_file: SourceFile) -> None:
    if state is SessionState.EMPTY:
        return
    if state is SessionState.ERROR:
        session.select_file(SourceFile(b"x", "photo.png", "image/png"))
        return
    session.select_file(text_file)
    if state is SessionState.FILE_LOADED:
        return
    session.select_format("txt")
    if state is SessionState.DONE:
        asyncio.run(session.start_conversion())


@pytest.mark.parametrize(
    "state",
    [
        SessionState.EMPTY,
        SessionState.FILE_LOADED,
        SessionState.FORMAT_CHOSEN,
        SessionState.DONE,
        SessionState.ERROR,
    ],
)
def test_reset_clears_everything(session, text_file, state):
    _reach(session, state, text_file)
    assert session.state is state

    session.reset()

    _assert_cleared(session)


def test_reset_during_conversion_discards_stale_result(session, text_file, progress_log):
    session.select_file(text_file)
    session.select_format("docx")

    async def run():
        task = asyncio.create_task(session.start_conversion())
        await asyncio.sleep(0)
        assert session.state is SessionState.CONVERTING
        session.reset()
        return await task

    assert asyncio.run(run()) is None
    _assert_cleared(session)
    assert 100 not in progress_log


def test_category_switch_clears_matching_format(session, text_file):
    session.select_file(text_file)
    session.select_format("txt")

    formats = session.select_category(Category.OCR)

    assert "txt" in [option.id for option in formats]
    assert session.category is Category.OCR
    _assert_cleared(session)
    with pytest.raises(SessionStateError):
        session.select_format("txt")


def test_progress_stops_once_settled(session, text_file, progress_log, monkeypatch):
    real_extract = session_module.extract

    async def slow_extract(*args, **kwargs):
        await asyncio.sleep(0.08)
        return await real_extract(*args, **kwargs)

    monkeypatch.setattr(session_module, "extract", slow_extract)
    session.select_file(text_file)
    session.select_format("txt")

    async def run():
        result = await session.start_conversion()
        emitted = list(progress_log)
        await asyncio.sleep(0.05)
        return result, emitted

    result, emitted = asyncio.run(run())

    assert isinstance(result, ConversionResult)
    assert emitted[-1] == 100
    assert len(emitted) >= 3
    assert emitted == sorted(emitted)
    assert all(value <= 90 for value in emitted[:-1])
    assert progress_log == emitted


def test_start_conversion_without_target_raises_state_error(session, text_file):
    session.select_file(text_file)
    # Force an inconsistent state; the guard must not depend on assertions.
    session._state = SessionState.FORMAT_CHOSEN

    with pytest.raises(SessionStateError):
        asyncio.run(session.start_conversion())
