"""Conversion session: the state machine that drives validate -> extract -> encode."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Optional, Tuple, Union

import structlog

from .catalog import AcceptRule, Category, FormatOption, accept_rule_for, find_format, formats_for
from .config import Settings, get_settings
from .errors import (
    GENERIC_FAILURE_MESSAGE,
    ConversionError,
    ConversionFailure,
    GenericConversionFailure,
    ValidationRejected,
)
from .models import ConversionResult, SourceFile
from .pipeline import encode, extract
from .plugins import load_plugins_from_settings
from .progress import ProgressCallback, ProgressTicker
from .validation import rejection_message, validate

logger = logging.getLogger(__name__)

ConversionOutcome = Union[ConversionResult, ConversionFailure]


class SessionState(str, Enum):
    EMPTY = "empty"
    FILE_LOADED = "file_loaded"
    FORMAT_CHOSEN = "format_chosen"
    CONVERTING = "converting"
    DONE = "done"
    ERROR = "error"


class SessionStateError(RuntimeError):
    """Raised when an operation is called in a state that does not allow it."""


class ConversionSession:
    """Owns one file, one chosen format and at most one result.

    Selecting a category or a file starts over. Each reset bumps a generation
    counter; an in-flight conversion compares it before committing a stage,
    so work started for a discarded file can never land in the new session.
    """

    def __init__(
        self,
        category: Category = Category.DOCUMENT,
        *,
        settings: Optional[Settings] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._on_progress = on_progress or (lambda _: None)
        self._category = Category(category)
        self._generation = 0
        self._ticker: Optional[ProgressTicker] = None
        self._source: Optional[SourceFile] = None
        self._format: Optional[FormatOption] = None
        self._result: Optional[ConversionResult] = None
        self._error: Optional[ConversionFailure] = None
        self._progress = 0
        self._state = SessionState.EMPTY
        load_plugins_from_settings(self._settings)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def category(self) -> Category:
        return self._category

    @property
    def formats(self) -> Tuple[FormatOption, ...]:
        return formats_for(self._category)

    @property
    def accept_rule(self) -> AcceptRule:
        return accept_rule_for(self._category)

    @property
    def source(self) -> Optional[SourceFile]:
        return self._source

    @property
    def selected_format(self) -> Optional[FormatOption]:
        return self._format

    @property
    def result(self) -> Optional[ConversionResult]:
        return self._result

    @property
    def error(self) -> Optional[ConversionFailure]:
        return self._error

    @property
    def progress(self) -> int:
        return self._progress

    def reset(self) -> None:
        self._generation += 1
        self._stop_ticker()
        self._source = None
        self._format = None
        self._result = None
        self._error = None
        self._progress = 0
        self._state = SessionState.EMPTY

    def select_category(self, category: Category) -> Tuple[FormatOption, ...]:
        self._category = Category(category)
        self.reset()
        return self.formats

    def select_file(self, file: SourceFile) -> bool:
        """Replace the session's file; returns False and enters ERROR when rejected."""
        self.reset()

        if not validate(file, self._category):
            logger.info("Rejected %s for %s", file.file_name, self._category.value)
            self._enter_error(ValidationRejected(rejection_message(self._category)).to_failure())
            return False

        limits = self._settings.file_limits
        if file.size_bytes > limits.max_file_size_bytes:
            logger.info("Rejected %s: %d bytes over limit", file.file_name, file.size_bytes)
            detail = f"{file.file_name} exceeds the {limits.max_file_size_mb} MB limit."
            self._enter_error(ValidationRejected(detail, code="ERR_FILE_TOO_LARGE").to_failure())
            return False

        self._source = file
        self._state = SessionState.FILE_LOADED
        return True

    def select_format(self, format_id: str) -> FormatOption:
        if self._state is SessionState.CONVERTING:
            raise SessionStateError("Cannot change the target format while converting")
        if self._source is None:
            raise SessionStateError("Select a file before choosing a target format")

        option = find_format(self._category, format_id)
        self._format = option
        self._result = None
        self._error = None
        self._progress = 0
        self._state = SessionState.FORMAT_CHOSEN
        return option

    async def start_conversion(self) -> Optional[ConversionOutcome]:
        """Run the conversion for the chosen file and format.

        Returns the result, or a failure descriptor when a stage fails. Returns
        ``None`` when the call is ignored: no format chosen yet, a conversion
        already running, or the session was reset before the work settled.
        """
        if self._state is not SessionState.FORMAT_CHOSEN:
            logger.warning("start_conversion ignored in state %s", self._state.value)
            return None

        source, option, category = self._source, self._format, self._category
        if source is None or option is None:
            raise SessionStateError("Select a file and a target format before converting")
        token = self._generation
        log = structlog.get_logger(__name__).bind(
            file=source.file_name, category=category.value, target=option.id
        )

        self._state = SessionState.CONVERTING
        self._progress = 0
        self._start_ticker()
        log.info("conversion started")

        try:
            content = await extract(source, category, settings=self._settings)
            if token != self._generation:
                log.info("discarding stale extraction")
                return None
            result = await encode(content, option, category, settings=self._settings)
        except ConversionError as exc:
            if token != self._generation:
                return None
            log.warning("conversion failed", error_code=exc.code, detail=exc.detail)
            return self._settle_failure(exc)
        except Exception as exc:
            if token != self._generation:
                return None
            logger.exception("Unexpected conversion failure for %s", source.file_name)
            return self._settle_failure(GenericConversionFailure(str(exc)))
        except asyncio.CancelledError:
            if token == self._generation:
                self._stop_ticker()
                self._state = SessionState.FORMAT_CHOSEN
            raise

        if token != self._generation:
            log.info("discarding stale result")
            return None

        self._stop_ticker()
        self._result = result
        self._state = SessionState.DONE
        self._set_progress(100)
        log.info("conversion finished", size_bytes=result.size_bytes, mime_type=result.mime_type)
        return result

    def _settle_failure(self, exc: ConversionError) -> ConversionFailure:
        self._stop_ticker()
        failure = exc.to_failure(GENERIC_FAILURE_MESSAGE)
        self._enter_error(failure)
        return failure

    def _enter_error(self, failure: ConversionFailure) -> None:
        self._error = failure
        self._result = None
        self._state = SessionState.ERROR

    def _set_progress(self, value: int) -> None:
        self._progress = value
        self._on_progress(value)

    def _start_ticker(self) -> None:
        conversion = self._settings.conversion
        self._ticker = ProgressTicker(
            self._set_progress,
            interval=conversion.progress_interval_sec,
            step=conversion.progress_step,
            cap=conversion.progress_cap,
            start=self._progress,
        )
        self._ticker.start()

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None


__all__ = ["ConversionSession", "SessionState", "SessionStateError", "ConversionOutcome"]
