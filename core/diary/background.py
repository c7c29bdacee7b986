"""
Background removal — result types and the per-draft state machine.

The external call itself lives behind ``BackgroundTransport`` (see
``ingestion/background_remover.py``); this module only decides what a call
means for the draft.

State machine::

    IDLE ──(trigger)──→ PROCESSING ──(image returned)──→ SUCCESS ──→ IDLE
                             │
                             └──(anything else)──────→ FAILED ──→ IDLE

Outcomes are a tagged union (``RemovalSuccess | RemovalFailure``), never an
exception. On failure the draft's image is left exactly as it was.

Both triggers (the manual "scissors" button and the automatic run after a
camera capture) go through ``BackgroundRemovalPipeline.run``.
"""

from __future__ import annotations

import base64
import binascii
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Protocol

from core.diary.draft import DraftNoteStore

FAILURE_NOTICE = "Couldn't remove the background. Your original photo is kept."

_DATA_URI_RE = re.compile(r"^data:image/[\w.+-]+;base64,")


class RemovalState(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


class RemovalTrigger(Enum):
    MANUAL = "manual"
    CAPTURE = "capture"


@dataclass(frozen=True)
class RemovalSuccess:
    image: str
    ok: Literal[True] = True


@dataclass(frozen=True)
class RemovalFailure:
    """A recoverable failure.

    Attributes:
        reason: Machine-readable code: ``transport_error``, ``bad_status``,
            ``missing_image``, ``circuit_open``, ``not_configured``,
            ``invalid_image``, ``busy`` or ``no_image``.
        message: Human-readable detail for logs.
    """

    reason: str
    message: str = ""
    ok: Literal[False] = False


RemovalResult = RemovalSuccess | RemovalFailure


class BackgroundRemovalError(Exception):
    """Raised by transports for failures they can classify.

    Args:
        reason: One of the ``RemovalFailure.reason`` codes.
        message: Detail for logs.
        status_code: HTTP status of the failed response, if any.
    """

    def __init__(self, reason: str, message: str = "", status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        super().__init__(message or reason)


class BackgroundTransport(Protocol):
    """Anything that can turn an image data URI into a background-free one."""

    async def remove(self, image: str) -> str: ...


# ---------------------------------------------------------------------------
# Data URI helpers
# ---------------------------------------------------------------------------


def strip_data_uri(image: str) -> str:
    """Return the base64 payload of an image data URI (or the input unchanged)."""
    return _DATA_URI_RE.sub("", image, count=1)


def decode_image(image: str) -> bytes:
    """Decode an image data URI or bare base64 string to bytes.

    Raises:
        BackgroundRemovalError: ``invalid_image`` if the payload is not base64.
    """
    payload = strip_data_uri(image)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BackgroundRemovalError("invalid_image", "image is not valid base64") from exc
    if not data:
        raise BackgroundRemovalError("invalid_image", "image is empty")
    return data


def to_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    """Encode raw image bytes as a data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def image_from_service_body(body: Any) -> str:
    """Extract the ``image`` field from a service response body.

    Any shape without a non-empty string ``image`` field is a failure,
    whatever the HTTP status was.

    Raises:
        BackgroundRemovalError: ``missing_image``.
    """
    if isinstance(body, Mapping):
        image = body.get("image")
        if isinstance(image, str) and image:
            return image
        error = body.get("error")
        if error:
            raise BackgroundRemovalError("missing_image", str(error))
    raise BackgroundRemovalError("missing_image", "response has no image field")


# ---------------------------------------------------------------------------
# Remover and pipeline
# ---------------------------------------------------------------------------


class BackgroundRemover:
    """Wraps a transport so every outcome is a ``RemovalResult``.

    ``remove_background`` is idempotent and side-effect free on failure.
    """

    def __init__(self, transport: BackgroundTransport) -> None:
        self._transport = transport

    async def remove_background(self, image: str) -> RemovalResult:
        try:
            result = await self._transport.remove(image)
        except BackgroundRemovalError as exc:
            return RemovalFailure(reason=exc.reason, message=str(exc))
        except Exception as exc:  # noqa: BLE001
            return RemovalFailure(reason="transport_error", message=str(exc))
        if not result:
            return RemovalFailure(reason="missing_image", message="transport returned no image")
        return RemovalSuccess(image=result)


class BackgroundRemovalPipeline:
    """Runs background removal against a draft's primary image.

    One request at a time: a trigger while PROCESSING is rejected with
    ``RemovalFailure("busy")`` and no call is made. There is no timeout
    here; the transport's own timeout bounds a run.
    ``transitions`` lists the states entered by the latest run.

    Args:
        remover: The wrapped transport.
        notify: Called with a user-facing message when a run fails.
    """

    def __init__(
        self,
        remover: BackgroundRemover,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self._remover = remover
        self._notify = notify
        self._state = RemovalState.IDLE
        self.transitions: list[RemovalState] = []
        self.last_result: RemovalResult | None = None
        self.last_trigger: RemovalTrigger | None = None

    @property
    def state(self) -> RemovalState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is RemovalState.PROCESSING

    def _enter(self, state: RemovalState) -> None:
        self._state = state
        self.transitions.append(state)

    async def run(
        self,
        draft: DraftNoteStore,
        trigger: RemovalTrigger = RemovalTrigger.MANUAL,
    ) -> RemovalResult:
        """Remove the background of the draft's primary image.

        On success the primary image is overwritten, unless the user has
        replaced it while the request was in flight. On failure the draft
        is untouched and ``notify`` receives ``FAILURE_NOTICE``.
        """
        if self.is_busy:
            return RemovalFailure(reason="busy", message="a removal is already in progress")
        source = draft.image
        if source is None:
            return RemovalFailure(reason="no_image", message="draft has no image")

        self.last_trigger = trigger
        self.transitions = []
        self._enter(RemovalState.PROCESSING)
        try:
            result = await self._remover.remove_background(source)
        except BaseException:
            self._enter(RemovalState.IDLE)
            raise

        if isinstance(result, RemovalSuccess):
            if draft.image == source:
                draft.set_image(result.image)
            self._enter(RemovalState.SUCCESS)
        else:
            self._enter(RemovalState.FAILED)
            if self._notify is not None:
                self._notify(FAILURE_NOTICE)
        self.last_result = result
        self._enter(RemovalState.IDLE)
        return result

    async def on_capture(
        self,
        draft: DraftNoteStore,
        image: str,
        *,
        auto_remove: bool,
    ) -> RemovalResult | None:
        """Attach a freshly captured photo, removing its background if enabled.

        Returns:
            The removal result, or None when ``auto_remove`` is off.
        """
        draft.set_image(image)
        if not auto_remove:
            return None
        return await self.run(draft, RemovalTrigger.CAPTURE)
