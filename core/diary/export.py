"""Export requests handed to a rasterizing collaborator.

The core does not draw anything. It exposes the same read-only snapshot the
renderer gets, plus the target aspect ratio and a download filename.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.diary.draft import DraftNoteStore, RenderSnapshot
from core.diary.types import DiaryEntry

ExportRatio = Literal["1:1", "4:3"]

EXPORT_RATIOS: tuple[str, ...] = ("1:1", "4:3")
WATERMARK = "designed by 花语"


@dataclass(frozen=True)
class ExportRequest:
    snapshot: RenderSnapshot
    ratio: ExportRatio
    filename: str
    watermark: str = WATERMARK

    @property
    def aspect(self) -> tuple[int, int]:
        """Ratio as ``(width, height)``."""
        width, height = self.ratio.split(":")
        return int(width), int(height)


def export_filename(epoch_ms: int) -> str:
    return f"diary-{epoch_ms}.png"


def entry_snapshot(entry: DiaryEntry) -> RenderSnapshot:
    """Saved entries do not store a layout, they render with variant 0."""
    return RenderSnapshot(text=entry.text, images=entry.images, style=entry.style, layout_variant=0)


def export_draft(draft: DraftNoteStore, ratio: ExportRatio, epoch_ms: int) -> ExportRequest:
    return _build(draft.snapshot(), ratio, epoch_ms)


def export_entry(entry: DiaryEntry, ratio: ExportRatio, epoch_ms: int) -> ExportRequest:
    return _build(entry_snapshot(entry), ratio, epoch_ms)


def _build(snapshot: RenderSnapshot, ratio: str, epoch_ms: int) -> ExportRequest:
    if ratio not in EXPORT_RATIOS:
        raise ValueError(f"ratio must be one of {list(EXPORT_RATIOS)}, got {ratio!r}")
    return ExportRequest(
        snapshot=snapshot,
        ratio=ratio,  # type: ignore[arg-type]
        filename=export_filename(epoch_ms),
    )
