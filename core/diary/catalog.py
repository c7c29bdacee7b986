"""Static reference data: daily prompts, artists, templates and moods."""

from __future__ import annotations

from dataclasses import dataclass

from core.diary.types import ArtistStyle

DAILY_THEMES: tuple[str, ...] = (
    "What made you smile today?",
    "A quiet moment you noticed",
    "Something you're grateful for",
    "A color that caught your eye",
    "The sound of your morning",
    "A small kindness you witnessed",
    "What your hands did today",
    "The taste of something familiar",
    "A place that felt like home",
    "Words you didn't say",
    "The light at this hour",
    "Something you let go of",
    "A memory that surfaced",
    "What the weather felt like",
    "A conversation worth remembering",
)


@dataclass(frozen=True)
class Artist:
    """An artist whose decorations a note can be styled with.

    The core only reads ``id`` and ``style``; the rest is display copy.
    """

    id: str
    name: str
    subtitle: str
    bio: str
    style: ArtistStyle


ARTISTS: tuple[Artist, ...] = (
    Artist(
        id="flora",
        name="Flora",
        subtitle="Watercolor botanist",
        bio=(
            "Flora draws inspiration from pressed wildflowers and vintage botanical "
            "illustrations. Her decorations feature delicate petals, trailing vines, "
            "and soft watercolor washes in muted pinks and greens."
        ),
        style="floral",
    ),
    Artist(
        id="sumi",
        name="Sumi",
        subtitle="Ink wash poet",
        bio=(
            "Sumi practices the art of sumi-e, creating contemplative ink wash "
            "compositions. Her style uses bold brushstrokes, negative space, and the "
            "quiet drama of black ink on white paper."
        ),
        style="ink",
    ),
)

# Not an artist: the plain template every user has without collecting anything.
DEFAULT_TEMPLATE = Artist(
    id="default",
    name="Classic",
    subtitle="Clean & minimal",
    bio="",
    style="geometric",
)

MOODS: tuple[tuple[str, str], ...] = (
    ("😊", "happy"),
    ("😌", "calm"),
    ("🥰", "loved"),
    ("😴", "tired"),
    ("😢", "sad"),
    ("😤", "upset"),
    ("🤔", "thoughtful"),
    ("🥳", "excited"),
)


def get_artist(artist_id: str) -> Artist | None:
    """Look up an artist (or the default template) by id."""
    if artist_id == DEFAULT_TEMPLATE.id:
        return DEFAULT_TEMPLATE
    for artist in ARTISTS:
        if artist.id == artist_id:
            return artist
    return None
