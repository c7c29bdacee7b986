"""REST endpoints for the artist catalog and the saved-artist slots."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.deps import DiarySession, get_session
from api.schemas.diary import ArtistListResponse, ArtistResponse, SlotsResponse, ToggleResponse
from core.diary.catalog import ARTISTS, DEFAULT_TEMPLATE, Artist, get_artist
from core.diary.slots import ArtistSlotInventory
from infrastructure.metrics import record_slot_toggle

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/artists", tags=["artists"])

Session = Annotated[DiarySession, Depends(get_session)]


def _artist(artist: Artist, inventory: ArtistSlotInventory) -> ArtistResponse:
    return ArtistResponse(
        id=artist.id,
        name=artist.name,
        subtitle=artist.subtitle,
        bio=artist.bio,
        style=artist.style,
        saved=artist.id in inventory,
    )


def _slots(inventory: ArtistSlotInventory) -> dict:
    return {
        "saved": list(inventory.saved_ids),
        "slots": inventory.slots(),
        "count": len(inventory),
        "capacity": inventory.capacity,
        "is_full": inventory.is_full,
    }


@router.get("/", response_model=ArtistListResponse)
def list_artists(session: Session) -> ArtistListResponse:
    """Artist catalog with each artist's saved flag."""
    return ArtistListResponse(
        artists=[_artist(a, session.inventory) for a in ARTISTS],
        default_template=_artist(DEFAULT_TEMPLATE, session.inventory),
    )


@router.get("/slots", response_model=SlotsResponse)
def list_slots(session: Session) -> SlotsResponse:
    """The stamp box: saved artist ids in order, padded with empty slots."""
    return SlotsResponse(**_slots(session.inventory))


@router.post("/{artist_id}/toggle", response_model=ToggleResponse)
def toggle_artist(artist_id: str, session: Session) -> ToggleResponse:
    """Save or unsave an artist. A full inventory answers 409 and stays unchanged."""
    if get_artist(artist_id) is None:
        logger.debug("toggling artist not in catalog: %s", artist_id)
    inventory = session.inventory
    was_saved = artist_id in inventory
    if not inventory.toggle(artist_id):
        record_slot_toggle("full")
        logger.warning("artist slots full (%d), rejected %s", len(inventory), artist_id)
        raise HTTPException(
            status_code=409,
            detail={
                "reason": "inventory_full",
                "message": "Your collection is full. Remove an artist first.",
            },
        )
    record_slot_toggle("removed" if was_saved else "added")
    return ToggleResponse(artist_id=artist_id, added=not was_saved, **_slots(inventory))
