import uuid
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models import Song
from schemas.song import (
    SongCreateRequest,
    SongParseRequest,
    SongRecord,
    SongViewResponse,
)
from services.authoring import convert_text_to_chord_html
from services.lyrics import parse_lyrics_and_chords
from services.markup import hide_chords, rewrite
from services.theory import is_supported_key

router = APIRouter()
logger = logging.getLogger(__name__)


def _song_to_record(song: Song) -> SongRecord:
    return SongRecord(
        id=song.id,
        title=song.title,
        artist=song.artist,
        base_chord=song.base_chord,
        lyrics_and_chords=song.lyrics_and_chords,
        created_at=song.created_at.isoformat() if song.created_at else None,
    )


def _load_song(song_id: str, db: Session) -> Song:
    song = db.query(Song).filter(Song.id == song_id).first()
    if not song:
        raise HTTPException(status_code=404, detail="Song not found")
    return song


@router.post("/songs/parse")
def parse_song(req: SongParseRequest) -> dict:
    return parse_lyrics_and_chords(req.text).model_dump()


@router.post("/songs")
def create_song(req: SongCreateRequest, db: Session = Depends(get_db)) -> dict:
    base_chord = req.base_chord or settings.default_key

    if req.plain_text is not None:
        content = convert_text_to_chord_html(req.plain_text, key=base_chord)
    else:
        content = req.lyrics_and_chords or ""

    song = Song(
        id=str(uuid.uuid4()),
        title=req.title,
        artist=req.artist,
        base_chord=base_chord,
        lyrics_and_chords=content,
    )
    db.add(song)
    db.commit()
    db.refresh(song)

    logger.info("Created song %s (%r, key=%s)", song.id, song.title, song.base_chord)
    return _song_to_record(song).model_dump()


@router.get("/songs/{song_id}")
def get_song(song_id: str, db: Session = Depends(get_db)) -> dict:
    return _song_to_record(_load_song(song_id, db)).model_dump()


@router.get("/songs/{song_id}/view")
def view_song(
    song_id: str,
    key: Optional[str] = None,
    show_chords: bool = True,
    db: Session = Depends(get_db),
) -> dict:
    song = _load_song(song_id, db)
    base_chord = song.base_chord or settings.default_key
    selected_key = key or base_chord
    supported = selected_key == base_chord or (
        is_supported_key(base_chord) and is_supported_key(selected_key)
    )
    applied_key = selected_key if supported else base_chord

    content = song.lyrics_and_chords or ""
    if content.strip():
        content = rewrite(content, base_chord, applied_key)
        if not show_chords:
            content = hide_chords(content)

    return SongViewResponse(
        song_id=song.id,
        base_chord=base_chord,
        requested_key=selected_key,
        key=applied_key,
        supported=supported,
        show_chords=show_chords,
        content=content,
    ).model_dump()
