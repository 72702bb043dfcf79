from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator


class ParsedSong(BaseModel):
    lyrics_and_chords: str
    lyrics: str
    chords: List[str]


class SongParseRequest(BaseModel):
    text: str


class SongCreateRequest(BaseModel):
    title: str
    artist: Optional[str] = None
    base_chord: Optional[str] = None
    lyrics_and_chords: Optional[str] = None
    plain_text: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must be a non-empty string")
        return v.strip()

    @model_validator(mode="after")
    def one_content_source(self) -> "SongCreateRequest":
        if self.lyrics_and_chords is not None and self.plain_text is not None:
            raise ValueError("provide either lyrics_and_chords or plain_text, not both")
        return self


class SongRecord(BaseModel):
    id: str
    title: str
    artist: Optional[str] = None
    base_chord: str
    lyrics_and_chords: str
    created_at: Optional[str] = None


class SongViewResponse(BaseModel):
    song_id: str
    base_chord: str
    requested_key: str
    key: str
    supported: bool
    show_chords: bool
    content: str
