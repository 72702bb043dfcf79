from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator


def _key_must_be_present(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("key must be a non-empty string")
    return v.strip()


class ChordTransposeRequest(BaseModel):
    chord: str
    from_key: str
    to_key: str

    @field_validator("from_key", "to_key")
    @classmethod
    def key_present(cls, v: str) -> str:
        return _key_must_be_present(v)


class ChordTransposeResponse(BaseModel):
    chord: str
    from_key: str
    to_key: str
    transposed: str


class MarkupTransposeRequest(BaseModel):
    document: str
    from_key: str
    to_key: str
    show_chords: bool = True

    @field_validator("from_key", "to_key")
    @classmethod
    def key_present(cls, v: str) -> str:
        return _key_must_be_present(v)


class MarkupTransposeResponse(BaseModel):
    from_key: str
    to_key: str
    supported: bool
    document: str


class SemitoneTransposeRequest(BaseModel):
    markup: str
    chords: List[str]
    semitones: Optional[int] = None
    from_key: Optional[str] = None
    to_key: Optional[str] = None

    @field_validator("semitones")
    @classmethod
    def semitones_in_octave(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not -11 <= v <= 11:
            raise ValueError("semitones must be between -11 and 11")
        return v

    @model_validator(mode="after")
    def interval_given(self) -> "SemitoneTransposeRequest":
        if self.semitones is None and (not self.from_key or not self.to_key):
            raise ValueError("provide semitones, or both from_key and to_key")
        return self


class SemitoneTransposeResponse(BaseModel):
    semitones: int
    chords: List[str]
    markup: str


class SelectOption(BaseModel):
    label: str
    value: str | int


class KeysResponse(BaseModel):
    major_keys: List[str]
    minor_keys: List[str]
    unmodeled_minor_keys: List[str]
    transpose_options: List[SelectOption]
    available_chords: List[SelectOption]
