import logging

from fastapi import APIRouter

from schemas.transpose import (
    ChordTransposeRequest,
    ChordTransposeResponse,
    KeysResponse,
    MarkupTransposeRequest,
    MarkupTransposeResponse,
    SemitoneTransposeRequest,
    SemitoneTransposeResponse,
)
from services.lyrics import transpose_lyrics_and_chords
from services.markup import hide_chords, rewrite
from services.theory import (
    AVAILABLE_CHORDS,
    MAJOR_KEYS,
    MINOR_KEYS,
    TRANSPOSE_OPTIONS,
    UNMODELED_MINOR_KEYS,
    calculate_semitones,
    is_supported_key,
)
from services.transposer import transpose

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/keys")
def list_keys() -> dict:
    response = KeysResponse(
        major_keys=list(MAJOR_KEYS),
        minor_keys=list(MINOR_KEYS),
        unmodeled_minor_keys=list(UNMODELED_MINOR_KEYS),
        transpose_options=list(TRANSPOSE_OPTIONS),
        available_chords=list(AVAILABLE_CHORDS),
    )
    return response.model_dump()


@router.post("/transpose/chord")
def transpose_chord(req: ChordTransposeRequest) -> dict:
    response = ChordTransposeResponse(
        chord=req.chord,
        from_key=req.from_key,
        to_key=req.to_key,
        transposed=transpose(req.chord, req.from_key, req.to_key),
    )
    return response.model_dump()


@router.post("/transpose/markup")
def transpose_markup(req: MarkupTransposeRequest) -> dict:
    supported = is_supported_key(req.from_key) and is_supported_key(req.to_key)
    document = rewrite(req.document, req.from_key, req.to_key)
    if not req.show_chords:
        document = hide_chords(document)

    logger.info(
        "Transposed markup %s -> %s (%d chars, supported=%s)",
        req.from_key, req.to_key, len(req.document), supported,
    )
    response = MarkupTransposeResponse(
        from_key=req.from_key,
        to_key=req.to_key,
        supported=supported,
        document=document,
    )
    return response.model_dump()


@router.post("/transpose/semitones")
def transpose_semitones(req: SemitoneTransposeRequest) -> dict:
    semitones = req.semitones
    if semitones is None:
        semitones = calculate_semitones(req.from_key, req.to_key)

    response = SemitoneTransposeResponse(
        semitones=semitones,
        chords=req.chords,
        markup=transpose_lyrics_and_chords(req.markup, req.chords, semitones),
    )
    return response.model_dump()
