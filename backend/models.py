import uuid
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Text

from database import Base


class Song(Base):
    __tablename__ = "songs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    artist = Column(String, nullable=True)
    base_chord = Column(String, nullable=False, default="C")
    lyrics_and_chords = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)
