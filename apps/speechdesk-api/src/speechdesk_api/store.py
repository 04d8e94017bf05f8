"""SQL-backed store for saved speeches and their audio."""
from __future__ import annotations
from typing import Any, Dict, List, Tuple

from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from speechdesk_common.errors import NotFoundError, PersistenceError, ValidationError
from speechdesk_common.logging import get_logger

from .blobs import FileBlobStore
from .engine import VoiceParams
from .models import Base, Speech

log = get_logger(__name__)

SPEAKING_RATE_RANGE = (0.25, 4.0)
PITCH_RANGE = (-20.0, 20.0)


def validate_voice_params(params: VoiceParams) -> None:
    lo, hi = SPEAKING_RATE_RANGE
    if params.speaking_rate is not None and not lo <= params.speaking_rate <= hi:
        raise ValidationError(f"speaking_rate must be between {lo} and {hi}")
    lo, hi = PITCH_RANGE
    if params.pitch is not None and not lo <= params.pitch <= hi:
        raise ValidationError(f"pitch must be between {lo} and {hi}")


class SpeechStore:
    """Speech metadata in a SQL database, audio in a ``FileBlobStore``.

    A record and its blob are created together and deleted together.
    """

    def __init__(self, database_url: str, blobs: FileBlobStore):
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine = create_engine(database_url, echo=False, pool_pre_ping=True, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        self.blobs = blobs

    def init_db(self):
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        return self.SessionLocal()

    def close(self):
        self.engine.dispose()

    # ---------- Health Check ----------
    def validate_store(self) -> Tuple[bool, str]:
        try:
            with self.get_session() as session:
                session.execute(select(1))
        except SQLAlchemyError as e:
            return False, str(e)
        if not self.blobs.root.is_dir():
            return False, f"audio directory missing: {self.blobs.root}"
        return True, "ok"

    # ---------- Speeches ----------
    def _to_dict(self, speech: Speech) -> Dict[str, Any]:
        item = speech.to_dict()
        if not self.blobs.exists(item["audio_key"]):
            item["audio_key"] = None
        return item

    def create(self, text: str, params: VoiceParams, audio: bytes | None) -> Dict[str, Any]:
        """Persist a speech row and its audio blob, or neither."""
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Text can't be blank")
        validate_voice_params(params)

        audio_key = self.blobs.put(audio) if audio else None
        try:
            with self.get_session() as session:
                speech = Speech(
                    text=text,
                    voice_name=params.voice_name,
                    language_code=params.language_code,
                    speaking_rate=params.speaking_rate,
                    pitch=params.pitch,
                    audio_key=audio_key,
                )
                session.add(speech)
                session.commit()
                session.refresh(speech)
                item = self._to_dict(speech)
        except SQLAlchemyError as e:
            if audio_key:
                self.blobs.delete(audio_key)
            log.error("speech_save_failed", error=str(e))
            raise PersistenceError(f"Failed to save speech: {e}") from e

        log.info("speech_created", id=item["id"], voice_name=params.voice_name, has_audio=audio_key is not None)
        return item

    def list(self) -> List[Dict[str, Any]]:
        """All speeches, newest first."""
        with self.get_session() as session:
            query = select(Speech).order_by(Speech.created_at.desc(), Speech.id.desc())
            speeches = session.execute(query).scalars().all()
            return [self._to_dict(s) for s in speeches]

    def _find(self, session: Session, speech_id: int) -> Speech | None:
        try:
            return session.get(Speech, speech_id)
        except OverflowError:
            # wider than an SQL INTEGER, so no such row
            return None

    def get(self, speech_id: int) -> Dict[str, Any]:
        with self.get_session() as session:
            speech = self._find(session, speech_id)
            if not speech:
                raise NotFoundError("Speech not found")
            return self._to_dict(speech)

    def get_audio(self, speech_id: int) -> bytes:
        item = self.get(speech_id)
        if not item["audio_key"]:
            raise NotFoundError("Speech has no audio")
        try:
            return self.blobs.get(item["audio_key"])
        except FileNotFoundError:
            raise NotFoundError("Speech has no audio") from None

    def delete(self, speech_id: int) -> None:
        """Delete a speech and release its audio blob."""
        with self.get_session() as session:
            speech = self._find(session, speech_id)
            if not speech:
                raise NotFoundError("Speech not found")
            audio_key = speech.audio_key
            session.delete(speech)
            session.commit()
        if audio_key and not self.blobs.delete(audio_key):
            log.warning("speech_audio_already_missing", id=speech_id, key=audio_key)
        log.info("speech_deleted", id=speech_id)
