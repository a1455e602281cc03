from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from korsvagen_api.core.clock import Clock, utcnow

TModel = TypeVar("TModel")


class BaseRepository(Generic[TModel]):
    def __init__(self, session: Session, *, clock: Clock = utcnow) -> None:
        self._session = session
        self._now = clock

    def add(self, model: TModel) -> TModel:
        self._session.add(model)
        self._session.flush()
        return model
