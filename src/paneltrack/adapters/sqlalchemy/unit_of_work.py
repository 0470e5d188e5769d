"""SQLAlchemy-backed unit of work for panel, history and register repositories."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from paneltrack.adapters.sqlalchemy.mappings import start_mappers
from paneltrack.adapters.sqlalchemy.migrations import upgrade_head
from paneltrack.adapters.sqlalchemy.repositories import (
    SqlAlchemyBuildingRepository,
    SqlAlchemyItemRepository,
    SqlAlchemyPanelRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyStatusHistoryRepository,
)
from paneltrack.config import get_database_uri
from paneltrack.domain.ports import PanelRepositories, PersistenceError, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call paneltrack.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, mappers, schema and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_uri(), future=True
    )
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Commit failed: {exc}") from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[PanelRepositories]):
    """Unit of work managing SQLAlchemy sessions for the panel tracker."""

    def _build_repositories(self, session: Session) -> PanelRepositories:
        return PanelRepositories(
            panels=SqlAlchemyPanelRepository(session),
            history=SqlAlchemyStatusHistoryRepository(session),
            projects=SqlAlchemyProjectRepository(session),
            buildings=SqlAlchemyBuildingRepository(session),
            items=SqlAlchemyItemRepository(session),
        )


if TYPE_CHECKING:
    from paneltrack.domain.ports import PanelUnitOfWork

    _uow_check: PanelUnitOfWork = SqlAlchemyUnitOfWork()
