"""Process-wide dependency graph, constructed once at startup and kept on app.state."""

from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from warden.core.config import Settings
from warden.core.database import create_db_engine, create_session_factory
from warden.core.security import PasswordHasher
from warden.core.tokens import Clock, TokenService, utc_now
from warden.models.user import User
from warden.services.auth_service import AuthService
from warden.services.directory import SqlUserDirectory
from warden.services.seed import seed_admin


@dataclass
class Container:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    hasher: PasswordHasher
    tokens: TokenService

    def auth_service(self, db: Session) -> AuthService:
        """Bind the shared hasher and token service to a request-scoped directory."""
        return AuthService(SqlUserDirectory(db), self.hasher, self.tokens)

    def seed_default_admin(self) -> User | None:
        s = self.settings
        db = self.session_factory()
        try:
            return seed_admin(
                SqlUserDirectory(db),
                self.hasher,
                username=s.DEFAULT_ADMIN_USERNAME,
                email=s.DEFAULT_ADMIN_EMAIL,
                password=s.DEFAULT_ADMIN_PASSWORD.get_secret_value(),
            )
        finally:
            db.close()

    def close(self) -> None:
        self.engine.dispose()


def build_container(settings: Settings, engine: Engine | None = None, clock: Clock = utc_now) -> Container:
    engine = engine or create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    return Container(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        tokens=TokenService(settings.token_config(), clock=clock),
    )
