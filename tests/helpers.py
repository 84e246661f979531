import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_api.config import Config
from portfolio_api.crud import user as crud_user
from portfolio_api.database.database import create_tables, get_db
from portfolio_api.main import create_app
from portfolio_api.utils.security import create_access_token
from portfolio_api.utils.storage import FallbackCache, LocalStorage


def make_session_factory():
    """Fresh in-memory SQLite database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


class DatabaseTestCase(unittest.TestCase):
    def setUp(self):
        self.Session = make_session_factory()
        self.db = self.Session()

    def tearDown(self):
        self.db.close()


class APITestCase(DatabaseTestCase):
    config_overrides = {}

    def setUp(self):
        super().setUp()
        self.cache = FallbackCache()
        self.storage = LocalStorage(self.cache)
        self.config = Config(LOG_LEVEL="WARNING", CORS_ORIGINS=["*"], **self.config_overrides)
        self.app = create_app(self.config, storage=self.storage)

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        self.app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(self.app)

    def create_user(self, username="admin", password="Sup3rSecret!", role="admin", **fields):
        return crud_user.create_user(self.db, username=username, password=password, role=role, **fields)

    def auth_headers(self, user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    def admin_headers(self):
        if not hasattr(self, "_admin"):
            self._admin = self.create_user(username="site-admin")
        return self.auth_headers(self._admin)
