import os

# must be set before latexdesk.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["USE_PDFLATEX"] = "false"
os.environ["LATEX_SERVER_URL"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from latexdesk.main import app  # noqa: E402
from latexdesk.db.base import Base  # noqa: E402
from latexdesk.db.db import engine, SessionLocal  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def user_headers():
    return {"X-User-Id": "user-1"}
