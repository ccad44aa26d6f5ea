import logging

from fastapi import FastAPI

from latexdesk import config
from latexdesk.routers import health, latex, projects, files
from latexdesk.db.db import engine
from latexdesk.db.base import Base
from latexdesk.db import models  # noqa: F401  (registers the tables)

logging.basicConfig(level=config.LOG_LEVEL)

Base.metadata.create_all(bind=engine)


app = FastAPI(
    title="latexdesk",
    root_path=config.ROOT_PATH,
)

app.include_router(health.router)
app.include_router(latex.router)
app.include_router(projects.router)
app.include_router(files.router)
