from fastapi import FastAPI
from contextlib import asynccontextmanager
from .db import Base, engine
from . import models  # noqa: F401  (registers tables on Base.metadata)
from .errors import install_error_handlers
from .routes import assessments, reports


def _ensure_db_ready() -> None:
    Base.metadata.create_all(bind=engine)


# Run schema init at import time so pytest cannot bypass it
_ensure_db_ready()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _ensure_db_ready()
    yield


app = FastAPI(title="NRI Compliance Check API", lifespan=lifespan)

install_error_handlers(app)

app.include_router(assessments.router)
app.include_router(reports.router)


@app.get("/")
def health():
    return {"status": "ok", "service": "nricheck"}
