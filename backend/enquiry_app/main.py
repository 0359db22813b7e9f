import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlmodel import SQLModel
from fastapi.middleware.cors import CORSMiddleware

from enquiry_app import config
from enquiry_app.api import dashboard, enquiries, estimate, validate
from enquiry_app.db.session import get_engine

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = get_engine()
    SQLModel.metadata.create_all(engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(title="Website Enquiry Service", lifespan=lifespan)

# CORS for the questionnaire frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(estimate.router, prefix="/estimate", tags=["estimate"])
app.include_router(validate.router, prefix="/validate", tags=["validate"])
app.include_router(enquiries.router, prefix="/enquiries", tags=["enquiries"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])


@app.get("/")
async def root():
    return {"status": "ok", "service": "website-enquiry"}


def serve():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    serve()
