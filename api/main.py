from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from admin import router as admin_router
from auth import router as auth_router
from core import db, files, schema, settings
from core.errors import register_exception_handlers
from core.logging_config import configure_logging
from newspapers import router as newspapers_router
from publications import router as publications_router
from seminars import router as seminars_router
from services import router as services_router
from uploads import router as uploads_router
from whistleblower import router as whistleblower_router

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Open the store once per process.
    await db.init_store()
    try:
        if settings.auto_create_schema():
            await schema.create_schema()
        files.ensure_upload_dirs()
        yield
    finally:
        await db.close_store()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(publications_router.router, tags=["publications"])
app.include_router(services_router.router, tags=["services"])
app.include_router(seminars_router.router, tags=["seminars"])
app.include_router(newspapers_router.router, tags=["newspapers"])
app.include_router(whistleblower_router.router, tags=["whistleblower"])
app.include_router(uploads_router.router, tags=["uploads"])
app.include_router(admin_router.router, tags=["admin"])

# Stored files are served as /uploads/<folder>/<filename>.
app.mount(files.URL_PREFIX, StaticFiles(directory=files.upload_root(), check_dir=False), name="uploads")


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "integriting api"}
