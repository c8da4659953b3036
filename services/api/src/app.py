from dotenv import load_dotenv
from pathlib import Path

# Always load the .env from services/api/.env even if cwd changes
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")

from fastapi import FastAPI

from .dependencies import get_settings
from .routers import bio_data, errors

app = FastAPI(title="Error Tracker", version="1.0.0")

app.include_router(errors.router)
app.include_router(bio_data.router)


@app.get("/health")
def health():
    settings = get_settings()
    return {
        "status": "ok",
        "version": "1.0.0",
        "aws_region": settings.aws_region,
        "errors_table": settings.errors_table,
        "sourcemap_cache_size": settings.sourcemap_cache_size,
        "symbolicate_max_workers": settings.symbolicate_max_workers,
    }
