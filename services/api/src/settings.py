import os
from pydantic import BaseModel


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    aws_region: str = "us-east-1"
    errors_table: str
    errors_project_index: str = "project_id-created_at-index"
    errors_list_limit: int = 100

    # Symbolication
    fetch_timeout_seconds: float = 5.0
    sourcemap_cache_size: int = 0
    symbolicate_max_workers: int = 1

    # Reverse geocoding (Nominatim)
    geocode_url: str = "https://nominatim.openstreetmap.org/reverse"
    geocode_user_agent: str = "error-tracker/1.0"
    geocode_timeout_seconds: float = 5.0

    # Contact API proxied by /api/bio-data
    contact_api_base: str = "https://pixpro.app/api/employee"

    # Include exception text in 500 bodies (development only)
    expose_error_details: bool = False


def load_settings() -> Settings:
    return Settings(
        aws_region=os.getenv("AWS_REGION", "us-east-1"),
        errors_table=os.environ["ERRORS_TABLE"],
        errors_project_index=os.getenv("ERRORS_PROJECT_INDEX", "project_id-created_at-index"),
        errors_list_limit=int(os.getenv("ERRORS_LIST_LIMIT", "100")),
        fetch_timeout_seconds=float(os.getenv("FETCH_TIMEOUT_SECONDS", "5")),
        sourcemap_cache_size=int(os.getenv("SOURCEMAP_CACHE_SIZE", "0")),
        symbolicate_max_workers=int(os.getenv("SYMBOLICATE_MAX_WORKERS", "1")),
        geocode_url=os.getenv("GEOCODE_URL", "https://nominatim.openstreetmap.org/reverse"),
        geocode_user_agent=os.getenv("GEOCODE_USER_AGENT", "error-tracker/1.0"),
        geocode_timeout_seconds=float(os.getenv("GEOCODE_TIMEOUT_SECONDS", "5")),
        contact_api_base=os.getenv("CONTACT_API_BASE", "https://pixpro.app/api/employee"),
        expose_error_details=_flag("EXPOSE_ERROR_DETAILS"),
    )
