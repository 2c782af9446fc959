"""Runtime configuration read from environment variables."""
import os
import tempfile
from dataclasses import dataclass
from typing import Optional

from .models import CompanyInfo

VERSION = "1.0.0"


@dataclass
class Settings:
    output_dir: str
    default_language: str = "english"
    font_path: Optional[str] = None
    font_bold_path: Optional[str] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    @property
    def default_company(self) -> CompanyInfo:
        """Company printed when the caller supplies none."""
        return CompanyInfo(name="Travel Company")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> Settings:
    """Build settings from the environment."""
    port = os.environ.get("TOMS_PORT", "8000")
    return Settings(
        output_dir=os.environ.get(
            "TOMS_OUTPUT_DIR",
            os.path.join(tempfile.gettempdir(), "toms_documents")
        ),
        default_language=os.environ.get("TOMS_DEFAULT_LANGUAGE", "english"),
        font_path=os.environ.get("TOMS_PDF_FONT_PATH") or None,
        font_bold_path=os.environ.get("TOMS_PDF_FONT_BOLD_PATH") or None,
        log_level=os.environ.get("TOMS_LOG_LEVEL", "INFO").upper(),
        host=os.environ.get("TOMS_HOST", "0.0.0.0"),
        port=int(port) if port.isdigit() else 8000,
        reload=_env_flag("TOMS_RELOAD"),
    )
