import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    APP_VERSION: str = "1.0.0"
    RULESET_VERSION: str = "v1-19-rules"
    SCHEMA_VERSION: str = "v1-report-snapshot"


    # --- CONFIG ---
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./nricheck.db")
    LOG_LEVEL = os.getenv("NRICHECK_LOG_LEVEL", "INFO").upper()
    REPORT_FROM_EMAIL = os.getenv("REPORT_FROM_EMAIL", "IndiaOS <onboarding@resend.dev>")

    # --- REPORT ---
    REPORT_ATTACHMENT_NAME = "NRI-Compliance-Report.pdf"

@lru_cache
def get_settings():
    return Settings()
