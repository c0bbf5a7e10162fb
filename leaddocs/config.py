from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|local|test|prod
    LOG_LEVEL: str = "INFO"

    # --- Minimal B2B Auth (API key) ---
    # Send: X-API-Key: <key>
    API_KEY: str | None = None

    # --- Workspace provider (google | memory) ---
    WORKSPACE_BACKEND: str = "google"
    GOOGLE_ACCESS_TOKEN: str | None = None
    GOOGLE_DRIVE_BASE_URL: str = "https://www.googleapis.com/drive/v3"
    GOOGLE_UPLOAD_BASE_URL: str = "https://www.googleapis.com/upload/drive/v3"
    GOOGLE_DOCS_BASE_URL: str = "https://docs.googleapis.com/v1"
    GOOGLE_SHEETS_BASE_URL: str = "https://sheets.googleapis.com/v4"

    # --- Folder roots ---
    LEADS_PHASE1_FOLDER_ID: str | None = None
    LEADS_PHASE2_FOLDER_ID: str | None = None

    # --- Phase one templates ---
    TEMPLATE_MNDA_ID: str = "1WLIM6zo6KkXvdwvJNVwcjr5aItjK6uBH0tP9di2xSyI"
    TEMPLATE_POA_ID: str = "1Fo3k4YiCddpxbcKJM7hO4OSgEBDKGvmSpK-36I9e17I"
    TEMPLATE_PROJECT_OVERVIEW_ID: str = "1cCE6f7BPUQL-aL7rUh-bjGUPUY5zJZhG_EF3fyZ638s"
    TEMPLATE_FORM_ID_ID: str = "1ycDXjy9ffxn0hoK1M_wXM9kCyxlOQY8HOOJrmx8oMrs"

    # --- Term sheet variants ---
    TERM_SHEET_BRIDGE_ID: str = "1iuofWttgMe3-JukJfaXJ8GpjZpJyLSspANGEwWpe09Q"
    TERM_SHEET_CONSTRUCTION_ID: str = "1elelqh7wwqHgFg5rsfPRM6BHnqLqmmlgzjlpXm122mk"
    TERM_SHEET_CONSTRUCTION_PLUS_ID: str = "128EYSDnvbDiiUvQNgLotuG4PzE4L3NXTwv-c94T9fbM"
    TERM_SHEET_PRE_DEV_ID: str = "14489OIl7NHRt1zPCGrLBa4va1_5P9atYH7pZyzsF8EU"
    TERM_SHEET_PERMANENT_DEBT_ID: str = "1F6rXTUrexAiPjtMobeLn1RjM8Vy01cjb6blgpW-z8HI"
    TERM_SHEET_WORKING_CAPITAL_ID: str = "1MZ1W52MApg4-Vv6NHdk9atomByH7VYQ5WfSCxQyGtqw"
    TERM_SHEET_OTHER_ID: str = "1rrVvc5KIq0uz7NZv7_Ytu8h1dcgimAq_v_13Z7Kx9AM"

    # --- Phase two templates (no defaults; set per deployment) ---
    TEMPLATE_FORM_C_ID: str | None = None
    TEMPLATE_PROJECT_SUMMARY_ID: str | None = None
    TEMPLATE_CERTIFICATION_STATEMENT_ID: str | None = None
    TEMPLATE_PROJECT_CARD_ID: str | None = None
    TEMPLATE_FILING_FORM_C_ID: str | None = None

    # --- Lead store (sheets | sql) ---
    LEAD_STORE_BACKEND: str = "sheets"
    LEAD_TRACKING_SHEET_ID: str | None = None
    LEAD_TRACKING_SHEET_NAME: str = "LeadTracking"
    LEADDOCS_DB_URL: str = "sqlite+aiosqlite:///./leaddocs.db"

    # --- Returning customers (optional) ---
    PREVIOUS_PROJECTS_SHEET_ID: str | None = None
    PREVIOUS_PROJECTS_SHEET_NAME: str = "Sheet1"

    # --- HTTP resilience ---
    HTTP_TIMEOUT_S: float = 30.0
    HTTP_MAX_RETRIES: int = 3
    HTTP_BACKOFF_BASE_S: float = 0.5
    HTTP_RATE_LIMIT_RPS: float = 5.0
    HTTP_CIRCUIT_FAIL_THRESHOLD: int = 5
    HTTP_CIRCUIT_RESET_S: float = 60.0

    # Upper bound for a single collaborator call (folder, copy, replace, row)
    EXTERNAL_CALL_TIMEOUT_S: float = 60.0

    # --- Identity policy ---
    # False keeps the "always produce a document" behaviour: missing names get placeholders.
    STRICT_IDENTITY: bool = False
    DEFAULT_CONTACT_FIRST_NAME: str = "Contact"
    DEFAULT_CONTACT_LAST_NAME: str = "Person"
    DEFAULT_CONTACT_EMAIL: str = "contact@example.com"

    # --- Document rendering ---
    # True skips bare single-word literals ("ein", "title") that can also match inside prose.
    SAFE_LITERALS_ONLY: bool = False

    # --- Uploads ---
    FILE_UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024

    CALENDAR_LINK: str = "https://calendly.com/climatize/consultation"


settings = Settings()
