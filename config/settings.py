# config/settings.py
import os
import sys
from typing import Optional
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.constants import ExternalURIs
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")
    REDIS_URL: Optional[str] = Field(default=None, validation_alias="REDIS_URL")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(
        default="http://localhost:3000", validation_alias="ALLOWED_ORIGIN"
    )
    RATE_LIMIT_TIMES: int = Field(default=30, validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(default=60, validation_alias="RATE_LIMIT_SECONDS")
    TRUST_PROXY: bool = Field(default=False, validation_alias="TRUST_PROXY")

    # Anthropic Settings
    ANTHROPIC_API_URL: str = Field(
        default=ExternalURIs.ANTHROPIC_MESSAGES, validation_alias="ANTHROPIC_API_URL"
    )
    ANTHROPIC_API_KEY: str = Field(default="", validation_alias="ANTHROPIC_API_KEY")
    ANTHROPIC_MODEL: str = Field(
        default="claude-3-5-haiku-latest", validation_alias="ANTHROPIC_MODEL"
    )
    ANTHROPIC_VERSION: str = Field(
        default="2023-06-01", validation_alias="ANTHROPIC_VERSION"
    )
    PARSE_MAX_TOKENS: int = 1024
    PARSE_TEMPERATURE: float = 0.1
    GENERATE_MAX_TOKENS: int = 4096
    GENERATE_TEMPERATURE: float = 0.7

    # Google Custom Search
    GOOGLE_SEARCH_URL: str = ExternalURIs.GOOGLE_CUSTOM_SEARCH
    GOOGLE_SEARCH_API_KEY: str = Field(
        default="", validation_alias="GOOGLE_SEARCH_API_KEY"
    )
    GOOGLE_CSE_ID: str = Field(default="", validation_alias="GOOGLE_CSE_ID")
    SEARCH_MAX_RESULTS: int = 10

    # Pipeline stage deadlines (milliseconds)
    PARSE_TIMEOUT_MS: int = Field(default=20_000, validation_alias="PARSE_TIMEOUT_MS")
    SEARCH_TIMEOUT_MS: int = Field(
        default=20_000, validation_alias="SEARCH_TIMEOUT_MS"
    )
    GENERATE_TIMEOUT_MS: int = Field(
        default=20_000, validation_alias="GENERATE_TIMEOUT_MS"
    )

    # Streaming
    STREAM_BATCH_SIZE: int = Field(default=2, validation_alias="STREAM_BATCH_SIZE")
    STREAM_BATCH_DELAY_MS: int = Field(
        default=50, validation_alias="STREAM_BATCH_DELAY_MS"
    )
    STREAM_QUEUE_SIZE: int = Field(default=8, validation_alias="STREAM_QUEUE_SIZE")

    # Logging knobs
    LOGGER_NAME: str = "scholar-check"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    # Prompts
    PARSE_SYSTEM_PROMPT: str = (
        "You convert scholarship search queries into a structured JSON object.\n"
        "Extract caste (SC/ST/OBC/General), religion, state/city, and education level.\n"
        "Respond ONLY with a JSON object in this exact format (no other text, no code fences):\n"
        '{"caste":"<caste or empty string>","religion":"<religion or empty string>",'
        '"state":"<state/city or empty string>","educationLevel":"<education level or empty string>"}\n'
        "\n"
        'Example: for "Find scholarships for Hindu SC students in engineering in kolkata" respond\n'
        '{"caste":"SC","religion":"Hindu","state":"kolkata","educationLevel":"engineering"}\n'
    )

    GENERATE_SYSTEM_PROMPT: str = (
        "You are an expert scholarship search assistant. You analyze student backgrounds and "
        "find relevant scholarships across central and state government schemes, private "
        "institutions, NGOs, foundations and educational institutions.\n"
        "Consider caste-based reservations and schemes, religious minority scholarships, "
        "state-specific opportunities and education level requirements. Verify eligibility "
        "criteria, deadlines, documentation requirements and the selection process.\n"
        "IMPORTANT: Respond with a raw JSON object, do not wrap it in markdown code blocks.\n"
    )

    GENERATE_RESPONSE_FORMAT: str = (
        "Format the response in the following JSON structure:\n"
        "{\n"
        '  "scholarships": [\n'
        "    {\n"
        '      "title": "Scholarship Name",\n'
        '      "institution": "Provider Name",\n'
        '      "description": "Detailed description including benefits",\n'
        '      "eligibility": "Complete eligibility criteria",\n'
        '      "amount": "Scholarship amount and duration",\n'
        '      "deadline": "Application deadline",\n'
        '      "applicationLink": "URL to apply (use verified links from search results when available)",\n'
        '      "requirements": ["Required document 1", "Required document 2"],\n'
        '      "selectionProcess": "Selection process details",\n'
        '      "background": "Target background information"\n'
        "    }\n"
        "  ],\n"
        '  "summary": "A comprehensive summary of the search results",\n'
        '  "recommendations": ["Specific recommendation 1", "Specific recommendation 2"],\n'
        '  "additionalResources": [\n'
        '    {"title": "Resource name", "description": "How this can help", '
        '"link": "URL to resource (prefer verified links from search results)"}\n'
        "  ]\n"
        "}\n"
    )


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
