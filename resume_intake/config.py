"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env


def _env_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# API keys – never hardcode. No key disables the AI stage.
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
MODEL_NAME: str = os.getenv("MODEL_NAME", "gpt-4o-mini")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# LLM call settings
AI_TIMEOUT_SECONDS: float = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))
AI_MAX_RETRIES: int = int(os.getenv("AI_MAX_RETRIES", "1"))
AI_MAX_TOKENS: int = 1500
AI_TEXT_LIMIT: int = 4000  # Characters of resume text sent to the model

# Text acquisition settings
PDF_TIMEOUT_SECONDS: float = float(os.getenv("PDF_TIMEOUT_SECONDS", "20"))
MIN_TEXT_LENGTH: int = 10
HIGH_CONFIDENCE_TEXT_LENGTH: int = 50
BINARY_SCRAPE_MIN_LENGTH: int = 50
# Fabricates resume text from the filename when nothing else works; off unless asked for
ENABLE_SYNTHETIC_FALLBACK: bool = _env_bool("ENABLE_SYNTHETIC_FALLBACK", False)

# Summary length limits (characters)
SUMMARY_LIMIT_DEFAULT: int = 300
SUMMARY_LIMIT_AI: int = 500

# Skills vocabularies. Order matters: extracted skills follow vocabulary order.
SKILLS_VOCABULARY_TEXT: list = [
    "JavaScript", "Python", "Java", "C++", "React", "Node.js", "Angular", "Vue",
    "SQL", "MongoDB", "AWS", "Docker", "Kubernetes", "Git", "TypeScript",
    "HTML", "CSS", "Express", "Django", "Flask", "Spring", "REST API",
    "GraphQL", "Redis", "PostgreSQL", "MySQL", "CI/CD", "Agile", "Scrum",
]

SKILLS_VOCABULARY_ROBUST: list = [
    "JavaScript", "Python", "Java", "React", "Node.js", "HTML", "CSS",
    "MongoDB", "SQL", "Git", "Docker", "AWS", "TypeScript", "Vue.js",
    "Angular", "Express", "Django", "Spring", "PostgreSQL", "MySQL",
]

SKILLS_VOCABULARY_SAFE: list = [
    "JavaScript", "Python", "Java", "React", "Node.js", "HTML", "CSS",
    "MongoDB", "SQL", "Git", "Docker", "AWS", "TypeScript",
]
