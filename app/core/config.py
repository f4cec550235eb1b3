import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./interview_reports.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
ANALYSIS_MODEL = os.getenv("ANALYSIS_MODEL", "gpt-4o-mini")
ANALYSIS_TEMPERATURE = float(os.getenv("ANALYSIS_TEMPERATURE", "0.2"))
ANALYSIS_TIMEOUT_SEC = float(os.getenv("ANALYSIS_TIMEOUT_SEC", "20"))

# ✅ Embeddings / rubric coverage
EMBEDDING_MODEL = (
    os.getenv("EMBEDDING_MODEL")
    or os.getenv("TEXT2VEC_OPENAI_MODEL")
    or "text-embedding-3-small"
)
SIM_THRESHOLD = float(os.getenv("SIM_THRESHOLD", "0.74"))
RUBRICS_DIR = os.getenv(
    "RUBRICS_DIR",
    os.path.join(os.path.dirname(os.path.dirname(__file__)), "rubrics"),
)

# ✅ Service
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
