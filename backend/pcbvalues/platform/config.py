import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from pydantic import PrivateAttr
from pydantic_settings import BaseSettings

from ..components.matching.service import resolve_weights

_PACKAGE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class QuizConfig:
    """Explicit configuration handed to the scoring, matching and submission components."""

    axis_count: int
    version: str
    submit_url: str
    submit_timeout: float
    match_weights: Tuple[float, ...]
    max_flags: int


class Settings(BaseSettings):
    # Deployment environment
    DEPLOYMENT_ENV: str = "development"

    # Score store
    DATABASE_URL: str = "sqlite:///./pcbvalues.db"

    # Quiz shape
    AXIS_COUNT: int = 7
    APP_VERSION: str = "v1.0.0"
    DATA_DIR: str = str(_PACKAGE_DATA_DIR)

    # Submission endpoint used by the client-side guard
    SUBMIT_API_URL: str = "http://localhost:8000/api/v1/scores"
    SUBMIT_TIMEOUT_SECONDS: float = 10.0
    # Client-side session storage (answer timestamps, submission cache)
    LOCAL_STORE_PATH: str = "./.pcbvalues-local.json"

    # Match ranking weights as a JSON list, e.g. "[1, 1, 1, 0.5, 0.5, 0, 1]".
    # Empty means weight 1 for every axis.
    MATCH_WEIGHTS: str = ""

    # Record flags must stay below this bound
    MAX_FLAGS: int = 2**31

    # Flag editing endpoint is disabled while this is empty
    ADMIN_TOKEN: str = ""

    # URLs
    FRONTEND_URL: str = "http://localhost:5173"
    # Optional comma-separated extra CORS origins
    CORS_EXTRA_ORIGINS: Optional[str] = None

    # Observability
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: Optional[str] = None

    _match_weights: Tuple[float, ...] = PrivateAttr(default=())

    @property
    def match_weights(self) -> Tuple[float, ...]:
        return self._match_weights

    def _parse_match_weights(self) -> Tuple[float, ...]:
        raw = (self.MATCH_WEIGHTS or "").strip()
        if not raw:
            return resolve_weights(None, self.AXIS_COUNT)
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"MATCH_WEIGHTS is not valid JSON: {exc}") from exc
        if not isinstance(parsed, list) or not all(
            isinstance(w, (int, float)) and not isinstance(w, bool) for w in parsed
        ):
            raise ValueError("MATCH_WEIGHTS must be a JSON list of numbers.")
        return resolve_weights(parsed, self.AXIS_COUNT)

    @property
    def questions_path(self) -> Path:
        return Path(self.DATA_DIR) / "questions.json"

    @property
    def values_path(self) -> Path:
        return Path(self.DATA_DIR) / "values.json"

    @property
    def quiz_config(self) -> QuizConfig:
        return QuizConfig(
            axis_count=self.AXIS_COUNT,
            version=self.APP_VERSION,
            submit_url=self.SUBMIT_API_URL,
            submit_timeout=self.SUBMIT_TIMEOUT_SECONDS,
            match_weights=self.match_weights,
            max_flags=self.MAX_FLAGS,
        )

    def model_post_init(self, __context) -> None:
        if self.AXIS_COUNT < 1:
            raise ValueError("AXIS_COUNT must be a positive integer.")
        if self.SUBMIT_TIMEOUT_SECONDS <= 0:
            raise ValueError("SUBMIT_TIMEOUT_SECONDS must be positive.")
        self._match_weights = self._parse_match_weights()

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }


settings = Settings()
