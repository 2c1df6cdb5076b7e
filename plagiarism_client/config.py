import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

load_dotenv()


class PresentationPolicy(BaseModel):
    """
    Presentation thresholds for the results view. These are display policy,
    not part of the backend contract.
    """
    headline_threshold: float = 20
    severity_medium: float = 40
    severity_high: float = 80

    @model_validator(mode="after")
    def _ordered(self):
        if self.severity_medium > self.severity_high:
            raise ValueError("severity_medium must not exceed severity_high")
        return self


class Settings(BaseModel):
    api_url: str = "http://localhost:8000"
    timeout: float = Field(default=120.0, gt=0)
    download_dir: str = "."
    log_level: str = "INFO"
    policy: PresentationPolicy = PresentationPolicy()

    @classmethod
    def from_env(cls) -> "Settings":
        policy = PresentationPolicy(
            headline_threshold=os.getenv("CHECKER_HEADLINE_THRESHOLD", 20),
            severity_medium=os.getenv("CHECKER_SEVERITY_MEDIUM", 40),
            severity_high=os.getenv("CHECKER_SEVERITY_HIGH", 80),
        )
        return cls(
            api_url=os.getenv("CHECKER_API_URL", "http://localhost:8000"),
            timeout=os.getenv("CHECKER_TIMEOUT", 120),
            download_dir=os.getenv("CHECKER_DOWNLOAD_DIR", "."),
            log_level=os.getenv("CHECKER_LOG_LEVEL", "INFO").upper(),
            policy=policy,
        )
