from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "GetWiseAdvisor"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000"])

    # Currency rendering
    CURRENCY_SYMBOL: str = Field(default="₹")
    CURRENCY_GROUPING: Literal["western", "indian"] = Field(default="western")

    # Advisory engine
    CATEGORY_GUIDELINES_JSON: Optional[str] = Field(default=None)
    ADVICE_RANDOM_SEED: Optional[int] = Field(default=None)

    # Retirement projection assumptions
    RETIREMENT_CURRENT_AGE: int = 30
    RETIREMENT_AGE: int = 60
    RETIREMENT_YEARS_IN_RETIREMENT: int = 20
    RETIREMENT_INFLATION_RATE: float = 0.06
    RETIREMENT_PRE_RETURN: float = 0.10
    RETIREMENT_POST_RETURN: float = 0.07
    RETIREMENT_EXPENSE_RATIO: float = 0.8  # share of current income needed after retiring

    # Summary provider
    SUMMARY_TOP_CATEGORIES: int = Field(default=3, ge=1)
    SUMMARY_MAX_DAYS: int = Field(default=366, ge=1)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
