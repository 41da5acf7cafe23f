import os


class Settings:
    # Project Settings
    PROJECT_NAME: str = "Thread Tracking Statistics"
    VERSION: str = "0.1.0"

    # Statistics Settings
    # One of: critical, info, verbose, verbose2, verbose3
    STATISTICS_COLLECTION_LEVEL: str = os.getenv("STATISTICS_COLLECTION_LEVEL", "info")
    STATISTICS_LOG_INTERVAL_SEC: float = float(os.getenv("STATISTICS_LOG_INTERVAL_SEC", 30))

    # Stage analysis consumer
    THREADSTATS_ENABLE_STAGE_ANALYSIS: bool = os.getenv("THREADSTATS_ENABLE_STAGE_ANALYSIS", "false").lower() == "true"

    # Directory Settings
    LOG_DIR: str = os.getenv("THREADSTATS_LOG_DIR", "")


settings = Settings()
