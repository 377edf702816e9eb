from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()

class JourneySettings(BaseSettings):
    assumed_total_data_points: int = 20
    storage_backend: str = "redis"  # "redis" or "memory"
    storage_key_prefix: str = "journey-v2"
    max_live_sessions: int = 1000  # sessions kept in memory per process; older ones reload from storage
    question_catalog_path: str = "assets/journey_questions.yml"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix='JOURNEY_')

class RedisSettings(BaseSettings):
    url: str = "redis://localhost:6379/0"
    socket_connect_timeout: float = 1.0
    socket_timeout: float = 2.0
    session_ttl_seconds: int = 60 * 60 * 24 * 30  # keep abandoned journeys for 30 days

    model_config = SettingsConfigDict(env_prefix='REDIS_')

# Instantiate settings
journey_settings = JourneySettings()
redis_settings = RedisSettings()
