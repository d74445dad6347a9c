from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()


class CompassSettings(BaseSettings):
    dataset_path: str = "assets/political_compass.yml"
    log_level: str = "INFO"

    # Used when the dataset's question_logic does not set its own interval
    comprehensive_interval: int = 10

    centrist_veto_threshold: float = 30.0
    centrist_penalty: float = 10000.0
    centrist_markers: List[str] = ["中间派", "centrist"]

    match_scale: float = 2.5
    top_matches: int = 3

    model_config = SettingsConfigDict(env_prefix='COMPASS_')


def get_settings() -> CompassSettings:
    return CompassSettings()


if __name__ == "__main__":
    # For testing the configuration loading
    settings = get_settings()
    print("Compass Configuration:")
    print(f"  Dataset: {settings.dataset_path}")
    print(f"  Log level: {settings.log_level}")
    print(f"  Comprehensive interval: {settings.comprehensive_interval}")
    print(f"  Centrist veto: |value| <= {settings.centrist_veto_threshold}, penalty {settings.centrist_penalty}")
    print(f"  Match scale: {settings.match_scale}, top matches: {settings.top_matches}")
    print("\nOverride with environment variables like COMPASS_DATASET_PATH, COMPASS_LOG_LEVEL, COMPASS_TOP_MATCHES.")
