from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Menu Management"
    environment: str = "development"
    allowed_origins: str = "*"
    log_level: str = "INFO"

    @property
    def parsed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    # Store settings: "mongo" or "memory"
    store_backend: str = "mongo"

    # MongoDB settings (transactions need a replica set)
    mongo_uri: str = "mongodb://localhost:27017/?replicaSet=rs0"
    mongo_db_name: str = "menu"

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
