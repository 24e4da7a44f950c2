from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    restEndpoint: str = "http://localhost:8000"
    graphqlEndpoint: str = "http://localhost:4000/graphql"
    requestTimeout: float = 30.0

    analyticalDatabasePath: str = "md:" # "md:" targets MotherDuck, anything else is a local DuckDB file or ":memory:"
    motherduckToken: str = ""
    motherduckDatabase: str = ""
    motherduckSchema: str = ""

    gridWindowSize: int = 150
    gridScrollThreshold: int = 200
    gridMaxSessions: int = 200
    gridIdleSeconds: float = 1800.0 # 0 keeps idle grids until dropped

    healthCheckInterval: float = 30.0 # 0 disables the background monitor
    exportPath: str = "./exports"
    logLevel: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="METACONSOLE_", extra="ignore")

settings = Settings()
