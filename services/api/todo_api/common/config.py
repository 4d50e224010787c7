import os


class Config():
    #Basic app settings
    APP_NAME = 'api' #Is gonna match the app root
    APP_VERSION = os.getenv("APP_VERSION", "0.1.1")
    SERVICE_NAME = 'Todo API'
    UVICORN_PORT = 8000
    UVICORN_HOST = '0.0.0.0'
    GIT_COMMIT = os.getenv("GIT_COMMIT", "[commit hash unknown]")
    MODE = os.getenv("MODE", "Local build")
    JSON_LOGS = int(os.getenv("JSON_LOGS", "0"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

    #Security settings
    DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
    DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "change-me-admin")
    JWT_SECRET = os.getenv("JWT_SECRET", "default-secret-key-change-this-in-production-minimum-256-bits")
    REFRESH_SECRET = os.getenv("REFRESH_SECRET", JWT_SECRET + "-refresh")
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "240"))
    REFRESH_TOKEN_EXPIRE_HOURS = int(os.getenv("REFRESH_TOKEN_EXPIRE_HOURS", str(7*24)))
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
    MIN_PASSWORD_LENGTH = 8

    #PostgreSQL
    DB_USER = os.getenv("POSTGRES_USER")
    DB_PASS = os.getenv("POSTGRES_PASSWORD")
    DB_NAME = os.getenv("POSTGRES_DB")
    DB_HOST = os.getenv("POSTGRES_HOST", 'db')
    DB_PORT = int(os.getenv("POSTGRES_PORT", "5432"))
    DB_URL = os.getenv("DB_URL") or f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"

    #DB Common
    DB_WAIT_INTERVAL_SECONDS = 10  #seconds
    DB_WAIT_MAX_RETRIES = 10
    DB_KWARGS = {
        'echo': False,
    }

    #OpenTelemetry, tracing is exported only when an endpoint is set
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "todo-api")
    OTEL_GRPC_ENDPOINT = os.getenv("OTEL_GRPC_ENDPOINT")
