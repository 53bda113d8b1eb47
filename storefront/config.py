import os
from datetime import timedelta


class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-secret-change-me")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)

    # postgres only: tables live in their own schema
    DB_SCHEMA = os.getenv("DB_SCHEMA")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CREATE_TABLES = os.getenv("CREATE_TABLES", "1").lower() in {"1", "true", "yes"}
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    @classmethod
    def init_app(cls, app):
        if not app.config.get("SQLALCHEMY_DATABASE_URI"):
            if not os.getenv("DATABASE_URL"):
                os.makedirs(app.instance_path, exist_ok=True)
                app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'store.db')}"
            else:
                app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL")

        schema = app.config.get("DB_SCHEMA")
        uri = app.config["SQLALCHEMY_DATABASE_URI"]
        if schema and uri.startswith("postgresql"):
            options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
            options["connect_args"] = {"options": f"-csearch_path={schema}"}
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = options


class TestConfig(Config):
    TESTING = True
    JWT_SECRET_KEY = "test-secret-key-with-at-least-32-bytes"
    LOG_LEVEL = "DEBUG"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
