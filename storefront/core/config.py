from pydantic import BaseModel
import os

class Settings(BaseModel):
    DATABASE_URL: str = os.getenv('DATABASE_URL', 'sqlite:///./storefront.db')

    # Auth/JWT
    JWT_SECRET: str = os.getenv('JWT_SECRET', 'devsecret')
    JWT_ALGORITHM: str = os.getenv('JWT_ALGORITHM', 'HS256')
    ACCESS_TOKEN_EXPIRES_SECONDS: int = int(os.getenv('ACCESS_TOKEN_EXPIRES_SECONDS', '86400'))
    COOKIE_SECURE: bool = os.getenv('COOKIE_SECURE', 'false').lower() == 'true'

    # run alembic and set this to false outside local development
    AUTO_CREATE_SCHEMA: bool = os.getenv('AUTO_CREATE_SCHEMA', 'true').lower() == 'true'

    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

settings = Settings()
