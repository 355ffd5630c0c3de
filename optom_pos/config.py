from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = Field(default="Optom POS", alias="APP_NAME")
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")

    # Backend remoto de la tienda (la lógica de negocio vive allá)
    shop_api_url: str = Field(default="http://127.0.0.1:8000/api", alias="SHOP_API_URL")
    shop_api_timeout: float = Field(default=15.0, alias="SHOP_API_TIMEOUT")

    # Tokens de sesión de la terminal
    secret_key: str = Field(default="optom_pos_secret_key_change_me_in_prod", alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60 * 12, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    default_currency: str = Field(default="so'm", alias="DEFAULT_CURRENCY")

    class Config:
        env_file = ".env"
        populate_by_name = True


settings = Settings()
