from dataclasses import dataclass

from flask import Flask, current_app

from korsvagen_api.config.auth_config import AuthConfig
from korsvagen_api.config.settings import Settings
from korsvagen_api.core.clock import Clock, utcnow
from korsvagen_api.infrastructure.security.jwt_provider import JwtProvider
from korsvagen_api.infrastructure.security.password_hasher import PasswordHasher

EXTENSION_KEY = "korsvagen.auth"


@dataclass(frozen=True)
class AuthComponents:
    config: AuthConfig
    jwt_provider: JwtProvider
    password_hasher: PasswordHasher
    clock: Clock


def configure_app(app: Flask, settings: Settings, *, clock: Clock = utcnow) -> AuthComponents:
    app.config["ENV"] = settings.environment
    app.config["DEBUG"] = settings.debug
    app.config["KORSVAGEN_SETTINGS"] = settings

    auth_config = AuthConfig.from_settings(settings)
    components = AuthComponents(
        config=auth_config,
        jwt_provider=JwtProvider(auth_config, clock=clock),
        password_hasher=PasswordHasher(rounds=auth_config.bcrypt_rounds),
        clock=clock,
    )
    app.extensions[EXTENSION_KEY] = components
    return components


def get_auth_components() -> AuthComponents:
    return current_app.extensions[EXTENSION_KEY]


def get_app_settings() -> Settings:
    return current_app.config["KORSVAGEN_SETTINGS"]
