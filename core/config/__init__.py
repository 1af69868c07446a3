#!/usr/bin/env python3
"""Modular configuration system for the LazyMint backend

Configuration hierarchy:
- infra_config: PostgreSQL document store and Google Cloud Storage bucket
- service_config: Notification service and public web URLs
- logging_config: Logging configuration
- lazymint_config: Claim workflow limits, auth settings and the combined config
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig
from .infra_config import InfraConfig
from .service_config import ServiceConfig
from .lazymint_config import LazyMintConfig, ClaimConfig, AuthConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = LazyMintConfig.from_env()


def get_settings() -> LazyMintConfig:
    """Get global settings instance"""
    return settings


def reload_settings() -> LazyMintConfig:
    """Reload settings from environment"""
    global settings
    settings = LazyMintConfig.from_env()
    return settings


__all__ = [
    'LazyMintConfig',
    'get_settings',
    'reload_settings',
    'settings',
    'LoggingConfig',
    'InfraConfig',
    'ServiceConfig',
    'ClaimConfig',
    'AuthConfig',
]
