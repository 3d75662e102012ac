"""Global configuration for the travel suggestion service.

This module loads environment variables from .env file and provides
centralized configuration for the entire application. Values are read once at
import time; services receive what they need explicitly at construction.
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env in the project root directory
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)

logger = logging.getLogger(__name__)


# ============================================================================
# Language Model Configuration
# ============================================================================

# Gemini model used for itinerary generation
DEFAULT_MODEL_NAME: str = os.getenv("DEFAULT_MODEL_NAME", "gemini-2.0-flash")

# Itineraries benefit from some variety between runs
ITINERARY_TEMPERATURE: float = float(os.getenv("ITINERARY_TEMPERATURE", "0.8"))


# ============================================================================
# Place Search Configuration
# ============================================================================

# Nearby search radius in meters
PLACES_SEARCH_RADIUS_M: int = int(os.getenv("PLACES_SEARCH_RADIUS_M", "25000"))

# HTTP timeout for the Places API, in seconds
PLACES_REQUEST_TIMEOUT_S: float = float(os.getenv("PLACES_REQUEST_TIMEOUT_S", "20"))


# ============================================================================
# Application Configuration
# ============================================================================

# FastAPI/Backend
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS Configuration
CORS_ORIGINS: List[str] = os.getenv("CORS_ORIGINS", "*").split(",") if os.getenv("CORS_ORIGINS") else ["*"]


# ============================================================================
# Itinerary Storage Configuration
# ============================================================================

# Redis connection URL (e.g., redis://localhost:6379/0 or redis://:password@host:port/0)
REDIS_URL: Optional[str] = os.getenv("REDIS_URL")


# ============================================================================
# AWS Configuration
# ============================================================================

# AWS Region
AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")

# AWS Secrets Manager secret name (optional, for storing API keys)
AWS_SECRETS_MANAGER_SECRET_NAME: Optional[str] = os.getenv("AWS_SECRETS_MANAGER_SECRET_NAME")


# ============================================================================
# AWS Secrets Manager Integration
# ============================================================================

def _get_secret_from_aws(secret_name: str, region: str = AWS_REGION) -> Optional[dict]:
    """Fetch secret from AWS Secrets Manager."""
    try:
        import boto3
        from botocore.exceptions import BotoCoreError, ClientError
    except ImportError:
        logger.warning("boto3 not installed. Cannot fetch secrets from AWS Secrets Manager.")
        return None

    try:
        client = boto3.client("secretsmanager", region_name=region)
        response = client.get_secret_value(SecretId=secret_name)
        return json.loads(response["SecretString"])
    except (BotoCoreError, ClientError) as e:
        logger.warning(f"Failed to fetch secret from AWS Secrets Manager: {e}")
        return None
    except (KeyError, ValueError) as e:
        logger.warning(f"Secret {secret_name} is not a JSON object: {e}")
        return None


def _get_api_key_with_fallback(env_var: str, secret_key: Optional[str] = None) -> Optional[str]:
    """Get API key from environment variable or AWS Secrets Manager."""
    # First try environment variable
    value = os.getenv(env_var)
    if value:
        return value

    # Then try AWS Secrets Manager if configured
    if AWS_SECRETS_MANAGER_SECRET_NAME and secret_key:
        secrets = _get_secret_from_aws(AWS_SECRETS_MANAGER_SECRET_NAME)
        if secrets and secret_key in secrets:
            return secrets[secret_key]

    return None


# ============================================================================
# API Keys (with AWS Secrets Manager support)
# ============================================================================

def get_google_api_key() -> Optional[str]:
    """Get Google API key (Gemini) - checks environment variables, then AWS Secrets Manager."""
    return (
        _get_api_key_with_fallback("GOOGLE_API_KEY", "GOOGLE_API_KEY")
        or _get_api_key_with_fallback("GEMINI_API_KEY", "GEMINI_API_KEY")
    )


def get_google_places_api_key() -> Optional[str]:
    """Get Google Places API key - GOOGLE_PLACES_API_KEY first, GOOGLE_MAPS_API_KEY as an alias."""
    return (
        _get_api_key_with_fallback("GOOGLE_PLACES_API_KEY", "GOOGLE_PLACES_API_KEY")
        or _get_api_key_with_fallback("GOOGLE_MAPS_API_KEY", "GOOGLE_MAPS_API_KEY")
    )


# ============================================================================
# Validation
# ============================================================================

def validate_api_keys() -> List[str]:
    """Validate that required API keys are present. Returns list of missing keys."""
    missing = []

    if not get_google_places_api_key():
        missing.append("GOOGLE_PLACES_API_KEY or GOOGLE_MAPS_API_KEY")

    if not get_google_api_key():
        missing.append("GOOGLE_API_KEY or GEMINI_API_KEY")

    return missing
