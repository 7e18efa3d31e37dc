"""Configuration and constants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables once
load_dotenv()

API_KEY_ENV = "DEEPSEEK_API_KEY"
DEFAULT_BASE_URL = "https://api.deepseek.com"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_BATCH_SIZE = 50


@dataclass
class TranslatorConfig:
    """Configuration for subtitle translator."""

    # API settings
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    model_name: str = DEFAULT_MODEL
    request_timeout: float = 60.0
    max_retries: int = 1

    # Processing settings
    batch_size: int = DEFAULT_BATCH_SIZE
    max_concurrency: Optional[int] = None

    # Document settings
    original_language: Optional[str] = None

    # Output settings
    output_dir: Optional[Path] = None

    def __post_init__(self):
        """Load API key from environment if not provided."""
        if self.api_key is None:
            self.api_key = os.environ.get(API_KEY_ENV)

    @classmethod
    def from_args(cls, args) -> "TranslatorConfig":
        """Create config from argparse namespace."""
        output_dir = getattr(args, 'output_dir', None)
        return cls(
            api_key=getattr(args, 'api_key', None) or None,
            base_url=getattr(args, 'base_url', DEFAULT_BASE_URL),
            model_name=getattr(args, 'model_name', DEFAULT_MODEL),
            max_retries=getattr(args, 'max_retries', 1),
            batch_size=getattr(args, 'batch_size', DEFAULT_BATCH_SIZE),
            max_concurrency=getattr(args, 'max_concurrency', None),
            original_language=getattr(args, 'original_language', None),
            output_dir=Path(output_dir) if output_dir else None,
        )

    def validate(self) -> Optional[str]:
        """
        Validate configuration.

        The API key is not checked here; a missing key is raised as
        ``MissingCredential`` when the backend is created.

        Returns:
            Error message if invalid, None if valid
        """
        if self.batch_size < 1:
            return f"Batch size must be at least 1, got {self.batch_size}"

        if self.max_concurrency is not None and self.max_concurrency < 1:
            return f"Max concurrency must be at least 1, got {self.max_concurrency}"

        if self.max_retries < 1:
            return f"Max retries must be at least 1, got {self.max_retries}"

        return None
