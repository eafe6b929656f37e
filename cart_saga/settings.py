import dataclasses
import os
from pathlib import Path

from dotenv import load_dotenv

from cart_saga.saga.retry_policy import RetryPolicy
from cart_saga.saga.step_client import PAYMENT, SHIPPING
from cart_saga.saga.step_executor import DEFAULT_STEP_TIMEOUT

__all__ = (
    'Settings',
    'load_settings',
)


@dataclasses.dataclass(frozen=True)
class Settings:
    payment_url: str = 'http://localhost:7282'
    shipping_url: str = 'http://localhost:7282'
    max_attempts: int = 3
    backoff_seconds: float = 1.0
    step_timeout: float = DEFAULT_STEP_TIMEOUT
    postgresql_url: str | None = None

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy.fixed(self.max_attempts, self.backoff_seconds)

    def step_urls(self) -> dict[str, str]:
        return {PAYMENT: self.payment_url, SHIPPING: self.shipping_url}


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Read settings from the environment, after loading an optional .env file.

    Variables already set in the environment win over the .env file.
    """
    load_dotenv(env_file)
    defaults = Settings()
    return Settings(
        payment_url=os.environ.get('CART_SAGA_PAYMENT_URL', defaults.payment_url),
        shipping_url=os.environ.get('CART_SAGA_SHIPPING_URL', defaults.shipping_url),
        max_attempts=int(os.environ.get('CART_SAGA_MAX_ATTEMPTS', defaults.max_attempts)),
        backoff_seconds=float(os.environ.get('CART_SAGA_BACKOFF_SECONDS', defaults.backoff_seconds)),
        step_timeout=float(os.environ.get('CART_SAGA_STEP_TIMEOUT', defaults.step_timeout)),
        postgresql_url=os.environ.get('CART_SAGA_POSTGRESQL_URL') or None,
    )
