"""Application settings and the constant outbound header set."""

from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from pydantic_settings import BaseSettings, SettingsConfigDict

# Sent with every outbound fetch. Immutable so it can be shared across
# concurrent scrapes without copying.
DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "zh-CN,zh;q=0.8,en-US;q=0.5,en;q=0.3",
        "Accept-Encoding": "gzip, deflate, br",
        "DNT": "1",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
    }
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SCRAPEAI_", env_file=".env", extra="ignore")

    log_level: str = "INFO"
    scrape_rate_limit: str = "10/minute"
    max_content_size: int = 10 * 1024 * 1024  # 10 MB
    max_redirects: int = 10
    block_private_addresses: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
