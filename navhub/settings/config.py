from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
import os


def _get_default_site_root() -> str:
    """根据环境自动选择站点根目录（配置与语言包所在位置）"""
    if os.getenv("DOCKER_ENV") == "true" or os.path.exists("/.dockerenv"):
        return "/app/site"
    return "site"


def _get_default_state_path() -> str:
    """用户本地状态（收藏、语言、环境覆盖等）保存位置"""
    if os.getenv("DOCKER_ENV") == "true" or os.path.exists("/.dockerenv"):
        return "/app/data/state.json"
    return "data/state.json"


class Settings(BaseSettings):
    env: str = Field(default="dev")

    # Documents: env.json, links.*.json, i18n/*.json live under site_root.
    # Either an http(s) base URL or a local directory.
    site_root: str = Field(default_factory=_get_default_site_root)
    http_timeout: float = Field(default=10.0)

    # Reachability probe
    default_probe_timeout_ms: int = Field(default=1500)
    # None -> infer from site_root scheme
    secure_context: Optional[bool] = Field(default=None)

    # Client-local persisted state
    state_path: str = Field(default_factory=_get_default_state_path)
    default_language: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def is_secure_context(self) -> bool:
        if self.secure_context is not None:
            return self.secure_context
        return self.site_root.lower().startswith("https://")

    def system_language(self) -> str:
        return self.default_language or os.getenv("LANG") or "zh-CN"


settings = Settings()
