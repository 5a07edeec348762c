"""
User-agent strings identifying the harness (or a plugin) to the backend.

    Vault/1.15.0 (+https://www.vaultproject.io/; python3.12.4)
    Vault/1.15.0-beta1+ent (+https://www.vaultproject.io/; azure-auth; python3.12.4; comment-0)

All inputs come from an explicit UserAgentConfig, so tests pin the version
and runtime instead of patching module state.
"""

from __future__ import annotations

from dataclasses import dataclass

from pkiext.config import HarnessSettings, UserAgentSettings
from pkiext.domain.models import PluginEnvironment


@dataclass(frozen=True, slots=True)
class UserAgentConfig:
    project_url: str
    runtime: str
    version: str
    product: str = "Vault"

    @classmethod
    def from_settings(cls, settings: HarnessSettings | UserAgentSettings) -> UserAgentConfig:
        ua = settings.useragent if isinstance(settings, HarnessSettings) else settings
        return cls(
            project_url=ua.project_url,
            runtime=ua.runtime,
            version=ua.version,
            product=ua.product,
        )


def _format(config: UserAgentConfig, version: str, comments: list[str]) -> str:
    return f"{config.product}/{version} ({'; '.join(comments)})"


def user_agent(config: UserAgentConfig, *comments: str) -> str:
    """`<product>/<version> (+<url>; <runtime>[; comments...])`"""
    return _format(
        config,
        config.version,
        [f"+{config.project_url}", config.runtime, *comments],
    )


def plugin_user_agent(
    config: UserAgentConfig,
    env: PluginEnvironment | None,
    plugin_name: str = "",
    *comments: str,
) -> str:
    """
    User-agent for a plugin, versioned by the backend that runs it.

    The version comes from `env` rather than `config`, with the prerelease
    and build metadata appended. Returns "" when no environment is available.
    """
    if env is None:
        return ""

    parts = [f"+{config.project_url}"]
    if plugin_name:
        parts.append(plugin_name)
    parts.append(config.runtime)
    parts.extend(comments)
    return _format(config, env.full_version, parts)
