"""Shared test fixtures for mixpanel-mcp."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from mixpanel_mcp.config.schema import MixpanelConfig, ServerConfig

_CREDENTIAL_ENV = (
    "SERVICE_ACCOUNT_USER_NAME",
    "SERVICE_ACCOUNT_PASSWORD",
    "DEFAULT_PROJECT_ID",
    "MIXPANEL_REGION",
    "MIXPANEL_MCP_CONFIG",
)


@dataclass
class StubUpstream:
    """Canned Mixpanel responses plus a log of every request received."""

    status_code: int = 200
    json: Any = None
    text: str | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep the developer's credentials and config files out of tests."""
    for name in _CREDENTIAL_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mixpanel_config() -> MixpanelConfig:
    return MixpanelConfig(username="svc", password="secret", project_id="12345")


@pytest.fixture
def server_config(mixpanel_config: MixpanelConfig) -> ServerConfig:
    return ServerConfig(mixpanel=mixpanel_config)


@pytest.fixture
def upstream() -> StubUpstream:
    """Stubbed upstream answering ``200 {}`` until told otherwise."""
    return StubUpstream(json={})
