from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from teraswitch.config import ProviderConfig
from teraswitch.observability import LogConfig, setup_logging, teardown_logging
from teraswitch.provider import TeraSwitchProvider

pytestmark = [pytest.mark.unit]


async def test_configure_logs_context_without_token(tmp_path: Path):
    log_file = tmp_path / "logs" / "teraswitch.log"
    handler_ids = setup_logging(LogConfig(level="DEBUG", file=str(log_file), console=False))
    provider = TeraSwitchProvider("1.2.3")
    try:
        outcome = await provider.configure(
            ProviderConfig(endpoint="https://api.example.test", api_token="super-secret"),
        )
        await provider.close()
    finally:
        teardown_logging(handler_ids)

    assert outcome.ok
    text = log_file.read_text()
    assert "Configured provider version=1.2.3 endpoint=https://api.example.test" in text
    assert "[component=provider]" in text
    assert "super-secret" not in text


async def test_disabled_by_default(tmp_path: Path):
    path = tmp_path / "out.log"
    hid = logger.add(path, level="DEBUG", format="{message}")
    try:
        await TeraSwitchProvider().configure(ProviderConfig(api_token="t"))
    finally:
        logger.remove(hid)
    assert "Configured provider" not in path.read_text()


def test_setup_returns_only_requested_handlers():
    handler_ids = setup_logging(LogConfig(console=False))
    try:
        assert handler_ids == []
    finally:
        teardown_logging(handler_ids)
