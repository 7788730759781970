# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from mixed_scout.config import CrawlConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("start_url: https://example.com\nmax_concurrency: 5", ".yaml", None),
        (json.dumps({"start_url": "https://example.com", "max_concurrency": 5}), ".json", None),
        ("{}", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yml", TypeError),
        ("[1, 2]", ".json", TypeError),
        ("{broken", ".json", ValueError),
        ("start_url = 'https://example.com'", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlConfig)
        assert str(cfg.start_url).rstrip("/") == "https://example.com"
        assert cfg.max_concurrency == 5


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_overrides_without_file():
    cfg = load_config(None, start_url=" https://example.com ", timeout=None, queue_size=3)
    assert str(cfg.start_url).rstrip("/") == "https://example.com"
    assert cfg.timeout == 10.0
    assert cfg.queue_size == 3


def test_defaults():
    cfg = CrawlConfig(start_url="https://example.com")
    assert cfg.poll_interval == 2.0
    assert cfg.max_concurrency is None
    assert cfg.queue_size == 0
    assert cfg.user_agent == "MixedScoutBot/1.0"


@pytest.mark.parametrize(
    "field,value",
    [
        ("poll_interval", 0),
        ("timeout", -1),
        ("max_concurrency", 0),
        ("queue_size", -1),
        ("user_agent", ""),
        ("unknown_option", 1),
    ],
)
def test_invalid_values(field, value):
    with pytest.raises(ValidationError):
        CrawlConfig(start_url="https://example.com", **{field: value})


def test_config_is_frozen():
    cfg = CrawlConfig(start_url="https://example.com")
    with pytest.raises(ValidationError):
        cfg.timeout = 1.0
