# === FILE: mixed_scout/config.py ===
"""
Загрузка и валидация конфигурации краулера MixedScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class CrawlConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: HttpUrl = Field(..., description="Стартовый URL обхода.")
    poll_interval: float = Field(
        2.0, gt=0, description="Интервал опроса очереди (секунд) между heartbeat-сообщениями."
    )
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("MixedScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    max_concurrency: Optional[int] = Field(
        None, ge=1, description="Макс. число одновременных загрузок (None - без ограничения)."
    )
    queue_size: int = Field(0, ge=0, description="Ёмкость очереди ссылок (0 - без ограничения).")

    @field_validator("start_url", mode="before")
    def _strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlConfig:
    """
    Читает YAML или JSON (если задан path), накладывает overrides и
    возвращает проверенный объект CrawlConfig.
    Значения overrides, равные None, игнорируются.
    """
    data: dict[str, Any] = {}
    if path is not None:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

        suffix = path_obj.suffix.lower()
        if suffix in (".yaml", ".yml"):
            data = _read_yaml(path_obj)
        elif suffix == ".json":
            data = _read_json(path_obj)
        else:
            raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    data.update({key: value for key, value in overrides.items() if value is not None})
    return CrawlConfig(**data)


__all__ = ["CrawlConfig", "load_config"]
