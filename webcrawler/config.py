# === FILE: webcrawler/config.py ===
"""
Модуль для загрузки и валидации настроек краулера.
Используется Pydantic для описания схемы и проверки данных.
Все длительности задаются в секундах.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from webcrawler.errors import ConfigurationError

__all__ = ("CrawlerSettings", "DEFAULT_USER_AGENT", "build_settings", "load_config")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


class CrawlerSettings(BaseModel):
    """Неизменяемые настройки одного запуска краулера."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    fetch_timeout: float = Field(10.0, gt=0, description="Таймаут на загрузку одной страницы (секунд).")
    crawl_timeout: float = Field(30.0, ge=0, description="Таймаут всего обхода (секунд); 0 - завершить сразу.")
    concurrency: int = Field(8, ge=0, description="Число параллельных воркеров; 0 - один воркер.")
    max_depth: int = Field(16, ge=0, description="Максимальная глубина обхода; 0 - без ограничения.")
    politeness_base_delay: float = Field(
        0.5, ge=0, description="Базовая пауза между запросами к одному домену (секунд)."
    )
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    shutdown_grace: float = Field(
        2.0, ge=0, description="Сколько ждать завершения воркеров после остановки (секунд)."
    )
    retry_times: int = Field(0, ge=0, description="Число повторных попыток при 5xx/429.")
    same_domain_only: bool = Field(False, description="Обходить только домены стартовых URL.")

    @field_validator("user_agent", mode="before")
    def _strip_user_agent(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def worker_count(self) -> int:
        """Фактическое число воркеров: concurrency=0 трактуется как 1."""
        return max(1, self.concurrency)


def build_settings(data: Optional[Mapping[str, Any]] = None, **overrides: Any) -> CrawlerSettings:
    """
    Собирает CrawlerSettings из словаря и именованных переопределений.
    Значения None в overrides игнорируются. Ошибки валидации превращаются
    в ConfigurationError.
    """
    merged: Dict[str, Any] = dict(data or {})
    merged.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return CrawlerSettings(**merged)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigurationError(f"Некорректные настройки краулера: {problems}") from exc


_DEFAULT_CFG = Path("configs/default.yaml")


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


def load_config(path: Union[str, Path, None]) -> CrawlerSettings:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerSettings.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
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

    return build_settings(data)
