# infrastructure/config/settings_loader.py
"""
BrowserSettings の読み込み（.env / 環境変数 / YAML）
"""
from __future__ import annotations

import os
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import dotenv_values

from domain.redirect import RedirectPolicy
from domain.settings import BrowserSettings

ENV_PREFIX = "BROWSER_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class SettingsError(Exception):
    pass


def _to_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise SettingsError(f"{key} must be a boolean, got: {raw!r}")


def _to_number(key: str, raw: Any, kind: type) -> Any:
    try:
        value = kind(raw)
    except (TypeError, ValueError) as e:
        raise SettingsError(f"{key} must be {kind.__name__}, got: {raw!r}") from e
    if value < 0:
        raise SettingsError(f"{key} must not be negative, got: {raw!r}")
    return value


def _to_policy(key: str, raw: Any) -> RedirectPolicy:
    try:
        return RedirectPolicy(str(raw).strip().lower())
    except ValueError as e:
        allowed = ", ".join(p.value for p in RedirectPolicy)
        raise SettingsError(f"{key} must be one of {allowed}, got: {raw!r}") from e


class SettingsLoader:
    """
    Build BrowserSettings from loosely typed sources.

    Unknown keys are ignored, missing keys keep their defaults,
    badly typed values raise SettingsError.
    """

    def __init__(self, base: Optional[BrowserSettings] = None):
        self._base = base or BrowserSettings()

    def from_mapping(self, data: Mapping[str, Any]) -> BrowserSettings:
        known = {f.name: f for f in fields(BrowserSettings)}
        values: Dict[str, Any] = {}

        for key, raw in data.items():
            name = str(key).lower()
            if name not in known or raw is None:
                continue
            default = getattr(self._base, name)
            if isinstance(default, bool):
                values[name] = _to_bool(name, raw)
            elif isinstance(default, RedirectPolicy):
                values[name] = _to_policy(name, raw)
            elif isinstance(default, (int, float)):
                values[name] = _to_number(name, raw, type(default))
            else:
                values[name] = str(raw)

        return replace(self._base, **values)

    def from_env(self, env_file: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> BrowserSettings:
        # .env の値より実際の環境変数を優先
        merged: Dict[str, Any] = {}
        if env_file is not None and env_file.exists():
            merged.update(dotenv_values(env_file))
        merged.update(os.environ if environ is None else environ)

        data = {k[len(ENV_PREFIX):]: v for k, v in merged.items() if k.upper().startswith(ENV_PREFIX)}
        return self.from_mapping(data)

    def from_yaml(self, path: str) -> BrowserSettings:
        p = Path(path)
        if not p.exists():
            raise SettingsError(f"Settings file not found: {path}")

        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            return self._base
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file is invalid: {path}")

        section = data.get("browser", data)
        if not isinstance(section, dict):
            raise SettingsError(f"'browser' section must be a mapping: {path}")
        return self.from_mapping(section)
