# === FILE: page_scout/config.py ===
"""
Loading and validation of the PageScout client configuration.
Pydantic describes the schema and validates the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientConfig(BaseModel):
    """Settings shared by the navigation transport and the asset fetcher."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field("PageScoutBot/1.0", min_length=1, description="User-Agent header.")
    timeout: float = Field(10.0, gt=0, description="Total timeout of one exchange (seconds).")
    max_redirects: int = Field(10, ge=0, description="Redirect hops followed per navigation.")
    verify_ssl: bool = Field(True, description="Verify TLS certificates.")
    headers: Dict[str, str] = Field(default_factory=dict, description="Extra request headers.")

    @field_validator("headers", mode="before")
    def _drop_user_agent_header(cls, v: Any) -> Any:
        # User-Agent is configured through its own field
        if isinstance(v, dict):
            return {k: val for k, val in v.items() if str(k).lower() != "user-agent"}
        return v

    def request_headers(self) -> Dict[str, str]:
        """Headers sent with every request."""
        return {**self.headers, "User-Agent": self.user_agent}


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ClientConfig:
    """
    Read YAML or JSON and return a validated ClientConfig.
    Raises FileNotFoundError when the config file is missing.
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
        raise ValueError(f"Unsupported config format: {suffix}")

    return ClientConfig(**data)
