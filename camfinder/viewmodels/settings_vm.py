from __future__ import annotations

import math
import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping, Optional

from ..adapters.location_ip import DEFAULT_IP_LOCATION_URL
from ..adapters.windy_rest import DEFAULT_BASE_URL
from ..utils.logging import env_debug

ENV_PREFIX = "CAMFINDER_"


@dataclass
class SettingsConfig:
    """Typed runtime settings; held in memory for one session only."""

    api_base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    request_timeout_s: float = 10.0
    location_timeout_s: float = 10.0
    ip_location_url: str = DEFAULT_IP_LOCATION_URL


class SettingsVM:
    """Keeps app settings state and validation, no I/O here."""

    def __init__(self, *, config: Optional[SettingsConfig] = None) -> None:
        self.config = config or SettingsConfig()
        self.debug_logging: bool = env_debug()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def api_base_url(self) -> str:
        return self.config.api_base_url

    @api_base_url.setter
    def api_base_url(self, value: str) -> None:
        self.config = replace(self.config, api_base_url=self._coerce_url("api_base_url", value))

    @property
    def api_key(self) -> str:
        return self.config.api_key

    @api_key.setter
    def api_key(self, value: str) -> None:
        self.config = replace(self.config, api_key=self._coerce_optional_str(value))

    @property
    def request_timeout_s(self) -> float:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: float) -> None:
        coerced = self._coerce_seconds("request_timeout_s", value)
        self.config = replace(self.config, request_timeout_s=coerced)

    @property
    def location_timeout_s(self) -> float:
        return self.config.location_timeout_s

    @location_timeout_s.setter
    def location_timeout_s(self, value: float) -> None:
        coerced = self._coerce_seconds("location_timeout_s", value)
        self.config = replace(self.config, location_timeout_s=coerced)

    @property
    def ip_location_url(self) -> str:
        return self.config.ip_location_url

    @ip_location_url.setter
    def ip_location_url(self, value: str) -> None:
        self.config = replace(self.config, ip_location_url=self._coerce_url("ip_location_url", value))

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        return bool(self.api_key) and bool(self.api_base_url)

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply a flat settings mapping (CLI flags, env) to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed = {*SettingsConfig.__annotations__.keys(), "debug_logging"}
        unknown = set(payload.keys()) - allowed
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        for key in SettingsConfig.__annotations__.keys():
            if key in payload and payload[key] is not None:
                setattr(self, key, payload[key])

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Read ``CAMFINDER_*`` variables, e.g. ``CAMFINDER_API_KEY``."""
        env = os.environ if environ is None else environ
        payload = {}
        for key in SettingsConfig.__annotations__.keys():
            value = env.get(f"{ENV_PREFIX}{key.upper()}")
            if value:
                payload[key] = value
        self.apply_dict(payload)

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot["debug_logging"] = bool(self.debug_logging)
        return snapshot

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _coerce_optional_str(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _coerce_url(name: str, value: Any) -> str:
        text = SettingsVM._coerce_optional_str(value)
        if not text.startswith(("http://", "https://")):
            raise ValueError(f"{name} must be an http(s) URL.")
        return text

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_seconds(name: str, value: Any) -> float:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be a number of seconds.")
        try:
            coerced = float(value.strip() if isinstance(value, str) else value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} must be a number of seconds.") from exc
        if not math.isfinite(coerced) or coerced <= 0:
            raise ValueError(f"{name} must be positive.")
        return coerced
