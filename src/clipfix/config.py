import os

from pydantic import BaseModel, ConfigDict, Field

_ENV_PREFIX = "CLIPFIX_"
_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(_ENV_PREFIX + name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_call: str = "AudioClip.play"
    entity_suffix: str = ".entity"
    script_suffix: str = ".hx"
    project_marker_suffix: str = ".fraytools"
    first_unresolved_per_line: bool = False
    fail_fast: bool = False
    dry_run: bool = False
    max_depth: int | None = Field(default=64, ge=0)

    @classmethod
    def from_env(cls, **overrides: object) -> "Settings":
        """Build settings from ``CLIPFIX_*`` environment variables.

        Keyword overrides that are not ``None`` take precedence over the environment.
        """
        values: dict[str, object] = {
            "target_call": os.getenv(_ENV_PREFIX + "TARGET_CALL", "AudioClip.play"),
            "first_unresolved_per_line": _env_flag("FIRST_PER_LINE", False),
            "fail_fast": _env_flag("FAIL_FAST", False),
            "dry_run": _env_flag("DRY_RUN", False),
        }
        max_depth = os.getenv(_ENV_PREFIX + "MAX_DEPTH")
        if max_depth:
            # validated by the model, so a bad value raises ValidationError
            values["max_depth"] = max_depth.strip()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)

    def is_entity(self, name: str) -> bool:
        return name.endswith(self.entity_suffix)

    def is_script(self, name: str) -> bool:
        return name.endswith(self.script_suffix)

    def is_eligible(self, name: str) -> bool:
        return self.is_entity(name) or self.is_script(name)
