"""Base Pydantic model configuration for rating entities.

Everything the engine reads or produces is immutable for the duration of a
rating run, so all models freeze on construction.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseModelConfig(BaseModel):
    """Base model with strict configuration for all rating entities.

    Enforces:
    - Immutability (frozen=True)
    - No extra fields allowed (extra="forbid")
    - Automatic whitespace stripping
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )


class StateScopedModel(BaseModelConfig):
    """Record keyed by a two-letter state code.

    State codes are upper-cased on the way in so that reference data keyed
    as ``"ca"`` and payroll entered as ``"CA"`` land on the same records.
    """

    state_code: str = Field(..., max_length=2)

    @field_validator("state_code", mode="before")
    @classmethod
    def normalize_state_code(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v
