"""Reference data read by the rating engine: class code rates and territories."""

from datetime import date

from pydantic import Field, model_validator

from .base import BaseModelConfig, StateScopedModel


class ClassCodeRate(StateScopedModel):
    """Base rate for a class code, versioned by effective date."""

    class_code: str = Field(..., min_length=1, max_length=10)
    effective_date: date = Field(...)
    base_rate: float = Field(..., ge=0.0, description="Rate per $100 of payroll")
    hazard_group: str = Field(default="A", max_length=2)
    industry_group: str = Field(default="Unknown", max_length=100)
    governing_class: bool = Field(default=False)
    limited_losses: bool = Field(default=False)


class ZipRange(BaseModelConfig):
    """Inclusive range of five-digit ZIP codes."""

    start: int = Field(..., ge=0, le=99999)
    end: int = Field(..., ge=0, le=99999)

    @model_validator(mode="after")
    def check_bounds(self) -> "ZipRange":
        if self.end < self.start:
            raise ValueError(f"ZIP range end {self.end} precedes start {self.start}")
        return self

    def contains(self, zip_number: int) -> bool:
        return self.start <= zip_number <= self.end


class Territory(StateScopedModel):
    """Geographic rating zone with its own premium multiplier."""

    territory_code: str = Field(..., min_length=1, max_length=20)
    rate_multiplier: float = Field(..., gt=0.0)
    zip_ranges: tuple[ZipRange, ...] = Field(default=())
    description: str = Field(default="", max_length=500)
    effective_date: date | None = Field(default=None)

    def covers_zip(self, zip_number: int) -> bool:
        """True when any of the territory's ZIP ranges contains ``zip_number``."""
        return any(zip_range.contains(zip_number) for zip_range in self.zip_ranges)

    @property
    def is_base_territory(self) -> bool:
        return self.territory_code.endswith(("-RUR", "-BASE"))
