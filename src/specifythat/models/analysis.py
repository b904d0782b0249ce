"""
Project decomposition models.

The analysis service answers either ``single`` (one condensed summary) or
``multiple`` (an ordered list of independently buildable units).
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BuildableUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str


class SingleUnitResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["single"] = "single"
    summary: str


class MultiUnitResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["multiple"] = "multiple"
    units: tuple[BuildableUnit, ...] = Field(min_length=1)


AnalysisResult = Annotated[Union[SingleUnitResult, MultiUnitResult], Field(discriminator="type")]

_analysis_adapter: TypeAdapter = TypeAdapter(AnalysisResult)


def parse_analysis_result(raw: Any) -> Union[SingleUnitResult, MultiUnitResult]:
    """Validate a raw ``result`` payload into the matching result model."""
    return _analysis_adapter.validate_python(raw)
