"""
Project analysis API — decides whether a description is one buildable unit
or several.
"""

from typing import Optional, Union

from pydantic import ValidationError

from specifythat.errors import ServiceError
from specifythat.models.analysis import MultiUnitResult, SingleUnitResult, parse_analysis_result
from specifythat.transport.http import HttpClient


class AnalysisAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def analyze_project(
        self, description: str, attachment: Optional[str] = None,
    ) -> Union[SingleUnitResult, MultiUnitResult]:
        """Decompose a project description, optionally with an attached document's text."""
        body: dict = {"projectDescription": description}
        if attachment is not None:
            body["attachedDocContent"] = attachment
        data = await self._http.post("/analyze-project", body, error_message="Failed to analyze project")
        try:
            return parse_analysis_result(data["result"])
        except (KeyError, TypeError, ValidationError) as e:
            raise ServiceError("Failed to analyze project", details={"reason": str(e)}) from e
