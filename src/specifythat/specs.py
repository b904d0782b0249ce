"""
Spec generation API — turns a completed interview into a markdown spec.
"""

from typing import Sequence

from specifythat.errors import ServiceError
from specifythat.models.session import Answer
from specifythat.transport.http import HttpClient


class SpecsAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def generate_spec(self, answers: Sequence[Answer]) -> str:
        data = await self._http.post(
            "/generate-spec",
            {"answers": [a.to_wire() for a in answers]},
            error_message="Failed to generate spec",
        )
        if not isinstance(data, dict) or not isinstance(data.get("spec"), str):
            raise ServiceError("Failed to generate spec", details={"reason": "missing spec"})
        return data["spec"]
