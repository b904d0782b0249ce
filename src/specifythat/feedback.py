"""
Feedback API — forwards free-form user feedback to the product team.
"""

from typing import Optional

from specifythat.errors import InputRejectedError
from specifythat.transport.http import HttpClient


class FeedbackAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def send(self, feedback: str, url: Optional[str] = None, user_agent: Optional[str] = None) -> None:
        if not feedback or not feedback.strip():
            raise InputRejectedError("Feedback is required")
        await self._http.post("/send-feedback", {
            "feedback": feedback,
            "url": url or "Unknown",
            "userAgent": user_agent or "Unknown",
        }, error_message="Failed to send feedback")
