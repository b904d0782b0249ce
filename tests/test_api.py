"""REST API tests against an in-process mock transport."""

import json

import httpx
import pytest

from specifythat import AsyncSpecifyThat
from specifythat.errors import InputRejectedError, ServiceError
from specifythat.interview import InterviewState
from specifythat.models.analysis import MultiUnitResult, SingleUnitResult
from specifythat.models.session import Answer
from specifythat.questions import QUESTIONS

BASE_URL = "https://specifythat.test"


def make_client(routes: dict, calls: list) -> AsyncSpecifyThat:
    """Client whose requests are answered from `routes` ({path: (status, body)})."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        calls.append((request.url.path, body))
        status, payload = routes[request.url.path]
        if isinstance(payload, Exception):
            raise payload
        return httpx.Response(status, json=payload)

    return AsyncSpecifyThat(base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestAnalysisAPI:

    @pytest.mark.asyncio
    async def test_single_result(self):
        calls: list = []
        client = make_client({"/api/analyze-project": (200, {"result": {"type": "single", "summary": "Invoice app"}})}, calls)
        result = await client.analysis.analyze_project("A web app for invoices")
        assert isinstance(result, SingleUnitResult)
        assert result.summary == "Invoice app"
        assert calls == [("/api/analyze-project", {"projectDescription": "A web app for invoices"})]
        await client.close()

    @pytest.mark.asyncio
    async def test_multiple_result_with_attachment(self):
        calls: list = []
        units = [
            {"id": 1, "name": "Core", "description": "Invoice creation"},
            {"id": 2, "name": "Payments", "description": "Online payments"},
        ]
        client = make_client({"/api/analyze-project": (200, {"result": {"type": "multiple", "units": units}})}, calls)
        result = await client.analysis.analyze_project("A big platform", attachment="doc text")
        assert isinstance(result, MultiUnitResult)
        assert [u.id for u in result.units] == [1, 2]
        assert calls[0][1]["attachedDocContent"] == "doc text"
        await client.close()

    @pytest.mark.asyncio
    async def test_error_message_from_backend(self):
        client = make_client({"/api/analyze-project": (500, {"error": "Model overloaded"})}, [])
        with pytest.raises(ServiceError) as exc:
            await client.analysis.analyze_project("A web app for invoices")
        assert exc.value.message == "Model overloaded"
        assert exc.value.details["status"] == 500
        await client.close()

    @pytest.mark.asyncio
    async def test_default_error_message(self):
        client = make_client({"/api/analyze-project": (502, {})}, [])
        with pytest.raises(ServiceError) as exc:
            await client.analysis.analyze_project("A web app for invoices")
        assert exc.value.message == "Failed to analyze project"
        await client.close()

    @pytest.mark.asyncio
    async def test_malformed_result(self):
        client = make_client({"/api/analyze-project": (200, {"result": {"type": "weird"}})}, [])
        with pytest.raises(ServiceError):
            await client.analysis.analyze_project("A web app for invoices")
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        client = make_client({"/api/analyze-project": (0, httpx.ConnectError("refused"))}, [])
        with pytest.raises(ServiceError) as exc:
            await client.analysis.analyze_project("A web app for invoices")
        assert exc.value.message == "Failed to analyze project"
        await client.close()


class TestAnswersAPI:

    @pytest.mark.asyncio
    async def test_generate_answer_sends_context(self):
        calls: list = []
        client = make_client({"/api/generate-answer": (200, {"answer": "Freelancers"})}, calls)
        prior = [Answer(question="Q1", answer="Acme"), Answer(question="Q2", answer="Invoices", is_ai_generated=True)]
        answer = await client.answers.generate_answer("Who are the users?", prior)
        assert answer == "Freelancers"
        assert calls[0][1] == {
            "question": "Who are the users?",
            "conversationContext": [
                {"question": "Q1", "answer": "Acme", "isAIGenerated": False},
                {"question": "Q2", "answer": "Invoices", "isAIGenerated": True},
            ],
            "userInput": "I don't know",
        }
        await client.close()

    @pytest.mark.asyncio
    async def test_generate_project_name(self):
        calls: list = []
        client = make_client({"/api/generate-answer": (200, {"answer": "InvoiceTrack"})}, calls)
        assert await client.answers.generate_project_name("Invoice app") == "InvoiceTrack"
        body = calls[0][1]
        assert body["question"] == QUESTIONS[0].text
        assert body["conversationContext"][0]["question"] == QUESTIONS[1].text
        assert body["conversationContext"][0]["answer"] == "Invoice app"
        await client.close()

    @pytest.mark.asyncio
    async def test_generate_project_name_failure(self):
        client = make_client({"/api/generate-answer": (500, {"error": "boom"})}, [])
        with pytest.raises(ServiceError) as exc:
            await client.answers.generate_project_name("Invoice app")
        assert exc.value.message == "Failed to generate project name"
        await client.close()


class TestSpecsAndFeedback:

    @pytest.mark.asyncio
    async def test_generate_spec(self):
        calls: list = []
        client = make_client({"/api/generate-spec": (200, {"spec": "# Acme"})}, calls)
        spec = await client.specs.generate_spec([Answer(question="Q1", answer="Acme")])
        assert spec == "# Acme"
        assert calls[0][1] == {"answers": [{"question": "Q1", "answer": "Acme", "isAIGenerated": False}]}
        await client.close()

    @pytest.mark.asyncio
    async def test_send_feedback(self):
        calls: list = []
        client = make_client({"/api/send-feedback": (200, {"success": True})}, calls)
        await client.feedback.send("Love it")
        assert calls[0][1] == {"feedback": "Love it", "url": "Unknown", "userAgent": "Unknown"}
        await client.close()

    @pytest.mark.asyncio
    async def test_empty_feedback_is_rejected_locally(self):
        calls: list = []
        client = make_client({}, calls)
        with pytest.raises(InputRejectedError):
            await client.feedback.send("   ")
        assert calls == []
        await client.close()


class TestWiredInterview:

    @pytest.mark.asyncio
    async def test_deferred_name_through_http(self):
        calls: list = []
        client = make_client({
            "/api/analyze-project": (200, {"result": {"type": "single", "summary": "Invoice tracking for freelancers"}}),
            "/api/generate-answer": (503, {"error": "unavailable"}),
        }, calls)
        async with client:
            interview = client.start_interview()
            interview.defer_first_question()
            await interview.analyze_description("A web app that helps freelancers track invoices")
            await interview.wait_for_pending()

            assert interview.state is InterviewState.QUESTION
            assert interview.session.current_question_index == 2
            assert interview.session.answers[0].answer == "Untitled Project"
            assert [path for path, _ in calls] == ["/api/analyze-project", "/api/generate-answer"]
