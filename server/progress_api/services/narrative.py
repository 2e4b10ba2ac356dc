"""
Narrative generators for progress reports.

The report engine only produces numbers. Summary text, recommendations and
per-month trend sentences come from a generator behind this interface, so
the numeric report works (and is testable) with no model attached.
"""
import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from progress_engine import Narrative, Recommendation, ReportAggregates

from ..config import get_settings

logger = logging.getLogger(__name__)


NARRATIVE_PROMPT = """You write the prose for the "My Progress" page of a mental health application.

Below are a user's check-in aggregates: day-level scores for the last days with data,
weekly averages and monthly averages with a computed status.
Scales: sadness, stress and hopefulness 1-10; anxiety 1-5 (Never..Always);
sleep 1-4 (Less than 4 hours..More than 8 hours).

Respond with a single JSON object and nothing else:
{{
  "summary": "3-4 sentence overview of progress",
  "recommendations": [
    {{"type": "Insight", "text": "..."}},
    {{"type": "Action", "text": "..."}}
  ],
  "trends": {{"<Month YYYY>": "one sentence describing that month's indicator trend"}}
}}

Give 2-3 insights based on trend shifts and 2 practical actions. Keep each text short.
Do not restate numbers that are not in the data.

Aggregates:
{aggregates}
"""


def _strip_code_fence(text: str) -> str:
    """Drop a surrounding ```json ... ``` fence if the model added one."""
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()


class NarrativePayload(BaseModel):
    """Shape expected back from the narrative gateway."""

    summary: str = ""
    recommendations: List[Dict[str, str]] = Field(default_factory=list)
    trends: Dict[str, str] = Field(default_factory=dict)


class NarrativeGatewayError(Exception):
    """The gateway answered, but not with usable narrative text."""


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text_of(parts: Any) -> str:
    """Concatenated text of the ``kind: text`` entries of a parts list."""
    if not isinstance(parts, list):
        return ""
    return "".join(
        part["text"]
        for part in parts
        if isinstance(part, dict) and part.get("kind") == "text" and isinstance(part.get("text"), str)
    )


def _failure_text(status: Dict[str, Any]) -> str:
    parts = _as_dict(status.get("message")).get("parts")
    first = _as_dict(parts[0]) if isinstance(parts, list) and parts else {}
    return first.get("text") or "Task failed"


class NarrativeGenerator(ABC):
    """Produces prose for a set of report aggregates."""

    @abstractmethod
    async def summarize(self, aggregates: ReportAggregates) -> Narrative:
        """Return the narrative for ``aggregates``; never raises for upstream failures."""


class NullNarrativeGenerator(NarrativeGenerator):
    """Leaves every prose field empty."""

    async def summarize(self, aggregates: ReportAggregates) -> Narrative:
        return Narrative()


class GatewayNarrativeGenerator(NarrativeGenerator):
    """
    Requests narrative text from an LLM gateway.

    Sends a JSON-RPC ``message/send`` call carrying the prompt, then
    follows the returned task over the gateway's SSE stream and reads the
    JSON object from the collected text. Any failure, including a reply of
    the wrong shape, degrades to an empty narrative so the numeric report
    is still returned.
    """

    AGENT_NAME = "ProgressNarrator"

    def __init__(
        self,
        gateway_url: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.gateway_url = gateway_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

        logger.info(f"[NARRATIVE] Initialized gateway generator: {self.gateway_url}")

    def build_prompt(self, aggregates: ReportAggregates) -> str:
        return NARRATIVE_PROMPT.format(aggregates=json.dumps(aggregates.to_dict(), indent=2))

    async def summarize(self, aggregates: ReportAggregates) -> Narrative:
        try:
            text = await self._call_gateway(self.build_prompt(aggregates))
            payload = NarrativePayload.model_validate(json.loads(_strip_code_fence(text)))
        except Exception as e:
            logger.error(f"[NARRATIVE] Narrative generation failed: {e}")
            return Narrative()

        recommendations = [
            Recommendation(type=item["type"], text=item["text"])
            for item in payload.recommendations
            if item.get("type") in ("Insight", "Action") and item.get("text")
        ]
        months = {bucket.key for bucket in aggregates.monthly}
        trends = {month: text for month, text in payload.trends.items() if month in months}

        logger.info(
            f"[NARRATIVE] Received summary ({len(payload.summary)} chars), "
            f"{len(recommendations)} recommendations, {len(trends)} trends"
        )
        return Narrative(summary=payload.summary, recommendations=recommendations, trends=trends)

    async def _call_gateway(self, prompt: str) -> str:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        ) as client:
            # Step 1: Send the prompt; the gateway answers with a task
            response = await client.post(
                f"{self.gateway_url}/api/v1/message:send",
                json={
                    "id": f"progress-{uuid.uuid4()}",
                    "jsonrpc": "2.0",
                    "method": "message/send",
                    "params": {
                        "message": {
                            "messageId": f"msg-{uuid.uuid4()}",
                            "role": "user",
                            "parts": [{"kind": "text", "text": prompt}],
                            "metadata": {"agent_name": self.AGENT_NAME},
                        }
                    },
                },
            )
            response.raise_for_status()

            result = _as_dict(_as_dict(response.json()).get("result"))

            # A completed message may come back inline instead of a task
            text = _text_of(result.get("parts"))
            if text:
                return text

            task_id = result.get("id")
            if not isinstance(task_id, str) or not task_id:
                raise NarrativeGatewayError("No task ID returned from gateway")

            # Step 2: Subscribe to the task's SSE stream for the response
            text = await self._collect_sse_response(client, task_id)
            if not text:
                raise NarrativeGatewayError("No content received from narrator")
            return text

    async def _collect_sse_response(self, client: httpx.AsyncClient, task_id: str) -> str:
        """Subscribe to the task's SSE stream and collect the response text."""
        collected = ""

        async with client.stream(
            "GET",
            f"{self.gateway_url}/api/v1/sse/subscribe/{task_id}",
            headers={"Accept": "text/event-stream"},
        ) as response:
            if response.status_code != 200:
                raise NarrativeGatewayError(
                    f"SSE subscription failed with status {response.status_code}"
                )

            event_type = None
            event_data = ""

            async for line in response.aiter_lines():
                line = line.strip()

                if line.startswith("event:"):
                    event_type = line[6:].strip()
                elif line.startswith("data:"):
                    event_data = line[5:].strip()
                elif line == "" and event_data:
                    try:
                        data = _as_dict(json.loads(event_data))
                    except json.JSONDecodeError:
                        data = {}

                    if event_type == "final_response":
                        status = _as_dict(_as_dict(data.get("result")).get("status"))
                        state = status.get("state")
                        if state == "completed":
                            text = _text_of(_as_dict(status.get("message")).get("parts"))
                            if text:
                                return text
                        elif state == "failed":
                            raise NarrativeGatewayError(f"Narrator error: {_failure_text(status)}")

                    elif event_type == "task_artifact":
                        collected += _text_of(_as_dict(data.get("artifact")).get("parts"))

                    elif event_type == "task_status":
                        status = _as_dict(data.get("status"))
                        state = status.get("state")
                        if state == "completed" and collected:
                            return collected
                        elif state == "failed":
                            raise NarrativeGatewayError(f"Narrator error: {_failure_text(status)}")

                    event_type = None
                    event_data = ""

        return collected


def get_narrative_generator() -> NarrativeGenerator:
    """FastAPI dependency: gateway generator when configured, otherwise null."""
    settings = get_settings()
    if settings.narrative_gateway_url:
        return GatewayNarrativeGenerator(settings.narrative_gateway_url, settings.narrative_timeout)
    return NullNarrativeGenerator()
