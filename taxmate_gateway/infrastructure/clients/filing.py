"""Filing service client with exponential backoff retry logic"""

import asyncio
from typing import Any, Dict
import httpx
from taxmate_gateway.config import settings
from taxmate_gateway.domain.exceptions import FilingError
from taxmate_gateway.domain.returns import ReturnDraft
from taxmate_gateway.infrastructure.observability.metrics import filing_latency_histogram, filing_failure_counter


def draft_payload(draft: ReturnDraft) -> Dict[str, Any]:
    """JSON body expected by the filing service"""
    return {
        "type": draft.return_type.value,
        "period": draft.period,
        "amount": str(draft.amount),
        "records": [
            {
                "id": r.id,
                "type": r.type.value,
                "sub_type": r.sub_type.value if r.sub_type else None,
                "vendor": r.vendor,
                "date": r.date.isoformat(),
                "total_amount": str(r.total_amount),
                "vat_amount": str(r.vat_amount),
            }
            for r in draft.records
        ],
    }


class FilingClient:
    """Client for submitting return drafts to the revenue authority"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.filing_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.filing_max_retries
        self.backoff_base = settings.filing_backoff_base
        self.transport = transport

    async def submit_return(self, draft: ReturnDraft) -> Dict[str, Any]:
        """
        Submit a return draft with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on 5xx errors and network failures; 4xx fails immediately
        - Tracks latency histogram and failure counter

        Returns:
            Acknowledgement body from the filing service (carries the reference)

        Raises:
            FilingError: Rejected, or still failing after max_retries attempts
        """
        url = f"{self.base_url}/returns/{draft.return_type.value}"
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with filing_latency_histogram.time():
                        response = await client.post(url, json=draft_payload(draft))
                        response.raise_for_status()
                    return response.json()

                except httpx.HTTPStatusError as e:
                    attempt += 1
                    filing_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise FilingError(f"Filing rejected: {e.response.status_code}") from e
                    if attempt >= self.max_retries:
                        raise FilingError(f"Filing service error after {attempt} attempts") from e

                except httpx.RequestError as e:
                    attempt += 1
                    filing_failure_counter.inc()
                    if attempt >= self.max_retries:
                        raise FilingError(f"Filing service unreachable after {attempt} attempts") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                await asyncio.sleep(backoff)
