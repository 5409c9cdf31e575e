"""
분석 시스템 전송 어댑터

정규화된 이벤트를 분석 API로 전송합니다.
분석 API가 설정되지 않은 경우 이벤트를 로그로만 남기는 어댑터를 사용합니다.
"""

from typing import List, Optional

import httpx

from core.domain.entities import OutputEvent
from core.domain.exceptions import AnalyticsSubmissionError
from core.domain.ports import AnalyticsSinkPort, LoggerPort


class HttpAnalyticsSinkAdapter(AnalyticsSinkPort):
    """HTTP 분석 API 전송 어댑터"""

    def __init__(
        self,
        url: str,
        logger: LoggerPort,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.logger = logger
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def submit(self, events: List[OutputEvent]) -> None:
        """이벤트 목록을 한 번의 요청으로 전송합니다."""
        if not events:
            return

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        body = {"actions": [event.to_payload() for event in events]}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.url, headers=headers, json=body)

            if response.status_code not in [200, 201, 202, 204]:
                error_msg = f"이벤트 전송 실패: {response.status_code} - {response.text}"
                raise AnalyticsSubmissionError(error_msg, status_code=response.status_code)

        self.logger.debug(f"이벤트 전송 성공: {len(events)}개", count=len(events))


class LoggingAnalyticsSinkAdapter(AnalyticsSinkPort):
    """이벤트를 로그로만 남기는 어댑터 (분석 API 미설정 시)"""

    def __init__(self, logger: LoggerPort):
        self.logger = logger
        self.submitted: List[OutputEvent] = []

    async def submit(self, events: List[OutputEvent]) -> None:
        self.submitted.extend(events)
        self.logger.info(f"이벤트 {len(events)}개 (분석 API 미설정)", count=len(events))
        for event in events:
            self.logger.debug(f"{event.name}: {event.to_payload()}")
