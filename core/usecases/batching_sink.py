"""
이벤트 일괄 전송

출력 이벤트를 메모리 버퍼에 모으고, 기준 개수를 넘으면 복사본을 비동기로 전송합니다.
버퍼는 복사 후 비우므로 전송 중인 배치는 이후의 push에 영향을 받지 않습니다.
"""

import asyncio
from typing import List, Optional, Set

from ..domain.entities import OutputEvent
from ..domain.ports import AnalyticsSinkPort, LoggerPort


class BatchingSink:
    """분석 시스템 전송 버퍼"""

    def __init__(
        self,
        analytics_sink: AnalyticsSinkPort,
        logger: LoggerPort,
        flush_threshold: int = 2000,
        hub_id: Optional[int] = None,
    ):
        self.analytics_sink = analytics_sink
        self.logger = logger
        self.flush_threshold = flush_threshold
        self.hub_id = hub_id
        self._buffer: List[OutputEvent] = []
        self._in_flight: Set[asyncio.Task] = set()
        self.submitted_count = 0
        self.failed_count = 0

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def push(self, event: OutputEvent) -> None:
        """이벤트를 버퍼에 추가합니다. 기준 개수를 넘으면 백그라운드로 전송"""
        self._buffer.append(event)

        if len(self._buffer) > self.flush_threshold:
            self.logger.info(
                f"이벤트 일괄 전송: {len(self._buffer)}개",
                hub_id=self.hub_id,
                count=len(self._buffer),
            )
            batch = self._take_buffer()
            task = asyncio.create_task(self._submit(batch))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

    async def drain(self) -> int:
        """
        전송 중인 배치를 기다린 뒤 남은 이벤트를 마지막 배치로 전송합니다.

        Returns:
            마지막 배치의 이벤트 수
        """
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight))

        if not self._buffer:
            return 0

        batch = self._take_buffer()
        await self._submit(batch)
        return len(batch)

    def _take_buffer(self) -> List[OutputEvent]:
        # 복사 후 비움
        batch = list(self._buffer)
        self._buffer.clear()
        return batch

    async def _submit(self, batch: List[OutputEvent]) -> None:
        """배치를 전송합니다. 실패는 로그로만 남김"""
        try:
            await self.analytics_sink.submit(batch)
            self.submitted_count += len(batch)
        except Exception as e:
            self.failed_count += len(batch)
            self.logger.error(
                f"이벤트 전송 실패: {len(batch)}개, 오류: {str(e)}",
                hub_id=self.hub_id,
                operation="submit_events",
            )
