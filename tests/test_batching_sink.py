"""이벤트 일괄 전송 테스트"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.domain.entities import OutputEvent, PropertyGroup
from core.domain.exceptions import AnalyticsSubmissionError
from core.domain.ports import AnalyticsSinkPort
from core.usecases.batching_sink import BatchingSink
from helpers import NOW


def make_event(index: int) -> OutputEvent:
    return OutputEvent(
        name="Company Updated",
        timestamp=NOW,
        property_group=PropertyGroup.COMPANY,
        properties={"company_id": str(index)},
    )


@pytest.fixture
def analytics_sink():
    sink = MagicMock(spec=AnalyticsSinkPort)
    sink.submit = AsyncMock(return_value=None)
    return sink


def submitted_sizes(analytics_sink):
    return [len(call.args[0]) for call in analytics_sink.submit.await_args_list]


@pytest.mark.asyncio
async def test_push_over_threshold_flushes_in_background(analytics_sink, mock_logger):
    sink = BatchingSink(analytics_sink, mock_logger)

    for index in range(2000):
        sink.push(make_event(index))
    assert len(sink) == 2000
    assert sink.in_flight == 0

    sink.push(make_event(2000))
    assert len(sink) == 0
    assert sink.in_flight == 1

    assert await sink.drain() == 0
    assert submitted_sizes(analytics_sink) == [2001]


@pytest.mark.asyncio
async def test_drain_flushes_remaining_events(analytics_sink, mock_logger):
    sink = BatchingSink(analytics_sink, mock_logger)

    for index in range(2002):
        sink.push(make_event(index))

    assert len(sink) == 1
    assert await sink.drain() == 1
    assert submitted_sizes(analytics_sink) == [2001, 1]
    assert sink.submitted_count == 2002


@pytest.mark.asyncio
async def test_flushed_batch_is_unaffected_by_later_pushes(analytics_sink, mock_logger):
    sink = BatchingSink(analytics_sink, mock_logger, flush_threshold=2)

    for index in range(3):
        sink.push(make_event(index))
    sink.push(make_event(3))
    await sink.drain()

    first_batch = analytics_sink.submit.await_args_list[0].args[0]
    assert [event.properties["company_id"] for event in first_batch] == ["0", "1", "2"]
    assert submitted_sizes(analytics_sink) == [3, 1]


@pytest.mark.asyncio
async def test_drain_waits_for_in_flight_batches(mock_logger):
    order = []

    async def submit(events):
        if len(events) > 1:
            await asyncio.sleep(0.01)
        order.append(len(events))

    analytics_sink = MagicMock(spec=AnalyticsSinkPort)
    analytics_sink.submit = AsyncMock(side_effect=submit)
    sink = BatchingSink(analytics_sink, mock_logger, flush_threshold=2)

    for index in range(4):
        sink.push(make_event(index))

    await sink.drain()

    assert order == [3, 1]
    assert sink.in_flight == 0


@pytest.mark.asyncio
async def test_submission_failure_is_logged_not_raised(analytics_sink, mock_logger):
    analytics_sink.submit = AsyncMock(side_effect=AnalyticsSubmissionError("unavailable", status_code=503))
    sink = BatchingSink(analytics_sink, mock_logger, flush_threshold=2, hub_id=7)

    for index in range(4):
        sink.push(make_event(index))

    assert await sink.drain() == 1
    assert sink.failed_count == 4
    assert sink.submitted_count == 0
    assert mock_logger.error.call_count == 2


@pytest.mark.asyncio
async def test_drain_on_empty_buffer_submits_nothing(analytics_sink, mock_logger):
    sink = BatchingSink(analytics_sink, mock_logger)

    assert await sink.drain() == 0
    analytics_sink.submit.assert_not_awaited()
