"""도메인 엔티티 테스트"""

from datetime import datetime, timedelta, timezone

from core.domain.entities import (
    EPOCH,
    Account,
    EntityKind,
    OutputEvent,
    PropertyGroup,
    RawRecord,
    SyncResult,
    SyncStatus,
    SyncWindow,
    parse_hubspot_datetime,
    to_epoch_millis,
)
from helpers import NOW, api_record


def test_unset_watermark_is_epoch():
    account = Account(hub_id=1, refresh_token="r")
    assert account.get_watermark("contacts") == EPOCH
    assert to_epoch_millis(account.get_watermark("contacts")) == 0


def test_watermark_only_moves_forward():
    account = Account(hub_id=1, refresh_token="r")

    assert account.advance_watermark("companies", NOW) is True
    assert account.advance_watermark("companies", NOW - timedelta(hours=1)) is False
    assert account.get_watermark("companies") == NOW
    # 다른 엔티티 종류에는 영향 없음
    assert account.get_watermark("contacts") == EPOCH


def test_naive_watermarks_are_treated_as_utc():
    account = Account(hub_id=1, refresh_token="r", last_pulled_dates={"meetings": datetime(2024, 1, 1)})
    assert account.get_watermark("meetings") == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_credential_expiry():
    account = Account(hub_id=1, refresh_token="r", expires_at=NOW)
    assert account.is_credential_expired(NOW + timedelta(seconds=1)) is True
    assert account.is_credential_expired(NOW - timedelta(seconds=1)) is False

    unknown = Account(hub_id=2, refresh_token="r")
    assert unknown.is_credential_expired(NOW) is False


def test_sync_window_restart_switches_to_modified_cursor():
    window = SyncWindow(entity_kind=EntityKind.CONTACTS, hub_id=1, lower_bound=EPOCH, upper_bound=NOW, after=9900)
    assert window.lower_effective_bound == EPOCH
    assert window.is_saturated() is False

    restart_at = NOW - timedelta(days=1)
    window.restart_from(restart_at)

    assert window.after == 0
    assert window.is_saturated() is True
    assert window.lower_effective_bound == restart_at


def test_raw_record_from_api_parses_timestamps():
    updated = NOW - timedelta(minutes=5)
    created = NOW - timedelta(days=3)
    record = RawRecord.from_api(EntityKind.COMPANIES, api_record("42", updated, created, domain="acme.io"))

    assert record.id == "42"
    assert record.updated_at == updated
    assert record.created_at == created
    assert record.get("domain") == "acme.io"
    assert record.get("missing") is None


def test_parse_hubspot_datetime_accepts_millisecond_strings():
    assert parse_hubspot_datetime("1709294400000") == NOW
    assert parse_hubspot_datetime("2024-03-01T12:00:00.000Z") == NOW
    assert parse_hubspot_datetime("") is None
    assert parse_hubspot_datetime("not a date") is None


def test_output_event_payload():
    event = OutputEvent(
        name="Contact Created",
        timestamp=NOW,
        property_group=PropertyGroup.USER,
        properties={"contact_name": "Ada Lovelace"},
        identity="ada@example.com",
        include_in_analytics=0,
    )

    payload = event.to_payload()

    assert payload == {
        "actionName": "Contact Created",
        "actionDate": NOW.isoformat(),
        "userProperties": {"contact_name": "Ada Lovelace"},
        "identity": "ada@example.com",
        "includeInAnalytics": 0,
    }


def test_output_event_payload_omits_unset_fields():
    event = OutputEvent(name="Meeting Updated", timestamp=NOW, property_group=PropertyGroup.MEETING)
    payload = event.to_payload()

    assert "identity" not in payload
    assert "includeInAnalytics" not in payload
    assert payload["meetingProperties"] == {}


def test_sync_result_status_transitions():
    result = SyncResult(hub_id=1, entity_kind=EntityKind.CONTACTS)
    assert result.is_completed() is False

    result.mark_as_failed("boom")
    assert result.status == SyncStatus.FAILED
    assert result.error_message == "boom"
    assert result.is_completed() is True
