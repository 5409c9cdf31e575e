"""엔티티 변환 테스트"""

from datetime import timedelta

from core.domain.entities import EPOCH, EntityKind, PropertyGroup, RawRecord
from core.usecases.entity_descriptors import COMPANY_DESCRIPTOR, CONTACT_DESCRIPTOR, MEETING_DESCRIPTOR
from core.usecases.entity_transform import is_created, transform
from helpers import NOW, api_record


def record(kind, *args, **kwargs):
    return RawRecord.from_api(kind, api_record(*args, **kwargs))


def test_contacts_without_email_produce_no_event():
    contacts = [
        record(EntityKind.CONTACTS, "1", NOW, email="ada@example.com", firstname="Ada"),
        record(EntityKind.CONTACTS, "2", NOW, email="grace@example.com", lastname="Hopper"),
        record(EntityKind.CONTACTS, "3", NOW, firstname="Nobody"),
    ]

    events = [transform(c, is_created(c, EPOCH), {}, CONTACT_DESCRIPTOR) for c in contacts]

    assert [event.identity for event in events if event is not None] == [
        "ada@example.com",
        "grace@example.com",
    ]
    assert events[2] is None


def test_created_versus_updated_uses_watermark():
    watermark = NOW - timedelta(days=1)
    fresh = record(EntityKind.CONTACTS, "1", NOW, created_at=NOW - timedelta(hours=1), email="a@x.io")
    old = record(EntityKind.CONTACTS, "2", NOW, created_at=NOW - timedelta(days=30), email="b@x.io")

    assert is_created(fresh, watermark) is True
    assert is_created(old, watermark) is False
    assert is_created(old, None) is True

    assert transform(fresh, True, {}, CONTACT_DESCRIPTOR).name == "Contact Created"
    updated = transform(old, False, {}, CONTACT_DESCRIPTOR)
    assert updated.name == "Contact Updated"
    assert updated.timestamp == NOW


def test_contact_properties_drop_nulls_and_carry_company():
    contact = record(
        EntityKind.CONTACTS,
        "7",
        NOW,
        email="ada@example.com",
        firstname="Ada",
        lastname="Lovelace",
        hubspotscore="12.0",
    )

    event = transform(contact, False, {"7": "co-9"}, CONTACT_DESCRIPTOR)

    assert event.property_group == PropertyGroup.USER
    assert event.include_in_analytics == 0
    assert event.properties == {
        "company_id": "co-9",
        "contact_name": "Ada Lovelace",
        "contact_score": 12,
    }


def test_invalid_contact_score_defaults_to_zero():
    contact = record(EntityKind.CONTACTS, "7", NOW, email="a@x.io", hubspotscore="n/a")

    event = transform(contact, False, {}, CONTACT_DESCRIPTOR)

    assert event.properties["contact_score"] == 0


def test_company_event_is_shifted_two_seconds_earlier():
    created = NOW - timedelta(days=2)
    company = record(EntityKind.COMPANIES, "5", NOW, created_at=created, domain="acme.io", industry="SOFTWARE")

    event = transform(company, True, {}, COMPANY_DESCRIPTOR)

    assert event.name == "Company Created"
    assert event.timestamp == created - timedelta(seconds=2)
    assert event.identity is None
    assert event.properties == {"company_id": "5", "company_domain": "acme.io", "company_industry": "SOFTWARE"}


def test_company_without_properties_is_suppressed():
    company = record(EntityKind.COMPANIES, "5", NOW)

    assert transform(company, True, {}, COMPANY_DESCRIPTOR) is None


def test_meeting_without_contact_has_null_email():
    meeting = record(EntityKind.MEETINGS, "m1", NOW, hs_meeting_title="Kickoff")

    event = transform(meeting, False, {"m2": {"email": "other@example.com"}}, MEETING_DESCRIPTOR)

    assert event is not None
    assert event.properties["contact_email"] is None
    assert event.include_in_analytics is None
    assert "includeInAnalytics" not in event.to_payload()


def test_meeting_created_uses_meeting_created_property():
    meeting_created = NOW - timedelta(hours=6)
    meeting = record(
        EntityKind.MEETINGS,
        "m1",
        NOW,
        created_at=NOW - timedelta(hours=1),
        hs_meeting_title="Kickoff",
        hs_meeting_created_at=meeting_created.isoformat(),
    )

    event = transform(meeting, True, {"m1": {"email": "ada@example.com"}}, MEETING_DESCRIPTOR)

    assert event.name == "Meeting Created"
    assert event.timestamp == meeting_created
    assert event.properties["contact_email"] == "ada@example.com"


def test_meeting_without_title_is_suppressed():
    meeting = record(EntityKind.MEETINGS, "m1", NOW, hs_meeting_start_time="2024-03-01T10:00:00Z")

    assert transform(meeting, True, {}, MEETING_DESCRIPTOR) is None


def test_null_and_empty_property_bags_are_both_suppressed():
    for properties in (None, {}):
        item = api_record("5", NOW)
        item["properties"] = properties
        company = RawRecord.from_api(EntityKind.COMPANIES, item)

        assert transform(company, True, {}, COMPANY_DESCRIPTOR) is None
