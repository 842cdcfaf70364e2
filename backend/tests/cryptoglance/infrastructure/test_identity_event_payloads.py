from __future__ import annotations

from cryptoglance.infrastructure.streaming.redis_identity_events import decode_event_payload


def test_decode_event_payload_accepts_json_objects() -> None:
    assert decode_event_payload(b'{"type":"auth.signed_out"}') == {"type": "auth.signed_out"}
    assert decode_event_payload('{"type":"auth.signed_in","data":{"user_id":"u1"}}') == {
        "type": "auth.signed_in",
        "data": {"user_id": "u1"},
    }


def test_decode_event_payload_rejects_non_objects_and_garbage() -> None:
    assert decode_event_payload(None) is None
    assert decode_event_payload(b"\xff\xfe") is None
    assert decode_event_payload("not json") is None
    assert decode_event_payload("[1, 2]") is None
    assert decode_event_payload(42) is None
