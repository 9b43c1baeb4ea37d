"""Message model construction from mappings and wire serialization."""

from __future__ import annotations

import pytest

from conftest import build_payload
from mailchannels_client.domain.errors import PayloadValidationError
from mailchannels_client.domain.models import (
    Attachment,
    ContentBlock,
    DkimConfig,
    EmailAddress,
    Personalization,
    SendRequest,
    SendResult,
)


@pytest.mark.os_agnostic
def test_request_from_mapping_reads_every_section() -> None:
    request = SendRequest.from_mapping(build_payload())

    assert request.from_ == EmailAddress("sender@example.com", "Sender")
    assert request.reply_to == EmailAddress("reply@example.com")
    assert request.subject == "Test message"
    assert request.content[1] == ContentBlock("text/html", "<p>HTML content</p>")
    assert request.attachments == (Attachment("text/plain", "note.txt", "ZmlsZS1jb250ZW50"),)
    assert request.personalizations[0].cc == (EmailAddress("copy@example.com"),)
    assert request.personalizations[1].dkim_domain == " override.example.com "


@pytest.mark.os_agnostic
def test_to_payload_uses_wire_keys_and_omits_absent_fields() -> None:
    request = SendRequest(
        personalizations=(Personalization(to=(EmailAddress("to@example.com"),)),),
        from_=EmailAddress("from@example.com"),
        content=(ContentBlock("text/plain", "hi"),),
    )

    assert request.to_payload() == {
        "personalizations": [{"to": [{"email": "to@example.com"}]}],
        "from": {"email": "from@example.com"},
        "content": [{"type": "text/plain", "value": "hi"}],
    }


@pytest.mark.os_agnostic
def test_payload_round_trip_preserves_extras() -> None:
    payload = build_payload()
    payload["mail_from"] = {"email": "bounce@example.com"}
    payload["personalizations"][0]["dynamic_template_data"] = {"name": "Ada"}

    assert SendRequest.from_mapping(payload).to_payload() == payload


@pytest.mark.os_agnostic
def test_nested_extras_round_trip() -> None:
    block = ContentBlock.from_mapping({"type": "text/html", "value": "<p>{{n}}</p>", "template_type": "mustache"})
    attachment = Attachment.from_mapping(
        {"type": "image/png", "filename": "a.png", "content": "AAA=", "content_id": "logo", "disposition": "inline"}
    )

    assert block.extra == {"template_type": "mustache"}
    assert attachment.to_payload()["disposition"] == "inline"
    assert EmailAddress.from_mapping({"email": "a@example.com", "x": 1}).to_payload() == {"email": "a@example.com", "x": 1}


@pytest.mark.os_agnostic
def test_empty_reply_to_is_kept_verbatim_but_not_modelled() -> None:
    payload = build_payload()
    payload["reply_to"] = ""

    request = SendRequest.from_mapping(payload)

    assert request.reply_to is None
    assert request.to_payload()["reply_to"] == ""


@pytest.mark.os_agnostic
def test_malformed_sections_are_carried_for_validation() -> None:
    """Wrong shapes never raise during conversion."""
    request = SendRequest.from_mapping({"personalizations": "nope", "from": None, "content": 5})

    assert request.personalizations == ()
    assert request.from_ == EmailAddress("")
    assert request.content == ()


@pytest.mark.os_agnostic
def test_non_mapping_payload_raises() -> None:
    with pytest.raises(PayloadValidationError):
        SendRequest.from_mapping("text")


@pytest.mark.os_agnostic
def test_typed_instances_pass_through_unchanged() -> None:
    request = SendRequest.from_mapping(build_payload())

    assert SendRequest.from_mapping(request) is request


@pytest.mark.os_agnostic
def test_secrets_are_hidden_from_repr() -> None:
    assert "secret" not in repr(DkimConfig("d", "s", "secret"))
    assert "secret" not in repr(Personalization(to=(), dkim_private_key="secret"))
    assert "c2VjcmV0" not in repr(Attachment("text/plain", "a.txt", "c2VjcmV0"))


@pytest.mark.os_agnostic
def test_dkim_config_trimmed_returns_new_instance() -> None:
    config = DkimConfig(" d ", " s ", " k ")

    assert config.trimmed() == DkimConfig("d", "s", "k")
    assert config.domain == " d "


@pytest.mark.os_agnostic
def test_send_result_to_dict_omits_missing_fields() -> None:
    assert SendResult(200).to_dict() == {"status": 200}
    assert SendResult(202, id="x", data={"a": 1}).to_dict() == {"status": 202, "id": "x", "data": {"a": 1}}
