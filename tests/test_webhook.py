"""End-to-end behaviour of the /webhook relay endpoint."""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from conftest import MAINCRO_URL
from relay.services.retention import utcnow

MULTIPART_TYPE = "multipart/form-data; boundary=natro"
MULTIPART_BODY = (
    b"--natro\r\n"
    b'Content-Disposition: form-data; name="payload_json"\r\n\r\n'
    b'{"embeds":[{"title":"Hourly report"}]}\r\n'
    b"--natro\r\n"
    b'Content-Disposition: form-data; name="file"; filename="shot.png"\r\n'
    b"Content-Type: image/png\r\n\r\n"
    b"\x89PNG\r\n\x1a\n\x00\x01binary\r\n"
    b"--natro--\r\n"
)

DISCORD_MESSAGE = {
    "id": "1250000000000000000",
    "attachments": [
        {"id": "9", "filename": "shot.png", "url": "https://cdn.discord.test/shot.png"},
        {"id": "10", "filename": "other.png", "url": "https://cdn.discord.test/other.png"},
    ],
    "embeds": [
        {
            "title": "Natro Macro",
            "description": "Converting honey",
            "fields": [
                {"name": "Session Time", "value": "01:02:03"},
                {"name": "Location Detail", "value": "Pine Tree Forest"},
                {"name": "Field", "value": "Sunflower"},
            ],
        },
        {"description": "ignored second embed"},
    ],
}


def _post(client, account="maincro", body=MULTIPART_BODY, content_type=MULTIPART_TYPE):
    return client.post(
        "/webhook",
        params={"account": account} if account is not None else None,
        content=body,
        headers={"content-type": content_type},
    )


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
def test_non_post_methods_are_rejected_without_forwarding(client, discord, repository, method):
    response = client.request(method, "/webhook", params={"account": "maincro"})

    assert response.status_code == 405
    assert response.text == "Method Not Allowed"
    assert discord.requests == []
    assert repository.entries == []


@pytest.mark.parametrize("account", ["unknowncro", "ducro", "MAINCRO", ""])
def test_unknown_or_unconfigured_account_is_rejected(client, discord, repository, account):
    response = _post(client, account=account)

    assert response.status_code == 400
    assert response.text == "Unknown account or missing webhook config."
    assert discord.requests == []
    assert repository.entries == []


def test_missing_account_parameter_is_rejected(client, discord):
    response = _post(client, account=None)

    assert response.status_code == 400
    assert discord.requests == []


def test_body_is_forwarded_verbatim_with_wait_flag(client, discord):
    discord.payload = DISCORD_MESSAGE

    response = _post(client)

    assert response.status_code == 200
    assert response.text == "Forwarded & Logged"
    assert len(discord.requests) == 1
    forwarded = discord.requests[0]
    assert forwarded.method == "POST"
    assert f"{forwarded.url.scheme}://{forwarded.url.host}{forwarded.url.path}" == MAINCRO_URL
    assert forwarded.url.params["wait"] == "true"
    assert forwarded.content == MULTIPART_BODY
    assert forwarded.headers["content-type"] == MULTIPART_TYPE


def test_legacy_api_path_behaves_like_webhook(client, discord):
    response = client.post(
        "/api/webhook",
        params={"account": "altcro"},
        content=b'{"content": "hi"}',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 200
    assert str(discord.requests[0].url).startswith("https://discord.test/api/webhooks/222/")


def test_successful_forward_logs_summary(client, discord, repository):
    discord.payload = DISCORD_MESSAGE

    _post(client)

    assert len(repository.entries) == 1
    entry = repository.entries[0]
    assert entry.account_name == "maincro"
    assert entry.screenshot_url == "https://cdn.discord.test/shot.png"
    assert entry.status == "Converting honey"
    assert entry.location == "Pine Tree Forest"


def test_message_without_embeds_uses_defaults(client, discord, repository):
    discord.payload = {"id": "2", "attachments": [], "embeds": []}

    response = _post(client)

    assert response.status_code == 200
    entry = repository.entries[0]
    assert entry.status == "Update"
    assert entry.location == "Unknown"
    assert entry.screenshot_url is None


def test_embed_title_is_used_when_description_missing(client, discord, repository):
    discord.payload = {"embeds": [{"title": "Collecting pollen", "fields": []}]}

    _post(client)

    assert repository.entries[0].status == "Collecting pollen"


def test_cleanup_removes_only_entries_past_retention(client, discord, repository):
    stale = repository.seed("altcro", age=timedelta(minutes=45))
    just_expired = repository.seed("maincro", age=timedelta(minutes=20, seconds=5))
    recent = repository.seed("maincro", age=timedelta(minutes=19))

    before = utcnow()
    _post(client)
    after = utcnow()

    remaining_ids = {entry.id for entry in repository.entries}
    assert stale.id not in remaining_ids
    assert just_expired.id not in remaining_ids
    assert recent.id in remaining_ids
    assert len(repository.entries) == 2

    (cutoff,) = repository.cutoffs
    assert before - timedelta(minutes=20) <= cutoff <= after - timedelta(minutes=20)


def test_network_failure_returns_500_without_logging(client, discord, repository):
    discord.error = httpx.ConnectError("connection refused")

    response = _post(client)

    assert response.status_code == 500
    assert response.text == "Internal Server Error"
    assert len(discord.requests) == 1
    assert repository.entries == []
    assert repository.cutoffs == []


@pytest.mark.parametrize("status_code", [400, 404, 429, 502])
def test_discord_rejection_returns_500_without_logging(client, discord, repository, status_code):
    discord.status_code = status_code
    discord.payload = {"message": "rejected", "code": 50006}

    response = _post(client)

    assert response.status_code == 500
    assert repository.entries == []


def test_store_failure_after_forward_still_returns_500(client, discord, repository):
    repository.fail_on_add = True

    response = _post(client)

    assert response.status_code == 500
    assert len(discord.requests) == 1
    assert repository.entries == []


def test_unparseable_discord_reply_returns_500(client, discord, repository):
    discord.payload = ["not", "a", "message"]

    response = _post(client)

    assert response.status_code == 500
    assert repository.entries == []


def test_forward_outcomes_are_exported_as_metrics(client, discord):
    _post(client)
    discord.error = httpx.ReadTimeout("timed out")
    _post(client)

    body = client.get("/metrics").text

    assert 'relay_forwards_total{account="maincro",outcome="forwarded"}' in body
    assert 'relay_forwards_total{account="maincro",outcome="forward_failed"}' in body


def test_options_and_head_are_answered_by_the_relay(client, discord):
    options = client.options("/webhook", params={"account": "maincro"})
    head = client.head("/webhook", params={"account": "maincro"})

    assert options.status_code == 405
    assert options.text == "Method Not Allowed"
    assert options.headers["content-type"].startswith("text/plain")
    assert head.status_code == 405
    assert discord.requests == []


def test_wait_flag_is_merged_into_existing_destination_query(client, discord):
    response = _post(client, account="threadcro")

    assert response.status_code == 200
    forwarded = discord.requests[0]
    assert forwarded.url.path == "/api/webhooks/333/thread-token"
    assert forwarded.url.params["thread_id"] == "5"
    assert forwarded.url.params["wait"] == "true"


def test_rejections_do_not_touch_an_unreachable_store(client_with_real_store, discord, unreachable_store):
    not_allowed = client_with_real_store.get("/webhook", params={"account": "maincro"})
    unknown = _post(client_with_real_store, account="nobody")

    assert not_allowed.status_code == 405
    assert not_allowed.text == "Method Not Allowed"
    assert unknown.status_code == 400
    assert unknown.text == "Unknown account or missing webhook config."
    assert discord.requests == []


def test_unreachable_store_after_forward_returns_500(client_with_real_store, discord, unreachable_store):
    response = _post(client_with_real_store)

    assert response.status_code == 500
    assert response.text == "Internal Server Error"
    assert len(discord.requests) == 1
