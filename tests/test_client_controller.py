"""Tests for the client-side session controller in :mod:`client.controller`."""
import asyncio
import base64
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from client import ApiError, AvatarApiClient, AvatarSessionController, SessionState, friendly_error_message
from tests.fakes import AVATAR_BYTES, NO_PERSON_MESSAGE, PORTRAIT_BYTES


def _respond(status: int, body: Any) -> httpx.Response:
    if isinstance(body, (dict, list)):
        return httpx.Response(status, json=body)
    return httpx.Response(status, text=body)


class FakeBackend:
    """Scripted stand-in for the two API endpoints."""

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.suggestion_status = 200
        self.suggestion_body: Any = {"suggestions": ["Forest Mage", "Cyberpunk Hacker"]}
        self.suggestion_gate: Optional[asyncio.Event] = None
        self.avatar_status = 200
        self.avatar_bodies: List[Any] = []
        self.generate_gates: Dict[int, asyncio.Event] = {}
        self.generate_calls = 0

    async def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append({"path": request.url.path, "payload": payload})

        if request.url.path == "/api/suggest-styles":
            if self.suggestion_gate is not None:
                await self.suggestion_gate.wait()
            return _respond(self.suggestion_status, self.suggestion_body)

        call_index = self.generate_calls
        self.generate_calls += 1
        gate = self.generate_gates.get(call_index)
        if gate is not None:
            await gate.wait()
        if call_index < len(self.avatar_bodies):
            body = self.avatar_bodies[call_index]
        else:
            body = {"avatar": base64.b64encode(AVATAR_BYTES).decode("utf-8")}
        return _respond(self.avatar_status, body)


async def _wait_until(condition, attempts: int = 200) -> None:
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition was never met")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def controller(backend):
    api = AvatarApiClient(base_url="http://testserver", transport=httpx.MockTransport(backend.handler))
    yield AvatarSessionController(api)
    await api.aclose()


def _snapshot(controller: AvatarSessionController):
    return (
        controller.state,
        controller.uploaded_image,
        controller.file_handle,
        controller.avatar,
        controller.error,
        controller.suggestions,
        controller.selected_style,
        controller.is_generating,
        controller.is_fetching_suggestions,
    )


@pytest.mark.asyncio
async def test_upload_fetches_suggestions_then_ready(controller, backend):
    task = controller.upload(PORTRAIT_BYTES, "image/png", file_name="me.png")

    assert controller.state is SessionState.SUGGESTIONS_PENDING
    assert controller.uploaded_image.data_url.startswith("data:image/png;base64,")
    assert controller.file_handle == "me.png"
    assert not controller.can_generate

    await task

    assert controller.state is SessionState.READY
    assert controller.suggestions == ["Forest Mage", "Cyberpunk Hacker"]
    assert controller.can_generate
    sent = backend.requests[0]["payload"]
    assert sent == {"image": base64.b64encode(PORTRAIT_BYTES).decode("utf-8"), "mimeType": "image/png"}


@pytest.mark.asyncio
async def test_new_upload_clears_previous_session(controller, backend):
    await controller.upload(PORTRAIT_BYTES, "image/png")
    controller.select_style("Forest Mage")
    await controller.generate()
    controller.error = "stale error"
    assert controller.avatar == AVATAR_BYTES

    backend.suggestion_gate = asyncio.Event()
    task = controller.upload(b"second-portrait", "image/jpeg")

    assert controller.state is SessionState.SUGGESTIONS_PENDING
    assert controller.avatar is None
    assert controller.suggestions == []
    assert controller.error is None
    assert controller.selected_style is None
    assert controller.uploaded_image.mime_type == "image/jpeg"

    backend.suggestion_gate.set()
    await task


@pytest.mark.asyncio
async def test_suggestion_failure_degrades_silently(controller, backend):
    backend.suggestion_status = 500
    backend.suggestion_body = "An internal server error occurred"

    await controller.upload(PORTRAIT_BYTES, "image/png")

    assert controller.state is SessionState.READY
    assert controller.suggestions == []
    assert controller.error is None


@pytest.mark.asyncio
async def test_suggestion_body_that_is_not_json_degrades_silently(controller, backend):
    backend.suggestion_body = "<html>gateway</html>"

    await controller.upload(PORTRAIT_BYTES, "image/png")

    assert controller.state is SessionState.READY
    assert controller.suggestions == []


@pytest.mark.asyncio
async def test_generate_without_image_is_rejected_locally(controller, backend):
    await controller.generate()

    assert controller.error == "Please upload an image first."
    assert controller.state is SessionState.IDLE
    assert backend.requests == []


@pytest.mark.asyncio
async def test_generate_success_sets_avatar(controller, backend):
    await controller.upload(PORTRAIT_BYTES, "image/png")
    assert controller.select_style("Cyberpunk Hacker")

    await controller.generate()

    assert controller.state is SessionState.DONE
    assert controller.avatar == AVATAR_BYTES
    assert controller.has_generated
    assert backend.requests[-1]["payload"]["style"] == "Cyberpunk Hacker"


@pytest.mark.asyncio
async def test_generate_without_style_sends_null(controller, backend):
    await controller.upload(PORTRAIT_BYTES, "image/png")

    await controller.generate()

    assert backend.requests[-1]["payload"]["style"] is None


@pytest.mark.asyncio
async def test_gate_rejection_shows_literal_message(controller, backend):
    backend.avatar_status = 400
    backend.avatar_bodies = [NO_PERSON_MESSAGE]
    await controller.upload(PORTRAIT_BYTES, "image/png")

    await controller.generate()

    assert controller.state is SessionState.FAILED
    assert controller.avatar is None
    assert controller.error == NO_PERSON_MESSAGE
    assert not controller.is_generating


@pytest.mark.asyncio
async def test_stage_failure_shows_trailing_message(controller, backend):
    backend.avatar_status = 500
    backend.avatar_bodies = ["Failed to generate the final avatar image."]
    await controller.upload(PORTRAIT_BYTES, "image/png")

    await controller.generate()

    assert controller.state is SessionState.FAILED
    assert controller.error == "Failed to generate the final avatar image."


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"avatar": None}, {"avatar": 5}, {"avatar": ""}, ["unexpected"]])
async def test_malformed_avatar_body_fails_generation(controller, backend, body):
    backend.avatar_bodies = [body]
    await controller.upload(PORTRAIT_BYTES, "image/png")

    await controller.generate()

    assert controller.state is SessionState.FAILED
    assert controller.error == "Malformed response from server"
    assert controller.avatar is None
    assert not controller.is_generating
    assert controller.can_generate


@pytest.mark.asyncio
async def test_avatar_that_is_not_base64_fails_generation(controller, backend):
    backend.avatar_bodies = [{"avatar": "not base64!"}]
    await controller.upload(PORTRAIT_BYTES, "image/png")

    await controller.generate()

    assert controller.state is SessionState.FAILED
    assert controller.error
    assert not controller.is_generating


@pytest.mark.asyncio
async def test_malformed_suggestion_body_settles_ready(controller, backend):
    backend.suggestion_body = {"suggestions": 5}

    await controller.upload(PORTRAIT_BYTES, "image/png")

    assert controller.state is SessionState.READY
    assert controller.suggestions == []
    assert controller.error is None
    assert not controller.is_fetching_suggestions
    assert controller.can_generate


@pytest.mark.asyncio
async def test_api_error_carries_status_code(backend):
    backend.avatar_status = 400
    backend.avatar_bodies = [NO_PERSON_MESSAGE]
    transport = httpx.MockTransport(backend.handler)

    async with AvatarApiClient(base_url="http://testserver", transport=transport) as api:
        with pytest.raises(ApiError) as excinfo:
            await api.generate_avatar("aGk=", "image/png", None)

    assert excinfo.value.status_code == 400
    assert str(excinfo.value) == f"Failed to generate avatar: {NO_PERSON_MESSAGE}"


@pytest.mark.asyncio
async def test_retry_after_failure_reuses_image_and_style(controller, backend):
    backend.avatar_status = 500
    backend.avatar_bodies = ["Failed to generate the final avatar image."]
    await controller.upload(PORTRAIT_BYTES, "image/png")
    controller.select_style("Forest Mage")
    await controller.generate()
    assert controller.state is SessionState.FAILED
    assert controller.can_generate

    backend.avatar_status = 200
    backend.generate_gates[1] = asyncio.Event()
    task = asyncio.create_task(controller.generate())
    await _wait_until(lambda: backend.generate_calls == 2)

    assert controller.state is SessionState.GENERATING
    assert controller.error is None
    assert controller.is_generating

    backend.generate_gates[1].set()
    await task

    assert controller.state is SessionState.DONE
    assert controller.avatar == AVATAR_BYTES
    first, second = [r["payload"] for r in backend.requests if r["path"] == "/api/generate-avatar"]
    assert second == first
    assert second["style"] == "Forest Mage"


@pytest.mark.asyncio
async def test_suggestions_settling_during_generation_keep_generating(controller, backend):
    backend.suggestion_gate = asyncio.Event()
    backend.generate_gates[0] = asyncio.Event()
    suggestion_task = controller.upload(PORTRAIT_BYTES, "image/png")
    assert not controller.can_generate

    generate_task = asyncio.create_task(controller.generate())
    await _wait_until(lambda: backend.generate_calls == 1)
    assert controller.state is SessionState.GENERATING

    backend.suggestion_gate.set()
    await suggestion_task

    assert controller.state is SessionState.GENERATING
    assert controller.suggestions == ["Forest Mage", "Cyberpunk Hacker"]
    assert controller.is_generating
    assert not controller.is_fetching_suggestions

    backend.generate_gates[0].set()
    await generate_task

    assert controller.state is SessionState.DONE
    assert controller.avatar == AVATAR_BYTES


@pytest.mark.asyncio
async def test_regenerate_clears_avatar_and_error_first(controller, backend):
    await controller.upload(PORTRAIT_BYTES, "image/png")
    await controller.generate()
    controller.error = "left over"
    backend.generate_gates[1] = asyncio.Event()

    task = asyncio.create_task(controller.generate())
    await _wait_until(lambda: backend.generate_calls == 2)

    assert controller.state is SessionState.GENERATING
    assert controller.avatar is None
    assert controller.error is None
    assert not controller.can_generate

    backend.generate_gates[1].set()
    await task
    assert controller.state is SessionState.DONE


@pytest.mark.asyncio
async def test_reset_during_generation_discards_late_result(controller, backend):
    await controller.upload(PORTRAIT_BYTES, "image/png")
    backend.generate_gates[0] = asyncio.Event()

    task = asyncio.create_task(controller.generate())
    await _wait_until(lambda: backend.generate_calls == 1)
    controller.reset()
    backend.generate_gates[0].set()
    await task

    assert controller.state is SessionState.IDLE
    assert controller.avatar is None
    assert controller.error is None


@pytest.mark.asyncio
async def test_reset_during_suggestions_discards_late_result(controller, backend):
    backend.suggestion_gate = asyncio.Event()
    task = controller.upload(PORTRAIT_BYTES, "image/png")
    await _wait_until(lambda: len(backend.requests) == 1)

    controller.reset()
    backend.suggestion_gate.set()
    await task

    assert controller.state is SessionState.IDLE
    assert controller.suggestions == []


@pytest.mark.asyncio
async def test_concurrent_generations_last_writer_wins(controller, backend):
    """Single-flight is advisory: a second generate is not refused, and whichever settles last wins."""
    first = base64.b64encode(b"first-avatar").decode("utf-8")
    second = base64.b64encode(b"second-avatar").decode("utf-8")
    backend.avatar_bodies = [{"avatar": first}, {"avatar": second}]
    backend.generate_gates = {0: asyncio.Event(), 1: asyncio.Event()}
    await controller.upload(PORTRAIT_BYTES, "image/png")

    first_task = asyncio.create_task(controller.generate())
    second_task = asyncio.create_task(controller.generate())
    await _wait_until(lambda: backend.generate_calls == 2)

    backend.generate_gates[1].set()
    await second_task
    assert controller.avatar == b"second-avatar"

    backend.generate_gates[0].set()
    await first_task
    assert controller.avatar == b"first-avatar"
    assert controller.state is SessionState.DONE
    assert backend.generate_calls == 2


@pytest.mark.asyncio
async def test_reset_is_idempotent(controller):
    await controller.upload(PORTRAIT_BYTES, "image/png")
    await controller.generate()

    controller.reset()
    once = _snapshot(controller)
    controller.reset()

    assert _snapshot(controller) == once
    assert once[0] is SessionState.IDLE
    assert once[1:] == (None, None, None, None, [], None, False, False)


@pytest.mark.asyncio
async def test_select_style_requires_image(controller):
    assert controller.select_style("Forest Mage") is False
    assert controller.selected_style is None


@pytest.mark.asyncio
async def test_download_writes_avatar_without_state_change(controller, tmp_path):
    assert controller.download(tmp_path) is None

    await controller.upload(PORTRAIT_BYTES, "image/png")
    await controller.generate()
    target = controller.download(tmp_path)

    assert target == tmp_path / "biotar.jpeg"
    assert target.read_bytes() == AVATAR_BYTES
    assert controller.state is SessionState.DONE


@pytest.mark.asyncio
async def test_upload_file_accepts_supported_images(controller, tmp_path):
    portrait = tmp_path / "portrait.webp"
    portrait.write_bytes(PORTRAIT_BYTES)

    await controller.upload_file(portrait)

    assert controller.uploaded_image.mime_type == "image/webp"
    assert controller.file_handle == "portrait.webp"


@pytest.mark.asyncio
async def test_upload_file_rejects_other_types(controller, tmp_path):
    animation = tmp_path / "animation.gif"
    animation.write_bytes(b"GIF89a")

    with pytest.raises(ValueError):
        controller.upload_file(animation)
    assert controller.state is SessionState.IDLE


@pytest.mark.parametrize("message,expected", [
    (f"Failed to generate avatar: {NO_PERSON_MESSAGE}", NO_PERSON_MESSAGE),
    ("Failed to generate avatar: Failed to generate the final avatar image.", "Failed to generate the final avatar image."),
    ("plain message", "plain message"),
    ("Failed to generate avatar: ", "An unexpected error occurred. Please try again."),
])
def test_friendly_error_message(message, expected):
    assert friendly_error_message(ApiError(message)) == expected


@pytest.mark.asyncio
async def test_end_to_end_with_suggested_style(app, provider):
    api = AvatarApiClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))
    controller = AvatarSessionController(api)
    try:
        await controller.upload(PORTRAIT_BYTES, "image/png", file_name="a.png")
        assert controller.suggestions == ["Forest Mage", "Cyberpunk Hacker"]

        controller.select_style("Forest Mage")
        await controller.generate()
    finally:
        await api.aclose()

    assert controller.state is SessionState.DONE
    assert controller.avatar == AVATAR_BYTES
    assert controller.selected_style == "Forest Mage"
    assert "Forest Mage" in provider.last_prompt("synthesize_image")


@pytest.mark.asyncio
async def test_end_to_end_gate_rejection(app, provider):
    provider.answer = "no"
    api = AvatarApiClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))
    controller = AvatarSessionController(api)
    try:
        await controller.upload(PORTRAIT_BYTES, "image/png")
        await controller.generate()
    finally:
        await api.aclose()

    assert controller.state is SessionState.FAILED
    assert controller.error == NO_PERSON_MESSAGE
