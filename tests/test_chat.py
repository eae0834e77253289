import pytest

from newsdigest.chat import SYSTEM_PROMPT, UNAVAILABLE_REPLY, build_user_turn, converse


def test_build_user_turn():
    assert build_user_turn("What happened?") == "What happened?"
    assert build_user_turn("What happened?", "   ") == "What happened?"
    assert (
        build_user_turn("What happened?", "Floods hit the coast.")
        == "Context: Floods hit the coast.\nUser: What happened?"
    )


@pytest.mark.anyio
async def test_converse_passes_context_and_returns_reply(settings, fake_provider):
    provider = fake_provider(reply="Heavy rain caused the floods.")
    reply = await converse("Why?", "Floods hit the coast.", settings, provider)

    assert reply == "Heavy rain caused the floods."
    assert provider.prompts == [
        {
            "system": SYSTEM_PROMPT,
            "user": "Context: Floods hit the coast.\nUser: Why?",
            "json_mode": False,
        }
    ]


@pytest.mark.anyio
async def test_converse_strips_reasoning_block(settings, fake_provider):
    provider = fake_provider(reply="<think>The user wants a date.</think>\n\nIt was Monday.")
    assert await converse("When?", settings=settings, provider=provider) == "It was Monday."


@pytest.mark.anyio
@pytest.mark.parametrize("reply", ["", "   ", "<think>never finished"])
async def test_converse_empty_reply_is_unavailable(settings, fake_provider, reply):
    reply = await converse("When?", settings=settings, provider=fake_provider(reply=reply))
    assert reply == UNAVAILABLE_REPLY


@pytest.mark.anyio
async def test_converse_remote_failure(settings, unavailable_provider):
    reply = await converse("When?", settings=settings, provider=unavailable_provider)
    assert reply == UNAVAILABLE_REPLY


@pytest.mark.anyio
async def test_converse_unexpected_error(settings, fake_provider):
    provider = fake_provider(error=RuntimeError("boom"))
    assert await converse("When?", settings=settings, provider=provider) == UNAVAILABLE_REPLY


@pytest.mark.anyio
async def test_converse_without_provider(settings):
    assert await converse("When?", settings=settings) == UNAVAILABLE_REPLY
