"""Tests for the translation workflow."""

import pytest

from loka.agent.client import ChatMessage, ChatResponse, ChatState
from loka.store.schema import HistoryStatus
from loka.translation.translator import (
    FETCH_ERROR_TEXT,
    PARSE_ERROR_TEXT,
    TranslationInputError,
    TranslationParseError,
    TranslationResult,
    TranslationStatus,
    Translator,
    approve,
    build_translation_prompt,
    count_words,
    loading_results,
    parse_translation_response,
)


class FakeAgent:
    """Chat agent answering every message with a fixed reply."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.sent = []

    async def send_message(self, session_id, message):
        self.sent.append((session_id, message))
        if self.error is not None:
            return ChatResponse(success=False, error=self.error)
        messages = [ChatMessage(role="user", content=message)]
        if self.reply is not None:
            messages.append(ChatMessage(role="assistant", content=self.reply))
        return ChatResponse(success=True, data=ChatState(messages=messages))


def _completed(lang_id="th", text="สวัสดีชาวโลก"):
    return TranslationResult(lang_id, text, TranslationStatus.COMPLETED)


# ── Prompt and parsing ───────────────────────────────────────────────────────


def test_prompt_names_source_and_locales():
    prompt = build_translation_prompt("Hello world", ["zh-TW", "th"])

    assert 'Source Text: "Hello world"' in prompt
    assert "(zh-TW, th)" in prompt
    assert "JSON object" in prompt


def test_parse_plain_json():
    assert parse_translation_response('{"th": "สวัสดี"}') == {"th": "สวัสดี"}


def test_parse_fenced_json():
    reply = '```json\n{"vi": "Xin chào", "ms": "Helo"}\n```'

    assert parse_translation_response(reply) == {"vi": "Xin chào", "ms": "Helo"}


@pytest.mark.parametrize("reply", ["Sorry, I cannot help.", "[1, 2]", ""])
def test_parse_rejects_non_objects(reply):
    with pytest.raises(TranslationParseError):
        parse_translation_response(reply)


def test_count_words():
    assert count_words("Hello world") == 2
    assert count_words("  Soft   cotton\ttee \n") == 3
    assert count_words("") == 0


def test_loading_results():
    results = loading_results(["th", "vi"])

    assert [r.status for r in results] == [TranslationStatus.LOADING] * 2
    assert [r.text for r in results] == ["", ""]


# ── Translator ───────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_both_locales_translated():
    agent = FakeAgent(reply='{"zh-TW": "你好世界", "th": "สวัสดีชาวโลก"}')
    translator = Translator(agent, session_id="s1")

    results = await translator.translate("Hello world", ["zh-TW", "th"])

    assert [r.lang_id for r in results] == ["zh-TW", "th"]
    assert all(r.status is TranslationStatus.COMPLETED for r in results)
    assert all(r.text for r in results)
    assert agent.sent[0][0] == "s1"


@pytest.mark.asyncio
async def test_missing_locale_becomes_error_card():
    agent = FakeAgent(reply='{"zh-TW": "你好世界"}')

    results = await Translator(agent).translate("Hello world", ["zh-TW", "th"])

    assert results[0].status is TranslationStatus.COMPLETED
    assert results[1].status is TranslationStatus.ERROR
    assert results[1].text == "Translation for Thai not found."


@pytest.mark.asyncio
async def test_empty_translation_is_an_error_card():
    agent = FakeAgent(reply='{"vi": ""}')

    [result] = await Translator(agent).translate("Hello world", ["vi"])

    assert result.status is TranslationStatus.ERROR


@pytest.mark.asyncio
async def test_fenced_reply_is_accepted():
    agent = FakeAgent(reply='```json\n{"ms": "Helo dunia"}\n```')

    [result] = await Translator(agent).translate("Hello world", ["ms"])

    assert result.status is TranslationStatus.COMPLETED
    assert result.text == "Helo dunia"


@pytest.mark.asyncio
async def test_unparsable_reply_marks_every_card():
    agent = FakeAgent(reply="I'm not sure what you mean.")

    results = await Translator(agent).translate("Hello world", ["th", "vi"])

    assert [r.status for r in results] == [TranslationStatus.ERROR] * 2
    assert {r.text for r in results} == {PARSE_ERROR_TEXT}


@pytest.mark.asyncio
async def test_failed_request_marks_every_card():
    agent = FakeAgent(error="Agent crashed")

    results = await Translator(agent).translate("Hello world", ["th", "vi"])

    assert {r.text for r in results} == {FETCH_ERROR_TEXT}
    assert all(r.status is TranslationStatus.ERROR for r in results)


@pytest.mark.asyncio
async def test_reply_without_messages_marks_every_card():
    class SilentAgent:
        async def send_message(self, session_id, message):
            return ChatResponse(success=True, data=ChatState(messages=[]))

    [result] = await Translator(SilentAgent()).translate("Hello world", ["th"])

    assert result.text == FETCH_ERROR_TEXT


@pytest.mark.asyncio
@pytest.mark.parametrize("text,languages", [("   ", ["th"]), ("Hello world", [])])
async def test_rejects_blank_text_or_no_locales(text, languages):
    agent = FakeAgent(reply="{}")

    with pytest.raises(TranslationInputError):
        await Translator(agent).translate(text, languages)

    assert agent.sent == []


def test_translator_generates_session_id():
    assert Translator(FakeAgent()).session_id


# ── Approval ─────────────────────────────────────────────────────────────────


def test_approve_unchanged_text():
    item = approve(_completed(), "Hello world")

    assert item.status is HistoryStatus.APPROVED
    assert item.languages == ["th"]
    assert item.word_count == 2
    assert item.source_text == "Hello world"


def test_approve_same_text_counts_as_approved():
    result = _completed()

    assert approve(result, "Hello world", edited_text=result.text).status is HistoryStatus.APPROVED


def test_approve_edited_text():
    item = approve(_completed(), "Hello world", edited_text="สวัสดีโลก")

    assert item.status is HistoryStatus.EDITED


@pytest.mark.parametrize("status", [TranslationStatus.ERROR, TranslationStatus.LOADING])
def test_approve_requires_completed_card(status):
    with pytest.raises(TranslationInputError):
        approve(TranslationResult("th", "x", status), "Hello world")
