"""Ask the chat agent for translations and turn its answer into review cards."""

import json
import logging
import re
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from loka.agent.client import ChatResponse
from loka.store.schema import HistoryItemCreate, HistoryStatus
from loka.translation.languages import language_name

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```json\n?|```")

PARSE_ERROR_TEXT = "Error: Could not parse translation response."
FETCH_ERROR_TEXT = "Error: Could not fetch translation."
INPUT_ERROR_TEXT = "Please enter source text and select at least one language."


class TranslationError(Exception):
    """Base class for translator errors."""


class TranslationInputError(TranslationError):
    """Source text or language selection is unusable."""


class TranslationParseError(TranslationError):
    """The agent's reply is not a JSON object of translations."""


class TranslationStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class TranslationResult:
    """One translation card."""

    lang_id: str
    text: str
    status: TranslationStatus


class ChatSender(Protocol):
    async def send_message(self, session_id: str, message: str) -> ChatResponse: ...


def build_translation_prompt(source_text: str, languages: list[str]) -> str:
    return (
        "Translate the following e-commerce product description. "
        f'Source Text: "{source_text}". '
        "Return the translations as a single JSON object where keys are the language IDs "
        f"({', '.join(languages)}) and values are the translated strings. "
        "Do not include any other text or explanation outside of the JSON object."
    )


def parse_translation_response(content: str) -> dict[str, Any]:
    """Extract the locale-to-translation object from an agent reply.

    Args:
        content: Reply text, optionally wrapped in a ```json fence

    Returns:
        Parsed JSON object

    Raises:
        TranslationParseError: If the reply is not a JSON object
    """
    cleaned = _FENCE.sub("", content).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise TranslationParseError(f"Reply is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise TranslationParseError("Reply is not a JSON object")
    return parsed


def build_results(languages: list[str], translations: dict[str, Any]) -> list[TranslationResult]:
    """One card per requested locale; locales without a translation become error cards."""
    results = []
    for lang_id in languages:
        text = translations.get(lang_id)
        if isinstance(text, str) and text:
            results.append(TranslationResult(lang_id, text, TranslationStatus.COMPLETED))
        else:
            results.append(
                TranslationResult(
                    lang_id,
                    f"Translation for {language_name(lang_id)} not found.",
                    TranslationStatus.ERROR,
                )
            )
    return results


def loading_results(languages: list[str]) -> list[TranslationResult]:
    return [TranslationResult(lang_id, "", TranslationStatus.LOADING) for lang_id in languages]


def count_words(text: str) -> int:
    return len(text.split())


def approve(
    result: TranslationResult, source_text: str, edited_text: str | None = None
) -> HistoryItemCreate:
    """Build the history entry recording a reviewer's approval of one card.

    Args:
        result: A completed translation card
        source_text: Source text the card was translated from
        edited_text: The reviewer's final text, if they changed it

    Returns:
        History payload with status Edited or Approved

    Raises:
        TranslationInputError: If the card is not completed
    """
    if result.status is not TranslationStatus.COMPLETED:
        raise TranslationInputError("Only completed translations can be approved")

    edited = edited_text is not None and edited_text != result.text
    return HistoryItemCreate(
        source_text=source_text,
        languages=[result.lang_id],
        status=HistoryStatus.EDITED if edited else HistoryStatus.APPROVED,
        word_count=count_words(source_text),
    )


class Translator:
    """Runs translation requests through one agent conversation."""

    def __init__(self, agent: ChatSender, session_id: str | None = None):
        self.agent = agent
        self.session_id = session_id or str(uuid.uuid4())

    async def translate(self, source_text: str, languages: list[str]) -> list[TranslationResult]:
        """Translate source text into every selected locale.

        A malformed or failed reply yields error cards rather than an exception.

        Args:
            source_text: Product description to translate
            languages: Target locale codes

        Returns:
            One result per locale, in the order requested

        Raises:
            TranslationInputError: If the text is blank or no locale is selected
        """
        if not source_text.strip() or not languages:
            raise TranslationInputError(INPUT_ERROR_TEXT)

        prompt = build_translation_prompt(source_text, languages)
        response = await self.agent.send_message(self.session_id, prompt)

        last = response.last_message if response.success else None
        if last is None:
            logger.warning("Translation request failed: %s", response.error or "no messages")
            return [
                TranslationResult(lang_id, FETCH_ERROR_TEXT, TranslationStatus.ERROR)
                for lang_id in languages
            ]

        try:
            translations = parse_translation_response(last.content)
        except TranslationParseError as e:
            logger.warning("Failed to parse AI response: %s. Response: %r", e, last.content)
            return [
                TranslationResult(lang_id, PARSE_ERROR_TEXT, TranslationStatus.ERROR)
                for lang_id in languages
            ]

        return build_results(languages, translations)
