"""Translate product copy from the command line."""

import asyncio

from rich.console import Console
from rich.panel import Panel

from loka.agent.client import ChatAgentClient
from loka.client import LokaAPIError, LokaClient
from loka.translation.languages import get_language, language_name
from loka.translation.translator import (
    INPUT_ERROR_TEXT,
    TranslationInputError,
    TranslationResult,
    TranslationStatus,
    Translator,
    approve,
)

console = Console()


async def _run_translation(
    base_url: str, session_id: str, text: str, languages: list[str], tenant: str | None
) -> list[TranslationResult]:
    headers = {"X-Tenant-ID": tenant} if tenant else None
    async with ChatAgentClient(base_url, headers=headers) as agent:
        translator = Translator(agent, session_id=session_id)
        return await translator.translate(text, languages)


def translate_command(
    text: str,
    languages: list[str],
    base_url: str,
    approve_all: bool = False,
    tenant: str | None = None,
) -> int:
    """Translate text through a running server and print one card per locale.

    Args:
        text: Source text
        languages: Target locale codes
        base_url: Loka server URL
        approve_all: Record every completed translation in history
        tenant: Optional tenant id

    Returns:
        Number of failed translations
    """
    if not text.strip() or not languages:
        console.print(f"[red]{INPUT_ERROR_TEXT}[/red]")
        return max(len(languages), 1)

    unknown = [lang_id for lang_id in languages if get_language(lang_id) is None]
    if unknown:
        console.print(f"[yellow]Unknown locale(s): {', '.join(unknown)}[/yellow]")

    with LokaClient(base_url, tenant=tenant) as client:
        try:
            session = client.create_session(first_message=text)
        except LokaAPIError as e:
            console.print(f"[red]Could not start a session: {e}[/red]")
            return len(languages)

        try:
            results = asyncio.run(
                _run_translation(base_url, session["sessionId"], text, languages, tenant)
            )
        except TranslationInputError as e:
            console.print(f"[red]{e}[/red]")
            return len(languages)

        failures = 0
        for result in results:
            ok = result.status is TranslationStatus.COMPLETED
            failures += 0 if ok else 1
            console.print(
                Panel(
                    result.text,
                    title=language_name(result.lang_id),
                    border_style="green" if ok else "red",
                )
            )
            if ok and approve_all:
                client.add_history_item(approve(result, text))
                console.print(f"[green]{language_name(result.lang_id)} saved to history[/green]")

    if failures:
        console.print(f"[red]{failures} translation(s) failed[/red]")
    return failures
