"""Glossary, history and language listings."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from loka.client import LokaClient
from loka.translation.analytics import monthly_volume, summarize
from loka.translation.languages import AVAILABLE_LANGUAGES, get_language, language_name

console = Console()


def terms_command(base_url: str, tenant: str | None = None) -> None:
    """Print the brand-term glossary."""
    with LokaClient(base_url, tenant=tenant) as client:
        terms = client.list_brand_terms()

    if not terms:
        console.print("No brand terms found. Add one to get started!")
        return

    table = Table(title="Brand Terms")
    table.add_column("Term", style="bold")
    table.add_column("Variations")
    table.add_column("Notes")
    table.add_column("Translations")
    for term in terms:
        translations = ", ".join(f"{lid}: {text}" for lid, text in sorted(term.translations.items()))
        table.add_row(term.term, term.variations, term.notes, translations or "-")
    console.print(table)


def history_command(base_url: str, tenant: str | None = None, limit: int = 20) -> None:
    """Print history totals, monthly volume and the latest jobs."""
    with LokaClient(base_url, tenant=tenant) as client:
        history = client.list_history()

    summary = summarize(history)
    console.print(f"Total translations: [bold]{summary.total}[/bold]")
    console.print(f"Words translated:   [bold]{summary.total_words}[/bold]")
    console.print(f"Edit rate:          [bold]{summary.edit_rate}%[/bold]")

    months = monthly_volume(history)
    if months:
        volume = Table(title="Monthly Volume")
        volume.add_column("Month")
        volume.add_column("Volume", justify="right")
        volume.add_column("Edits", justify="right")
        for bucket in months:
            volume.add_row(f"{bucket.name} {bucket.year}", str(bucket.volume), str(bucket.edits))
        console.print(volume)

    jobs = Table(title="Recent Translations")
    jobs.add_column("Date")
    jobs.add_column("Source")
    jobs.add_column("Languages")
    jobs.add_column("Status")
    jobs.add_column("Words", justify="right")
    for item in history[:limit]:
        source = item.source_text if len(item.source_text) <= 50 else item.source_text[:47] + "..."
        jobs.add_row(
            item.date,
            source,
            ", ".join(language_name(lid) for lid in item.languages),
            item.status.value,
            str(item.word_count),
        )
    console.print(jobs)


def languages_command(config_path: str | None = None) -> None:
    """List available locales, marking the configured defaults."""
    from loka.config.loader import load_config

    config = load_config(Path(config_path) if config_path else None)
    defaults = set(config.translator.default_languages)

    table = Table(title="Languages")
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("Default", justify="center")
    for lang in AVAILABLE_LANGUAGES:
        table.add_row(lang.id, lang.name, "✓" if lang.id in defaults else "")
    console.print(table)


def toggle_language_command(lang_id: str, config_path: str | None = None) -> bool:
    """Add or remove a locale from the default selection and save the config.

    Returns:
        False if the locale is unknown
    """
    from loka.config.loader import load_config, save_config

    if get_language(lang_id) is None:
        console.print(f"[red]Unknown locale: {lang_id}[/red]")
        return False

    path = Path(config_path) if config_path else None
    config = load_config(path)
    defaults = config.translator.toggle_language(lang_id)
    save_config(config, path)

    console.print(f"Default languages: {', '.join(defaults) or '(none)'}")
    return True
