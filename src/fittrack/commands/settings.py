"""Preference commands."""

import click

from ..localization import Localizer
from ..models.preferences import AppLanguage, StatType, WeightUnit
from .base import async_command, echo_error, echo_info, echo_success, open_preferences

STAT_CHOICES = click.Choice([s.value for s in StatType])


@click.group()
def settings():
    """View and change preferences."""


@settings.command()
@click.pass_context
@async_command
async def show(ctx):
    """Show the current preferences."""
    async with open_preferences(ctx) as prefs:
        unit = await prefs.weight_unit.selected_unit()
        language = await prefs.language.selected_language()
        stats = await prefs.home_stats.enabled_stats()

    localizer = Localizer(language)
    click.echo()
    click.echo(f"Weight unit: {localizer.lookup(f'settings.weight_unit_{unit.value}')}")
    click.echo(f"Language:    {language.native_name}")
    click.echo()
    click.echo("Home statistics:")
    for i, stat in enumerate(stats, 1):
        click.echo(f"  {i}. {localizer.lookup(stat.localization_key)} ({stat.value})")


@settings.command()
@click.argument("unit", type=click.Choice([u.value for u in WeightUnit]))
@click.pass_context
@async_command
async def unit(ctx, unit: str):
    """Set the weight unit (kg or lbs)."""
    async with open_preferences(ctx) as prefs:
        await prefs.weight_unit.set_unit(WeightUnit(unit))
    echo_success(f"Weights are now shown in {unit}")


@settings.command()
@click.argument("language", type=click.Choice([lang.value for lang in AppLanguage]))
@click.pass_context
@async_command
async def language(ctx, language: str):
    """Set the display language."""
    selected = AppLanguage(language)
    async with open_preferences(ctx) as prefs:
        await prefs.language.set_language(selected)
    echo_success(f"Language set to {selected.native_name}")


@settings.group()
def stats():
    """Choose which statistics the home screen shows."""


@stats.command()
@click.argument("stat", type=STAT_CHOICES)
@click.pass_context
@async_command
async def toggle(ctx, stat: str):
    """Show or hide a statistic."""
    selected = StatType(stat)
    async with open_preferences(ctx) as prefs:
        enabled = await prefs.home_stats.toggle(selected)

    if selected in enabled:
        echo_success(f"{stat} is now shown")
    else:
        echo_success(f"{stat} is now hidden")
    if not enabled:
        echo_info("No statistics selected; the defaults will be shown")


@stats.command()
@click.argument("source", type=click.IntRange(min=1))
@click.argument("destination", type=click.IntRange(min=1))
@click.pass_context
@async_command
async def move(ctx, source: int, destination: int):
    """Move a statistic from one position to another (1-based)."""
    async with open_preferences(ctx) as prefs:
        try:
            enabled = await prefs.home_stats.move(source - 1, destination - 1)
        except IndexError:
            echo_error("Position out of range")
            ctx.exit(1)
    echo_success("Order: " + ", ".join(s.value for s in enabled))


@stats.command()
@click.pass_context
@async_command
async def reset(ctx):
    """Restore the default statistics."""
    async with open_preferences(ctx) as prefs:
        enabled = await prefs.home_stats.reset_to_defaults()
    echo_success("Reset to: " + ", ".join(s.value for s in enabled))
