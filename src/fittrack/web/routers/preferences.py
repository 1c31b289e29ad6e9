"""Preference routes."""

from fastapi import APIRouter, Depends, HTTPException

from ...models.preferences import StatType
from ...preferences import Preferences
from ..deps import get_prefs
from ..schemas import HomeStatsUpdate, LanguageUpdate, MoveRequest, WeightUnitUpdate

router = APIRouter(prefix="/preferences", tags=["preferences"])


def _stats_json(stats: list[StatType]) -> dict:
    return {"stats": [s.value for s in stats]}


@router.get("")
async def get_preferences(prefs: Preferences = Depends(get_prefs)):
    unit = await prefs.weight_unit.selected_unit()
    language = await prefs.language.selected_language()
    stats = await prefs.home_stats.enabled_stats()
    return {
        "weight_unit": unit.value,
        "language": language.value,
        "home_stats": [s.value for s in stats],
    }


@router.put("/weight-unit")
async def set_weight_unit(payload: WeightUnitUpdate, prefs: Preferences = Depends(get_prefs)):
    await prefs.weight_unit.set_unit(payload.unit)
    return {"weight_unit": payload.unit.value}


@router.put("/language")
async def set_language(payload: LanguageUpdate, prefs: Preferences = Depends(get_prefs)):
    await prefs.language.set_language(payload.language)
    return {"language": payload.language.value}


@router.get("/home-stats")
async def get_home_stats(prefs: Preferences = Depends(get_prefs)):
    return _stats_json(await prefs.home_stats.enabled_stats())


@router.put("/home-stats")
async def save_home_stats(payload: HomeStatsUpdate, prefs: Preferences = Depends(get_prefs)):
    """Replace the enabled stats. Duplicates keep their first position."""
    await prefs.home_stats.save(payload.stats)
    return _stats_json(await prefs.home_stats.enabled_stats())


@router.post("/home-stats/{stat}/toggle")
async def toggle_home_stat(stat: StatType, prefs: Preferences = Depends(get_prefs)):
    return _stats_json(await prefs.home_stats.toggle(stat))


@router.post("/home-stats/move")
async def move_home_stat(payload: MoveRequest, prefs: Preferences = Depends(get_prefs)):
    try:
        stats = await prefs.home_stats.move(payload.source, payload.destination)
    except IndexError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _stats_json(stats)


@router.post("/home-stats/reset")
async def reset_home_stats(prefs: Preferences = Depends(get_prefs)):
    return _stats_json(await prefs.home_stats.reset_to_defaults())
