"""Home screen statistics."""

from fastapi import APIRouter, Depends

from ...clients.health import HealthDataFeed, build_stat_cards
from ...localization import Localizer
from ...preferences import Preferences
from ..deps import get_health_feed, get_localizer, get_prefs

router = APIRouter(prefix="/home", tags=["home"])


@router.get("/stats")
async def home_stats(
    prefs: Preferences = Depends(get_prefs),
    feed: HealthDataFeed = Depends(get_health_feed),
    localizer: Localizer = Depends(get_localizer),
):
    """Cards for the enabled statistics, in the user's order."""
    stats = await prefs.home_stats.enabled_stats()
    snapshot = await feed.today()
    cards = []
    for card in build_stat_cards(stats, snapshot):
        data = card.to_dict()
        data["title"] = localizer.lookup(card.type.localization_key)
        cards.append(data)
    return {"source": feed.source_name, "cards": cards}
