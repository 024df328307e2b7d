# Fixed provider roster used by every search.
# prospectfinder/providers/roster.py
from __future__ import annotations

import logging
from typing import List

from .base import SourceProvider
from .google_places import GooglePlacesConfig, GooglePlacesProvider
from .simulated import SimulatedDirectoryProvider, SimulatedMapsProvider, SimulatedSocialProvider

logger = logging.getLogger(__name__)


def build_default_providers(cfg) -> List[SourceProvider]:
    """
    Maps, local directories, social media; in that order.
    The maps slot is backed by Google Places when configured for it.
    """
    maps: SourceProvider = SimulatedMapsProvider()
    if cfg.discovery_provider == "google_places":
        if cfg.google_places_api_key:
            maps = GooglePlacesProvider(
                GooglePlacesConfig(
                    api_key=cfg.google_places_api_key,
                    region_code=cfg.google_places_region_code or None,
                )
            )
        else:
            logger.warning("DISCOVERY_PROVIDER=google_places but GOOGLE_PLACES_API_KEY is not set; using simulated maps")
    return [maps, SimulatedDirectoryProvider(), SimulatedSocialProvider()]
