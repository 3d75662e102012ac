# tools/places.py
"""Nearby point-of-interest search using the Google Places API (Nearby Search)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx

from errors import ConfigurationError, UpstreamProviderError
from workflows.schemas import Coordinate, RawPlace

logger = logging.getLogger(__name__)

BASE = "https://maps.googleapis.com/maps/api/place"
PHOTO_MAX_WIDTH = 400


# --- single-shot request helper (callers decide how to degrade) ---
def _request(method: str, url: str, **kw) -> httpx.Response:
    with httpx.Client(timeout=kw.pop("timeout", 20)) as c:
        return c.request(method, url, **kw)


class GooglePlacesClient:
    """Place-search collaborator bound to one API key.

    Raises ``ConfigurationError`` immediately when no key is supplied so a
    misconfigured deployment is detected at startup rather than on first use.
    """

    def __init__(self, api_key: Optional[str], *, timeout: float = 20.0) -> None:
        if not api_key:
            raise ConfigurationError("Google Places API key not configured")
        self._api_key = api_key
        self.timeout = timeout

    def search_nearby(self, origin: Coordinate, radius_m: int = 25000) -> List[RawPlace]:
        """
        Provider: Google Places API (Nearby Search, legacy JSON endpoint).
        Returns tourist attractions around ``origin`` in provider order.

        Raises:
            UpstreamProviderError: non-2xx HTTP status, a body that is not a
                JSON object, or a provider status other than OK / ZERO_RESULTS.
            httpx.RequestError: transport failures are passed through.
        """
        params = {
            "location": f"{origin.lat},{origin.lng}",
            "radius": str(radius_m),
            "type": "tourist_attraction",
            "key": self._api_key,
        }
        logger.debug(f"Places nearby search at {origin.lat},{origin.lng} radius={radius_m}m")
        r = _request(
            "GET",
            f"{BASE}/nearbysearch/json",
            params=params,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        if r.status_code >= 400:
            raise UpstreamProviderError(
                f"Google Places API error: HTTP {r.status_code}", status_code=r.status_code
            )

        try:
            data = r.json()
        except ValueError as exc:
            raise UpstreamProviderError("Google Places API returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise UpstreamProviderError(
                f"Google Places API returned a JSON {type(data).__name__}, expected an object"
            )
        status = data.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            detail = data.get("error_message") or "Unknown error"
            raise UpstreamProviderError(f"Google Places API error: {status} - {detail}", status=status)

        out: List[RawPlace] = []
        for p in data.get("results") or []:
            if not isinstance(p, dict):
                logger.warning(f"Skipping non-object place entry: {p!r}")
                continue
            place = self._normalize(p)
            if place is not None:
                out.append(place)
        logger.info(f"Places nearby search returned {len(out)} results")
        return out

    def photo_url(self, photo_reference: str) -> str:
        query = urlencode(
            {"maxwidth": PHOTO_MAX_WIDTH, "photoreference": photo_reference, "key": self._api_key}
        )
        return f"{BASE}/photo?{query}"

    @staticmethod
    def _normalize(p: Dict[str, Any]) -> Optional[RawPlace]:
        try:
            loc = (p.get("geometry") or {}).get("location") or {}
            return RawPlace(
                place_id=p["place_id"],
                name=p.get("name") or "Unnamed place",
                location=Coordinate(lat=loc["lat"], lng=loc["lng"]),
                types=list(p.get("types") or []),
                rating=p.get("rating"),
                user_ratings_total=p.get("user_ratings_total"),
                vicinity=p.get("vicinity"),
                photo_references=[
                    photo["photo_reference"]
                    for photo in p.get("photos") or []
                    if photo.get("photo_reference")
                ],
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            # pydantic.ValidationError is a ValueError
            logger.warning(f"Skipping malformed place {p.get('place_id')!r}: {exc}")
            return None
