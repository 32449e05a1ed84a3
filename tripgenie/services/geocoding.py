"""
Geocoding for trip destinations.

Uses the Google Geocoding API when GOOGLE_MAPS_API_KEY is set and the
key-less Open-Meteo geocoder otherwise. Callers treat every failure as
non-fatal: a plan can always be generated without coordinates.
"""

import logging
from typing import Any, Dict, Optional

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from tripgenie.shared.config import get_settings


logger = logging.getLogger(__name__)


GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
OPEN_METEO_GEOCODE_URL = "https://geocoding-api.open-meteo.com/v1/search"


class GeocodingError(Exception):
    """Raised when an address cannot be resolved."""


class GeocodingService:
    """
    Resolve addresses to coordinates.

    Args:
        api_key: Google Maps key; Open-Meteo is used when None
        timeout: Per-request timeout in seconds
        session: Optional requests session (shared connection pool)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def provider(self) -> str:
        return "google" if self.api_key else "open-meteo"

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        reraise=True,
    )
    def _get_json(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def geocode(self, address: str) -> Dict[str, Any]:
        """
        Resolve an address.

        Args:
            address: Free-text address or city name

        Returns:
            {"coordinates": {"lat": float, "lng": float}, "address": str}

        Raises:
            GeocodingError: If the lookup fails or finds nothing
        """
        if not address or not address.strip():
            raise GeocodingError("Address is empty")

        logger.info(f"Geocoding '{address.strip()}' via {self.provider}")
        try:
            if self.api_key:
                return self._geocode_google(address.strip())
            return self._geocode_open_meteo(address.strip())
        except requests.RequestException as e:
            raise GeocodingError(f"{self.provider} geocoding request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise GeocodingError(f"Unexpected {self.provider} geocoding payload: {e}") from e

    def _geocode_google(self, address: str) -> Dict[str, Any]:
        payload = self._get_json(GOOGLE_GEOCODE_URL, {"address": address, "key": self.api_key})
        status = payload.get("status")
        if status != "OK" or not payload.get("results"):
            raise GeocodingError(f"Google geocoding returned status {status} for '{address}'")

        result = payload["results"][0]
        location = result["geometry"]["location"]
        return {
            "coordinates": {"lat": float(location["lat"]), "lng": float(location["lng"])},
            "address": result.get("formatted_address") or address,
        }

    def _geocode_open_meteo(self, address: str) -> Dict[str, Any]:
        payload = self._get_json(OPEN_METEO_GEOCODE_URL, {"name": address, "count": 1})
        results = payload.get("results")
        if not results:
            raise GeocodingError(f"City not found: {address}")

        result = results[0]
        parts = [result.get("name"), result.get("admin1"), result.get("country")]
        resolved = ", ".join(p for p in parts if p)
        return {
            "coordinates": {"lat": float(result["latitude"]), "lng": float(result["longitude"])},
            "address": resolved or address,
        }


# Module-level cache for the geocoder
_geocoder: Optional[GeocodingService] = None


def get_cached_geocoder() -> Optional[GeocodingService]:
    """Return the process-wide geocoder, or None when geocoding is disabled."""
    global _geocoder
    settings = get_settings()
    if not settings.geocoding_enabled:
        return None
    if _geocoder is None:
        _geocoder = GeocodingService(
            api_key=settings.google_maps_api_key,
            timeout=settings.geocoding_timeout,
        )
    return _geocoder
