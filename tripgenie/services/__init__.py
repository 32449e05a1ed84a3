"""External service collaborators."""

from tripgenie.services.geocoding import GeocodingError, GeocodingService, get_cached_geocoder

__all__ = ["GeocodingError", "GeocodingService", "get_cached_geocoder"]
