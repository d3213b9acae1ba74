"""
journey.location — Permission-gated location lookup.

GPS hardware and geocoding services are external collaborators.  They
plug in through the ``LocationProvider``, ``ReverseGeocoder`` and
``ForwardGeocoder`` protocols below; this module owns only the
authorization flow and turning a placemark into a display string.

Two front ends share the same rules:

``LocationManager``
    Callback-driven state machine.  The provider reports back through
    ``on_authorization_changed`` / ``on_locations`` / ``on_error`` and
    observers are notified when ``location_string`` changes.

``fetch_location``
    Coroutine returning a ``LocationResult`` (granted, denied, or
    failed).  It can be cancelled or bounded with a timeout.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence, Union

log = logging.getLogger(__name__)

DENIED_MESSAGE = "Location access denied"


class AuthorizationStatus(enum.Enum):
    NOT_DETERMINED = "not_determined"
    RESTRICTED = "restricted"
    DENIED = "denied"
    AUTHORIZED_ALWAYS = "authorized_always"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"

    @property
    def is_authorized(self) -> bool:
        return self in (
            AuthorizationStatus.AUTHORIZED_ALWAYS,
            AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
        )

    @property
    def is_denied(self) -> bool:
        return self in (AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED)


class LocationState(enum.Enum):
    UNREQUESTED = "unrequested"
    AWAITING_AUTHORIZATION = "awaiting_authorization"
    AUTHORIZED_FETCHING = "authorized_fetching"
    DENIED = "denied"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Placemark:
    locality: Optional[str] = None  # city, e.g. "San Francisco"
    administrative_area: Optional[str] = None  # state, e.g. "CA"
    country: Optional[str] = None
    coordinate: Optional[Coordinate] = None


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------


class LocationDelegate(Protocol):
    def on_authorization_changed(self, status: AuthorizationStatus) -> None: ...

    def on_locations(self, coordinates: Sequence[Coordinate]) -> None: ...

    def on_error(self, error: BaseException) -> None: ...


class LocationProvider(Protocol):
    """Platform location service.

    ``request_authorization`` and ``request_location`` return at once;
    the outcome is reported to ``delegate`` later, possibly from another
    thread.
    """

    delegate: Optional[LocationDelegate]

    @property
    def authorization_status(self) -> AuthorizationStatus: ...

    def request_authorization(self) -> None: ...

    def request_location(self) -> None: ...


class ReverseGeocoder(Protocol):
    def reverse_geocode(self, coordinate: Coordinate) -> List[Placemark]: ...


class ForwardGeocoder(Protocol):
    def geocode(self, name: str) -> List[Placemark]: ...


def format_placemark(placemark: Placemark) -> str:
    """Display string, preferring "City, State".

    Falls back to "City, Country", then "State, Country", then the bare
    country (which may be empty).
    """
    city = placemark.locality or ""
    state = placemark.administrative_area or ""
    country = placemark.country or ""
    if city and state:
        return f"{city}, {state}"
    if city and country:
        return f"{city}, {country}"
    if state and country:
        return f"{state}, {country}"
    return country


# ---------------------------------------------------------------------------
# Callback-driven manager
# ---------------------------------------------------------------------------

LocationObserver = Callable[[Optional[str]], None]


class LocationManager:
    """Observable location string backed by a provider and a geocoder."""

    def __init__(self, provider: LocationProvider, geocoder: ReverseGeocoder) -> None:
        self.provider = provider
        self.geocoder = geocoder
        self.state = LocationState.UNREQUESTED
        self.location_string: Optional[str] = None
        self.coordinate: Optional[Coordinate] = None
        self._observers: List[LocationObserver] = []
        provider.delegate = self

    def subscribe(self, observer: LocationObserver) -> Callable[[], None]:
        """Register *observer*; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def request_location(self) -> None:
        status = self.provider.authorization_status
        log.debug("Requesting location (authorization: %s)", status.value)

        if status is AuthorizationStatus.NOT_DETERMINED:
            self.state = LocationState.AWAITING_AUTHORIZATION
            self.provider.request_authorization()
        elif status.is_authorized:
            self.state = LocationState.AUTHORIZED_FETCHING
            self.provider.request_location()
        elif status.is_denied:
            log.info("Location access denied or restricted")
            self.state = LocationState.DENIED
            self._publish(DENIED_MESSAGE)

    # -- delegate callbacks -------------------------------------------------

    def on_authorization_changed(self, status: AuthorizationStatus) -> None:
        log.debug("Authorization status changed to: %s", status.value)
        if self.state is not LocationState.AWAITING_AUTHORIZATION:
            return
        if status.is_authorized:
            self.state = LocationState.AUTHORIZED_FETCHING
            self.provider.request_location()
        elif status.is_denied:
            log.info("Authorization denied")
            self.state = LocationState.DENIED
            self._publish(DENIED_MESSAGE)

    def on_locations(self, coordinates: Sequence[Coordinate]) -> None:
        if not coordinates:
            return
        coordinate = coordinates[0]
        self.coordinate = coordinate
        log.debug("Coordinates: %s, %s", coordinate.latitude, coordinate.longitude)

        try:
            placemarks = self.geocoder.reverse_geocode(coordinate)
        except Exception as exc:
            log.warning("Geocoding error: %s", exc)
            self.state = LocationState.FAILED
            return

        if not placemarks:
            log.warning("Geocoding returned no placemarks for %s", coordinate)
            self.state = LocationState.FAILED
            return

        self.state = LocationState.RESOLVED
        self._publish(format_placemark(placemarks[0]))

    def on_error(self, error: BaseException) -> None:
        log.warning("Location error: %s", error)
        self.state = LocationState.FAILED

    def _publish(self, value: Optional[str]) -> None:
        self.location_string = value
        log.debug("Location string: %r", value, extra={"location_state": self.state.value})
        for observer in list(self._observers):
            observer(value)


# ---------------------------------------------------------------------------
# Async request / result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LocationGranted:
    location: str
    coordinate: Coordinate


@dataclass(frozen=True)
class LocationDenied:
    message: str = DENIED_MESSAGE


@dataclass(frozen=True)
class LocationFailed:
    error: BaseException


LocationResult = Union[LocationGranted, LocationDenied, LocationFailed]


class _FutureDelegate:
    """Bridges provider callbacks (any thread) onto asyncio futures."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self.loop = loop
        self.authorization: asyncio.Future = loop.create_future()
        self.location: asyncio.Future = loop.create_future()

    def on_authorization_changed(self, status: AuthorizationStatus) -> None:
        # keep waiting until the user has answered the prompt
        if not (status.is_authorized or status.is_denied):
            return
        self.loop.call_soon_threadsafe(self._settle, self.authorization, status, None)

    def on_locations(self, coordinates: Sequence[Coordinate]) -> None:
        if coordinates:
            self.loop.call_soon_threadsafe(self._settle, self.location, coordinates[0], None)

    def on_error(self, error: BaseException) -> None:
        self.loop.call_soon_threadsafe(self._settle, self.location, None, error)

    @staticmethod
    def _settle(future: asyncio.Future, value, error) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(value)


async def fetch_location(
    provider: LocationProvider,
    geocoder: ReverseGeocoder,
    timeout: Optional[float] = None,
) -> LocationResult:
    """Resolve the current place name.

    Cancelling the awaiting task propagates ``CancelledError``; an
    expired *timeout* yields ``LocationFailed(TimeoutError)``.
    """
    loop = asyncio.get_running_loop()
    bridge = _FutureDelegate(loop)
    previous = provider.delegate
    provider.delegate = bridge
    try:
        return await asyncio.wait_for(_resolve(provider, geocoder, bridge), timeout)
    except asyncio.TimeoutError as exc:
        log.warning("Location request timed out after %ss", timeout)
        return LocationFailed(exc)
    finally:
        provider.delegate = previous


async def _resolve(
    provider: LocationProvider, geocoder: ReverseGeocoder, bridge: _FutureDelegate
) -> LocationResult:
    status = provider.authorization_status
    if status is AuthorizationStatus.NOT_DETERMINED:
        provider.request_authorization()
        status = await bridge.authorization
    if status.is_denied:
        return LocationDenied()
    if not status.is_authorized:
        return LocationFailed(RuntimeError(f"Unexpected authorization status: {status.value}"))

    provider.request_location()
    try:
        coordinate = await bridge.location
    except Exception as exc:
        log.warning("Location error: %s", exc)
        return LocationFailed(exc)

    try:
        placemarks = await bridge.loop.run_in_executor(None, geocoder.reverse_geocode, coordinate)
    except Exception as exc:
        log.warning("Geocoding error: %s", exc)
        return LocationFailed(exc)
    if not placemarks:
        return LocationFailed(LookupError(f"No placemark for {coordinate}"))
    return LocationGranted(format_placemark(placemarks[0]), coordinate)
