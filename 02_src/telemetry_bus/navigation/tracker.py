"""Adapter from host navigation callbacks to Navigation records."""

from typing import Any, Callable, NamedTuple, Protocol, runtime_checkable

from ..event_bus import IEventBus
from ..logging_config import get_logger
from ..models import NavigationRecord, NavigationType

logger = get_logger(__name__)


@runtime_checkable
class INavigationObserver(Protocol):
    """The four navigation lifecycle notifications a host emits."""

    def did_push(self, route: Any, previous_route: Any = None) -> None:
        ...

    def did_pop(self, route: Any, previous_route: Any = None) -> None:
        ...

    def did_replace(self, *, new_route: Any = None, old_route: Any = None) -> None:
        ...

    def did_remove(self, route: Any, previous_route: Any = None) -> None:
        ...


class Transition(NamedTuple):
    """Canonical origin/destination of one navigation notification."""

    from_route: str | None
    to_route: str | None
    navigation_type: NavigationType
    from_present: bool
    to_present: bool


def route_name(route: Any) -> str | None:
    """
    Read a route's declared name.

    Looks at ``route.name`` first, then ``route.settings.name``. Returns
    None for a missing route or a route without a name.
    """
    if route is None:
        return None
    name = getattr(route, "name", None)
    if name is None:
        settings = getattr(route, "settings", None)
        if settings is not None:
            name = getattr(settings, "name", None)
    return None if name is None else str(name)


def derive_transition(navigation_type: NavigationType | str, route: Any, previous_route: Any) -> Transition:
    """
    Map one notification's route arguments to (from, to).

    push and remove go from ``previous_route`` to ``route``; pop and
    replace go from ``route`` to ``previous_route``. For replace, ``route``
    is the new route and ``previous_route`` the old one.
    """
    navigation_type = NavigationType(navigation_type)
    if navigation_type in (NavigationType.PUSH, NavigationType.REMOVE):
        origin, destination = previous_route, route
    else:
        origin, destination = route, previous_route

    return Transition(
        from_route=route_name(origin),
        to_route=route_name(destination),
        navigation_type=navigation_type,
        from_present=origin is not None,
        to_present=destination is not None,
    )


class NavigationTracker:
    """Publishes one Navigation record per host navigation notification."""

    def __init__(self, event_bus: IEventBus):
        self._event_bus = event_bus

    def did_push(self, route: Any, previous_route: Any = None) -> None:
        """A route was pushed on top of ``previous_route``."""
        self._track(NavigationType.PUSH, route, previous_route)

    def did_pop(self, route: Any, previous_route: Any = None) -> None:
        """``route`` was popped, revealing ``previous_route``."""
        self._track(NavigationType.POP, route, previous_route)

    def did_replace(self, *, new_route: Any = None, old_route: Any = None) -> None:
        """``old_route`` was replaced by ``new_route``."""
        self._track(NavigationType.REPLACE, new_route, old_route)

    def did_remove(self, route: Any, previous_route: Any = None) -> None:
        """``route`` was removed from below ``previous_route``."""
        self._track(NavigationType.REMOVE, route, previous_route)

    def callbacks(self) -> dict[NavigationType, Callable[..., None]]:
        """Bound hooks keyed by navigation type, for host registration."""
        return {
            NavigationType.PUSH: self.did_push,
            NavigationType.POP: self.did_pop,
            NavigationType.REPLACE: self.did_replace,
            NavigationType.REMOVE: self.did_remove,
        }

    def _track(self, navigation_type: NavigationType, route: Any, previous_route: Any) -> None:
        transition = derive_transition(navigation_type, route, previous_route)
        logger.debug(
            "Navigation %s: %s -> %s",
            transition.navigation_type.value,
            transition.from_route,
            transition.to_route,
        )
        self._event_bus.publish(
            NavigationRecord(
                navigation_type=transition.navigation_type,
                from_route=transition.from_route,
                to_route=transition.to_route,
                from_route_present=transition.from_present,
                to_route_present=transition.to_present,
            )
        )
