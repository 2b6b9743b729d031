"""Navigation tracking."""

from .tracker import INavigationObserver, NavigationTracker, Transition, derive_transition, route_name

__all__ = ["INavigationObserver", "NavigationTracker", "Transition", "derive_transition", "route_name"]
