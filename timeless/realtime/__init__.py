"""Real-time propagation of deal updates."""

from timeless.realtime.notifier import Notifier, NullNotifier, build_notifier

__all__ = ["Notifier", "NullNotifier", "build_notifier"]
