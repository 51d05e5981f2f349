"""Indoor multi-floor wayfinding: location registry, graph assembly, A* routing."""

__version__ = "1.0.0"
