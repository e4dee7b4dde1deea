"""Domain layer for finboard application."""

_SERVICES = {
    "AggregationEngine": "finboard.domain.aggregation",
    "DashboardController": "finboard.domain.dashboard",
    "ProfileService": "finboard.domain.profile",
    "RecordService": "finboard.domain.record_service",
}

__all__ = list(_SERVICES)


# Services import finboard.config, which imports this package; load lazily
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        module = importlib.import_module(_SERVICES[name])
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
