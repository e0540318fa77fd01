# Import public names lazily to avoid circular dependencies
_EXPORTS = {
    "main": "xpense.cli.main",
    "normalize": "xpense.domain.normalizer",
    "normalize_all": "xpense.domain.normalizer",
    "select_in_period": "xpense.domain.period",
    "aggregate": "xpense.domain.aggregator",
    "compare": "xpense.domain.comparator",
    "build_report": "xpense.domain.report",
    "ReportService": "xpense.domain.report",
    "ReportConfig": "xpense.config",
    "Period": "xpense.domain.entities",
    "Flow": "xpense.domain.entities",
}


def __getattr__(name):
    if name in _EXPORTS:
        import importlib

        return getattr(importlib.import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
