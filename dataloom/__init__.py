"""DataLoom: dataset profiling and group comparison statistics.

This package turns an uploaded table into a typed dataset profile and compares
a numeric column across the groups of a categorical column (t-test, one-way
ANOVA and per-group dispersion), with an optional LLM layer for
natural-language questions about the data.
"""

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy imports for main package exports."""
    if name in ("DatasetProfile", "profile_dataset"):
        from dataloom.core import profile

        return getattr(profile, name)
    if name in ("Dataset", "load_dataset"):
        from dataloom.core import loader

        return getattr(loader, name)
    if name in ("StatisticalReport", "analyze"):
        from dataloom.analysis import report

        return getattr(report, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Dataset",
    "DatasetProfile",
    "StatisticalReport",
    "__version__",
    "analyze",
    "load_dataset",
    "profile_dataset",
]
