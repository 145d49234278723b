"""
Registration of the catalog's Prometheus metrics.

Every metric lives under the `catalog_` namespace. Modules here are
re-imported by `uvicorn --reload`, so a name that is already registered
hands back the existing collector instead of raising.
"""

from collections.abc import Sequence
from typing import TypeVar

from prometheus_client import REGISTRY
from prometheus_client.metrics import MetricWrapperBase

NAMESPACE = "catalog"

M = TypeVar("M", bound=MetricWrapperBase)


def register(
    metric_type: type[M],
    name: str,
    documentation: str,
    labels: Sequence[str] = (),
    **kwargs,
) -> M:
    """
    Create a namespaced metric, or return the one registered earlier.

    Args:
        metric_type: Counter, Gauge or Histogram.
        name: Name without namespace; counters also omit `_total`.
        documentation: Help text shown on `/metrics`.
        labels: Label names.
        **kwargs: Extra constructor arguments such as `buckets`.

    Returns:
        The metric instance.
    """
    existing = REGISTRY._names_to_collectors.get(f"{NAMESPACE}_{name}")
    if existing is not None:
        return existing  # type: ignore[return-value]
    return metric_type(
        name, documentation, labels, namespace=NAMESPACE, **kwargs
    )
