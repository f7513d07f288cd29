from lazyspec.reports.base import Reporter
from lazyspec.reports.console import NestedReporter


__all__ = ["NestedReporter", "Reporter"]
