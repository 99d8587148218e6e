"""
mp_reliability – SLO error-budget tracking and automated remediation.

Import path convention::

    from mp_reliability.slo import ErrorBudgetTracker, SLOCatalog
    from mp_reliability.remediation import RemediationEngine
    from mp_reliability.application.monitor import ErrorBudgetMonitor
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
