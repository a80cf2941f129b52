"""Governor: trust-gated authorization for autonomous agents.

Every agent action passes a guardrail check against the organization's
trust configuration, every decision lands in an append-only audit trail,
and queued agent work is dispatched in bounded sequential batches.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
