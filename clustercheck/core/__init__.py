"""Core verdict types, policy evaluation and logging helpers."""

from clustercheck.core.verdict import INITIAL_VERDICT, Verdict, VerdictCell, VerdictReason

__all__ = ["Verdict", "VerdictCell", "VerdictReason", "INITIAL_VERDICT"]
