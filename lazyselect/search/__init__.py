"""Search pipeline exports.

Local filtering lives in ``option_tree.filtering``; this package owns the
generation-guarded entry point that publishes new trees.
"""

from __future__ import annotations

from .pipeline import OptionsProvider, OptionsSource, SearchPipeline, SearchResult, report_provider_failure

__all__ = ["OptionsProvider", "OptionsSource", "SearchPipeline", "SearchResult", "report_provider_failure"]
