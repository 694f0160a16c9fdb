from __future__ import annotations

"""
bundletree: lazily expanded tree views over asset bundles.
"""

__version__ = "1.0.0"
