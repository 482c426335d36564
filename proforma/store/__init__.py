"""
Remote scenario store.
"""

from proforma.store.client import ScenarioStoreClient, ScenarioStoreError

__all__ = ["ScenarioStoreClient", "ScenarioStoreError"]
