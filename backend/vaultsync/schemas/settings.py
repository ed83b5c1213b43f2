from __future__ import annotations

from typing import List, Optional

from vaultsync.schemas.base import ClientModel


class EquivalentDomainsData(ClientModel):
    equivalent_domains: Optional[List[List[str]]] = None
    excluded_global_equivalent_domains: Optional[List[int]] = None
