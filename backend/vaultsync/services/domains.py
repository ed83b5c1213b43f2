from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from vaultsync.crud import users as crud_users
from vaultsync.models.user import User

# Domain groups every user shares; users may opt out per group type
GLOBAL_EQUIVALENT_DOMAINS: list[dict[str, Any]] = [
    {"Type": 0, "Domains": ["ameritrade.com", "tdameritrade.com"]},
    {"Type": 1, "Domains": ["bankofamerica.com", "bofa.com", "mbna.com", "usecfo.com"]},
    {"Type": 2, "Domains": ["sprint.com", "sprintpcs.com", "nextel.com"]},
    {"Type": 3, "Domains": ["youtube.com", "google.com", "gmail.com"]},
    {"Type": 4, "Domains": ["apple.com", "icloud.com"]},
    {"Type": 5, "Domains": ["wellsfargo.com", "wf.com", "wellsfargoadvisors.com"]},
    {"Type": 6, "Domains": ["mymerrill.com", "ml.com", "merrilledge.com"]},
    {"Type": 7, "Domains": ["accountonline.com", "citi.com", "citibank.com", "citicards.com", "citibankonline.com"]},
    {"Type": 8, "Domains": ["cnet.com", "cnettv.com", "com.com", "download.com", "news.com", "search.com", "upload.com"]},
    {"Type": 9, "Domains": ["microsoft.com", "live.com", "outlook.com", "hotmail.com", "office.com", "bing.com"]},
]


def get_eq_domains(user: User) -> dict[str, Any]:
    excluded = set(user.get_excluded_globals())
    globals_json = [
        {
            "Type": group["Type"],
            "Domains": list(group["Domains"]),
            "Excluded": group["Type"] in excluded,
        }
        for group in GLOBAL_EQUIVALENT_DOMAINS
    ]
    return {
        "EquivalentDomains": user.get_equivalent_domains(),
        "GlobalEquivalentDomains": globals_json,
        "Object": "domains",
    }


def update_eq_domains(
    db: Session,
    user: User,
    equivalent_domains: list[list[str]] | None,
    excluded_globals: list[int] | None,
) -> dict[str, Any]:
    crud_users.update_equivalent_domains(
        db,
        user,
        equivalent_domains or [],
        excluded_globals or [],
    )
    return get_eq_domains(user)
