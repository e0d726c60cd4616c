"""HubSpot object types, property sets and page sizes used by the proxy."""

from __future__ import annotations

# ── Object Types ────────────────────────────────────────────────────────────

CONTACTS = "contacts"
DEALS = "deals"

# ── Property Sets ───────────────────────────────────────────────────────────
# Properties requested from HubSpot; anything not listed is omitted upstream.

CONTACT_PROPERTIES: tuple[str, ...] = (
    "firstname",
    "lastname",
    "email",
    "phone",
    "address",
    "jobtitle",
    "company",
)

CONTACT_SEARCH_PROPERTIES: tuple[str, ...] = ("firstname", "lastname", "email")

DEAL_PROPERTIES: tuple[str, ...] = (
    "dealname",
    "amount",
    "dealstage",
    "closedate",
    "pipeline",
)

# ── Page Sizes ──────────────────────────────────────────────────────────────
# Single page only; the proxy never follows paging cursors.

LIST_PAGE_SIZE = 50
ASSOCIATION_PAGE_SIZE = 100
SEARCH_LIMIT = 1
