from __future__ import annotations

from typing import Any, Dict, List, Optional

INTERFERENCE_COST = 2000
PROMO_PREFIX = "Promo: "

# teams x members_per_team must all be filled before a match can be booked
MATCH_FORMATS: List[Dict[str, Any]] = [
    {"id": "1v1", "name": "1 vs 1", "teams": 2, "members_per_team": 1},
    {"id": "2v2", "name": "Tag Team", "teams": 2, "members_per_team": 2},
    {"id": "3way", "name": "Triple Threat", "teams": 3, "members_per_team": 1},
    {"id": "4way", "name": "Fatal 4-Way", "teams": 4, "members_per_team": 1},
]

STIPULATIONS: List[Dict[str, Any]] = [
    {"name": "Normal", "cost": 0},
    {"name": "Extreme Rules", "cost": 18000},
    {"name": "Tables", "cost": 6000},
    {"name": "TLC", "cost": 24000},
    {"name": "Steel Cage", "cost": 42000},
    {"name": "Hell in a Cell", "cost": 48000},
    {"name": "Iron Man", "cost": 24000},
    {"name": "Last Man Standing", "cost": 18000},
    {"name": "Submission", "cost": 30000},
    {"name": "Ambulance", "cost": 36000},
    {"name": "Casket", "cost": 90000},
]

# is_vs: speaker (slot 0) + target (slot 1)
PROMO_TYPES: List[Dict[str, Any]] = [
    {"id": "self_promo", "name": "Self Promo", "cost": 2500, "is_vs": False},
    {"id": "call_out", "name": "Call Out", "cost": 3000, "is_vs": True},
    {"id": "training", "name": "Training", "cost": 5000, "is_vs": False},
    {"id": "ad_break", "name": "Ad Break", "cost": 0, "is_vs": False},
    {"id": "charity", "name": "Charity", "cost": 15000, "is_vs": False},
]

BRANDS: List[Dict[str, Any]] = [
    {"id": "raw", "name": "RAW", "color": "#EF4444"},
    {"id": "smackdown", "name": "SmackDown", "color": "#3B82F6"},
    {"id": "nxt", "name": "NXT", "color": "#F59E0B"},
    {"id": "wcw", "name": "WCW", "color": "#A855F7"},
    {"id": "ecw", "name": "ECW", "color": "#10B981"},
]
DEFAULT_THEME_COLOR = "#64748B"

TITLE_CATEGORIES = ("World", "Midcard", "Tag", "MITB")

_BRAND_TITLES: Dict[str, List[Dict[str, str]]] = {
    "raw": [
        {"name": "World Heavyweight Champ", "category": "World", "gender": "Male", "image_ref": "raw-male-world.webp"},
        {"name": "Women's World Champ", "category": "World", "gender": "Female", "image_ref": "raw-female-world.webp"},
        {"name": "Intercontinental Champ", "category": "Midcard", "gender": "Male", "image_ref": "raw-male-midcard.webp"},
        {"name": "Women's Intercontinental", "category": "Midcard", "gender": "Female", "image_ref": "raw-female-midcard.webp"},
        {"name": "World Tag Team Champs", "category": "Tag", "gender": "Male", "image_ref": "raw-male-tagteam.webp"},
        {"name": "WWE Women's Tag Team", "category": "Tag", "gender": "Female", "image_ref": "female-tagteam.webp"},
        {"name": "Mr. MITB (RAW)", "category": "MITB", "gender": "Male", "image_ref": "male-moneyinthebank.png"},
        {"name": "Miss MITB (RAW)", "category": "MITB", "gender": "Female", "image_ref": "female-moneyinthebank.png"},
    ],
    "smackdown": [
        {"name": "Undisputed WWE Champ", "category": "World", "gender": "Male", "image_ref": "smackdown-male-world.webp"},
        {"name": "WWE Women's Champ", "category": "World", "gender": "Female", "image_ref": "smackdown-female-world.webp"},
        {"name": "United States Champ", "category": "Midcard", "gender": "Male", "image_ref": "smackdown-male-midcard.webp"},
        {"name": "Women's United States", "category": "Midcard", "gender": "Female", "image_ref": "smackdown-female-midcard.webp"},
        {"name": "WWE Tag Team Champs", "category": "Tag", "gender": "Male", "image_ref": "smackdown-male-tagteam.webp"},
        {"name": "WWE Women's Tag Team", "category": "Tag", "gender": "Female", "image_ref": "female-tagteam.webp"},
        {"name": "Mr. MITB (SD)", "category": "MITB", "gender": "Male", "image_ref": "male-moneyinthebank.png"},
        {"name": "Miss MITB (SD)", "category": "MITB", "gender": "Female", "image_ref": "female-moneyinthebank.png"},
    ],
    "nxt": [
        {"name": "NXT Championship", "category": "World", "gender": "Male", "image_ref": "nxt-male-world.webp"},
        {"name": "NXT Women's Champ", "category": "World", "gender": "Female", "image_ref": "nxt-female-world.webp"},
        {"name": "NXT North American", "category": "Midcard", "gender": "Male", "image_ref": "nxt-male-midcard.webp"},
        {"name": "Women's North American", "category": "Midcard", "gender": "Female", "image_ref": "nxt-female-midcard.webp"},
        {"name": "NXT Tag Team Champs", "category": "Tag", "gender": "Male", "image_ref": "nxt-male-tagteam.webp"},
    ],
}


def brand_titles(brand: str) -> List[Dict[str, str]]:
    key = (brand or "").strip().lower()
    if key in _BRAND_TITLES:
        return [dict(t) for t in _BRAND_TITLES[key]]
    # generic set for custom brands
    return [
        {"name": f"{brand} World Champ", "category": "World", "gender": "Male", "image_ref": f"{key}-male-world.webp"},
        {"name": f"{brand} Midcard Champ", "category": "Midcard", "gender": "Male", "image_ref": f"{key}-male-midcard.webp"},
        {"name": f"{brand} Tag Team Champs", "category": "Tag", "gender": "Male", "image_ref": f"{key}-male-tagteam.webp"},
        {"name": f"{brand} Womens Champ", "category": "World", "gender": "Female", "image_ref": f"{key}-female-world.webp"},
    ]


def brand_color(brand: str) -> str:
    key = (brand or "").strip().lower()
    for b in BRANDS:
        if b["id"] == key:
            return str(b["color"])
    return DEFAULT_THEME_COLOR


def find_format(match_type: str) -> Optional[Dict[str, Any]]:
    for f in MATCH_FORMATS:
        if f["name"] == match_type or f["id"] == match_type:
            return f
    return None


def find_promo(match_type: str) -> Optional[Dict[str, Any]]:
    name = match_type[len(PROMO_PREFIX) :] if match_type.startswith(PROMO_PREFIX) else match_type
    for p in PROMO_TYPES:
        if p["name"] == name or p["id"] == name:
            return p
    return None


def is_promo(match_type: str) -> bool:
    return match_type.startswith(PROMO_PREFIX)


def segment_cost(match_type: str, stipulation: str = "Normal", interference: bool = False) -> int:
    """Booking cost of one card item, as the planner quotes it."""
    if is_promo(match_type):
        promo = find_promo(match_type)
        return int(promo["cost"]) if promo else 0
    stip = next((s for s in STIPULATIONS if s["name"] == stipulation), None)
    cost = int(stip["cost"]) if stip else 0
    if interference:
        cost += INTERFERENCE_COST
    return cost


def get_catalog() -> Dict[str, Any]:
    return {
        "match_formats": MATCH_FORMATS,
        "promo_types": PROMO_TYPES,
        "stipulations": STIPULATIONS,
        "interference_cost": INTERFERENCE_COST,
        "brands": BRANDS,
        "title_categories": list(TITLE_CATEGORIES),
    }
