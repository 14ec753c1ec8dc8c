from __future__ import annotations

import yaml
from pathlib import Path
from typing import Any, Dict, List

# Directory holding config.yaml (next to this file)
BASE_DIR = Path(__file__).resolve().parent


def _load_yaml(path: Path = BASE_DIR / "config.yaml") -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


CFG = _load_yaml()

# Currency comparisons
EPSILON: float = float(CFG.get("currency_epsilon", 0.01))

# Refinance
REFINANCE_BREAK_EVEN_LIMIT_MONTHS: int = int(CFG.get("refinance_break_even_limit_months", 60))

# Rent vs buy ladder
ADVANTAGE_DEAD_BAND: float = float(CFG.get("advantage_dead_band", 1_000))
LONG_TERM_BUY_MARGIN: float = float(CFG.get("long_term_buy_margin", 50_000))
RENT_MONTHLY_DELTA_TRIGGER: float = float(CFG.get("rent_monthly_delta_trigger", 500))
MONTHLY_DELTA_CONSIDERATION: float = float(CFG.get("monthly_delta_consideration", 300))
UPFRONT_CONSIDERATION: float = float(CFG.get("upfront_consideration", 50_000))

# Horizons
DISPLAY_YEARS: int = int(CFG.get("display_years", 10))
BREAK_EVEN_SEARCH_YEARS: int = int(CFG.get("break_even_search_years", 20))

# Extra-payment scenarios
SCENARIO_EXTRA_AMOUNTS: List[float] = [float(a) for a in CFG.get("scenario_extra_amounts", [50, 100, 200, 500])]
_TIERS: Dict[str, Any] = CFG.get("savings_rating_tiers") or {}
RATING_EXCELLENT_ABOVE: float = float(_TIERS.get("excellent", 50_000))
RATING_GOOD_ABOVE: float = float(_TIERS.get("good", 20_000))
RATING_BENEFICIAL_ABOVE: float = float(_TIERS.get("beneficial", 5_000))

# Rent vs buy defaults (percent units)
RENT_VS_BUY_DEFAULTS: Dict[str, float] = {
    "home_price": 400_000.0,
    "monthly_rent": 2_200.0,
    "down_payment_pct": 20.0,
    "interest_rate_pct": 6.5,
    "loan_term_years": 30.0,
    "closing_costs": 8_000.0,
    "property_tax_rate_pct": 1.2,
    "monthly_insurance": 200.0,
    "maintenance_pct": 1.5,
    "monthly_hoa": 0.0,
    "home_appreciation_pct": 3.0,
    "rent_increase_pct": 3.0,
    "investment_return_pct": 7.0,
    "security_deposit": 2_200.0,
    "monthly_renters_insurance": 25.0,
}
RENT_VS_BUY_DEFAULTS.update(
    {k: float(v) for k, v in (CFG.get("rent_vs_buy_defaults") or {}).items() if k in RENT_VS_BUY_DEFAULTS}
)
