"""Synthetic history built from a single current price.

The series is a display heuristic so charts have something plausible to
draw when no provider answers. It is not a statistical model of the asset
and every point it produces is flagged ``synthetic``.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta

from markethistory.data.base import utc_now
from markethistory.domain.models import AssetClass, HistoricalDataPoint, with_change

# Full width of the relative perturbation: 0.10 allows +/-5%, 0.04 allows +/-2%.
VOLATILITY_BANDS: dict[str, float] = {
    AssetClass.CRYPTO: 0.10,
    AssetClass.STOCK: 0.04,
    AssetClass.ETF: 0.04,
}


def volatility_band_for(asset_class: str) -> float:
    return VOLATILITY_BANDS.get(str(asset_class), VOLATILITY_BANDS[AssetClass.STOCK])


def synthesize(
    current_price: float,
    days: int,
    volatility_band: float,
    label: str,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[HistoricalDataPoint]:
    """Return `days + 1` daily points from `days` ago up to `now`, inclusive.

    Each price is `current_price` perturbed by a uniform draw within the band,
    scaled by how far the point sits from today, so the newest point is the
    current price itself.
    """
    end = now or utc_now()
    source = rng or random.Random()
    span = max(days, 0)
    points: list[HistoricalDataPoint] = []
    for days_back in range(span, -1, -1):
        weight = days_back / span if span else 0.0
        variance = (source.random() - 0.5) * volatility_band
        price = current_price * (1 + variance * weight)
        points.append(
            HistoricalDataPoint(
                timestamp=(end - timedelta(days=days_back)).isoformat(),
                value=price,
                price=price,
                label=label,
                synthetic=True,
            )
        )
    return with_change(points)
