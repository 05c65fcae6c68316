"""FastAPI mock of the LEGO deals/sales API.

Serves deterministic data in the real API's envelope so the viewer can be run
and tested offline:

    uvicorn legoview.mock_servers.app:create_app --factory --port 8001
"""

import math
import os
import random
import uuid as uuid_lib
from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query


SET_IDS = ["42151", "75370", "60360", "10316", "31150", "42182", "76989", "43247"]
THEMES = ["Technic", "Star Wars", "City", "Icons", "Creator", "Harry Potter", "Disney"]

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _paginate(items: List[Dict], page: int, size: int) -> Dict:
    count = len(items)
    page_count = max(1, math.ceil(count / size))
    start = (page - 1) * size
    return {
        "result": items[start:start + size],
        "meta": {
            "currentPage": page,
            "pageCount": page_count,
            "pageSize": size,
            "count": count,
        },
    }


def generate_deals(count: int, rng: random.Random) -> List[Dict]:
    """Dealabs-style deals; published is epoch seconds."""
    deals = []
    for i in range(count):
        set_id = rng.choice(SET_IDS)
        retail = round(rng.uniform(15.0, 300.0), 2)
        discount = rng.randint(0, 70)
        published = BASE_TIME + timedelta(hours=rng.randint(0, 24 * 60))
        deals.append({
            "id": set_id,
            "uuid": str(uuid_lib.UUID(int=rng.getrandbits(128))),
            "title": f"LEGO {rng.choice(THEMES)} {set_id}",
            "link": f"https://www.dealabs.com/bons-plans/lego-{set_id}-{i}",
            "price": round(retail * (100 - discount) / 100, 2),
            "retail": retail,
            "discount": discount,
            "temperature": rng.randint(0, 400),
            "comments": rng.randint(0, 40),
            "published": int(published.timestamp()),
            "community": "dealabs",
        })
    return deals


def generate_sales(set_id: str, count: int, rng: random.Random) -> List[Dict]:
    """Vinted-style sales; published is an RFC-1123 GMT string, price a string."""
    sales = []
    for i in range(count):
        published = BASE_TIME + timedelta(minutes=rng.randint(0, 60 * 24 * 60))
        sales.append({
            "uuid": str(uuid_lib.UUID(int=rng.getrandbits(128))),
            "title": f"Lego {set_id} complet",
            "link": f"https://www.vinted.fr/items/{set_id}{i:04d}",
            "price": f"{rng.uniform(10.0, 250.0):.2f}",
            "published": format_datetime(published, usegmt=True),
        })
    return sales


def create_mock_app(
    name: str = "lego-api",
    deal_count: int = 40,
    sales_per_set: int = 15,
    random_seed: Optional[int] = None,
    error_rate: float = 0.0
) -> FastAPI:
    """
    Create a mock LEGO API.
    
    Args:
        name: Server name reported by /health
        deal_count: Number of deals served by /deals
        sales_per_set: Number of sales served per set id
        random_seed: Seed for deterministic data and error injection
        error_rate: Probability of answering 503 (0.0-1.0)
        
    Returns:
        FastAPI application
    """
    app = FastAPI(title=f"Mock API - {name}")
    rng = random.Random(random_seed)
    deals = generate_deals(deal_count, rng)
    sales_cache: Dict[str, List[Dict]] = {}
    
    def maybe_fail() -> None:
        if error_rate > 0 and rng.random() < error_rate:
            raise HTTPException(status_code=503, detail="Simulated error")
    
    @app.get("/deals")
    async def get_deals(page: int = Query(1, ge=1), size: int = Query(6, ge=1)):
        """Get paginated deals."""
        maybe_fail()
        return {"success": True, "data": _paginate(deals, page, size)}
    
    @app.get("/sales")
    async def get_sales(
        id: Optional[str] = None,
        page: int = Query(1, ge=1),
        size: int = Query(6, ge=1)
    ):
        """Get paginated Vinted sales for one set id."""
        maybe_fail()
        if not id:
            return {"success": False, "data": "missing set id"}
        if id not in sales_cache:
            set_rng = random.Random(f"{random_seed}:{id}")
            sales_cache[id] = generate_sales(id, sales_per_set, set_rng)
        return {"success": True, "data": _paginate(sales_cache[id], page, size)}
    
    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "server": name}
    
    return app


def create_app() -> FastAPI:
    """Factory function for uvicorn --factory."""
    return create_mock_app(
        name=os.getenv("SERVER_NAME", "lego-api"),
        deal_count=int(os.getenv("DEAL_COUNT", 40)),
        sales_per_set=int(os.getenv("SALES_PER_SET", 15)),
        random_seed=int(os.getenv("RANDOM_SEED", 42)),
        error_rate=float(os.getenv("ERROR_RATE", 0.0)),
    )
