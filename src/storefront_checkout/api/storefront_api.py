"""
Local FastAPI stand-in for the storefront delivery-charge API.
Serves seeded delivery charge rules so checkout can be exercised without the
production backend. Promo code validation is not simulated.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging
from datetime import datetime
from typing import List

from ..core.config import LOCAL_API_HOST, LOCAL_API_PORT
from ..core.delivery_charge import calculate_delivery_charge
from ..models.api import DeliveryChargeRequest, DeliveryChargeResponse
from ..models.delivery import DeliveryChargeRule, DeliveryTier

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Storefront Delivery API (local)")

# Enable CORS for the storefront dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

DELIVERY_RULES: List[DeliveryChargeRule] = [
    DeliveryChargeRule(
        id="local-tiered",
        name="Standard delivery",
        charge_type="tiered",
        tiers=[
            DeliveryTier(min_amount=0, max_amount=499, charge=50),
            DeliveryTier(min_amount=499, max_amount=999, charge=30),
            DeliveryTier(min_amount=999, max_amount=None, charge=0),
        ],
        priority=1,
    ),
    DeliveryChargeRule(
        id="local-flat",
        name="Flat fallback",
        charge_type="fixed",
        fixed_amount=60,
        priority=10,
    ),
]


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


@app.get("/api/delivery-charges", response_model=List[DeliveryChargeRule], response_model_by_alias=True)
def list_delivery_charges() -> List[DeliveryChargeRule]:
    return DELIVERY_RULES


@app.post("/api/delivery-charges/calculate", response_model=DeliveryChargeResponse,
          response_model_by_alias=True)
def calculate_delivery_charge_endpoint(req: DeliveryChargeRequest) -> DeliveryChargeResponse:
    logger.info(f"Delivery charge request: {req.order_amount:.2f}")

    try:
        charge = calculate_delivery_charge(req.order_amount, DELIVERY_RULES)
    except Exception as e:
        logger.error(f"Delivery charge error: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    return DeliveryChargeResponse(delivery_charge=charge)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=LOCAL_API_HOST, port=LOCAL_API_PORT)
