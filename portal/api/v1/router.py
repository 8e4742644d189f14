# portal/api/v1/router.py
from fastapi import APIRouter
from portal.modules.payments.router import router as billing_router

api_router = APIRouter()

api_router.include_router(billing_router, prefix="/billing", tags=["billing"])
