from fastapi import APIRouter

from starchart.api import chart

api_router = APIRouter()

api_router.include_router(chart.router)
