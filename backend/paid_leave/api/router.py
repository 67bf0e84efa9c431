from fastapi import APIRouter

from paid_leave.api.absences import absences_router
from paid_leave.api.employees import employees_router
from paid_leave.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(employees_router)
api_router.include_router(absences_router)
api_router.include_router(requests_router)
