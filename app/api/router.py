# app/api/router.py
from fastapi import APIRouter
from app.modules.employees.router import router as employees_router

api_router = APIRouter()

api_router.include_router(employees_router, prefix="/employees", tags=["employees"])
