"""API routes."""

from payroll_pro.api.routes.attendance import router as attendance_router
from payroll_pro.api.routes.auth import router as auth_router
from payroll_pro.api.routes.employees import router as employees_router
from payroll_pro.api.routes.health import router as health_router
from payroll_pro.api.routes.leaves import router as leaves_router
from payroll_pro.api.routes.payroll import router as payroll_router
from payroll_pro.api.routes.payslips import router as payslips_router
from payroll_pro.api.routes.tax import router as tax_router

__all__ = [
    "attendance_router",
    "auth_router",
    "employees_router",
    "health_router",
    "leaves_router",
    "payroll_router",
    "payslips_router",
    "tax_router",
]
