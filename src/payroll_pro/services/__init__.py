"""PayrollPro services."""

from payroll_pro.services.attendance_service import AttendanceService
from payroll_pro.services.auth_service import AuthService, RateLimiter
from payroll_pro.services.dashboard_service import DashboardService
from payroll_pro.services.employee_service import EmployeeService
from payroll_pro.services.leave_service import LEAVE_ALLOTMENTS, LeaveService
from payroll_pro.services.payroll_service import PayrollService
from payroll_pro.services.payslip_service import PayslipService
from payroll_pro.services.state_machine import (
    InvalidTransitionError,
    LeaveStateMachine,
    LeaveStatus,
    PayrollPeriodStateMachine,
    PayrollStatus,
)
from payroll_pro.services.tax_service import TaxService

__all__ = [
    "AttendanceService",
    "AuthService",
    "DashboardService",
    "EmployeeService",
    "InvalidTransitionError",
    "LEAVE_ALLOTMENTS",
    "LeaveService",
    "LeaveStateMachine",
    "LeaveStatus",
    "PayrollPeriodStateMachine",
    "PayrollService",
    "PayrollStatus",
    "PayslipService",
    "RateLimiter",
    "TaxService",
]
