"""ORM models."""

from payroll_pro.models.activity import ActivityEntry
from payroll_pro.models.attendance import AttendanceRecord
from payroll_pro.models.base import Base, TimestampMixin
from payroll_pro.models.employee import Employee, PayPeriod, Profile, Role
from payroll_pro.models.leave import LeaveRequest, LeaveType
from payroll_pro.models.payroll import PayrollItem, PayrollPeriod, Payslip
from payroll_pro.models.tax import EmployeeTaxDetails, FilingStatus, TaxRate

__all__ = [
    "ActivityEntry",
    "AttendanceRecord",
    "Base",
    "Employee",
    "EmployeeTaxDetails",
    "FilingStatus",
    "LeaveRequest",
    "LeaveType",
    "PayPeriod",
    "PayrollItem",
    "PayrollPeriod",
    "Payslip",
    "Profile",
    "Role",
    "TaxRate",
    "TimestampMixin",
]
