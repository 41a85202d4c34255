"""PayrollPro: HR and payroll administration core."""

__version__ = "0.1.0"
