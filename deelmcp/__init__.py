"""deelmcp: read-only Deel HR/payroll query tools for conversational agents."""

__version__ = "1.0.0"
