"""
IGV Kernel

Pure domain layer for Peruvian electronic invoicing calculations:
- Decimal-only monetary values with explicit half-up rounding
- Closed tax classification enum decoded from SUNAT wire codes
- Injectable, immutable tax policy
- Typed exceptions and structured JSON logging
"""

__version__ = "0.1.0"
