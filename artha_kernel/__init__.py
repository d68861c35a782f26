"""
Artha Kernel - shared foundation for the calculation core.

Provides:
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging
- Injectable clocks (engines never read wall-clock time)
- Currency precision registry
- Financial record types and status vocabularies
"""

__version__ = "0.1.0"
