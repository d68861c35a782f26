"""
Artha CLI -- command-line access to the calculation core.

Run withholding-tax calculations, format NPWP numbers, and compute
dashboard trends or the annual tax recap over exported records.

Entry point: ``artha`` console script or ``python -m scripts.cli``.
"""

from scripts.cli.main import main

__all__ = ["main"]
