"""
Erreurs métier du ledger.

Les services lèvent ces erreurs ; la couche API les transforme en réponses
{"success": false, "error": ...}.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base de toutes les erreurs du moteur de stock."""


class ValidationError(LedgerError):
    """Entrée invalide, rejetée avant tout accès à la base."""


class NotFoundError(LedgerError):
    pass


class StorageError(LedgerError):
    """Échec de la base (connexion, contrainte...)."""


class InsufficientStockError(LedgerError):
    def __init__(self, material: str, current_stock: float, requested: float, unit: str) -> None:
        self.material = material
        self.current_stock = current_stock
        self.requested = requested
        self.unit = unit
        super().__init__(
            f'Insufficient stock of "{material}": '
            f"available {current_stock:.2f} {unit}, requested {requested:.2f} {unit}"
        )
