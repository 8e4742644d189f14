"""Exceções do gerador de cobranças recorrentes."""


class BillingError(Exception):
    """Base para todos os erros de cobrança."""


class ValidationError(BillingError):
    """Empresa elegível, mas com dados inconsistentes (ex.: valor negativo)."""


class DuplicateConflict(BillingError):
    """Insert colidiu com um pagamento já existente (corrida entre execuções)."""


class StorageError(BillingError):
    """Falha transitória de leitura/escrita no banco."""
