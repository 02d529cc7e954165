from __future__ import annotations


class DomainError(Exception):
    """Base para erros de dominio."""


class MissingEntityError(DomainError):
    """Evento referencia entidade fora da janela indexada."""


class PoolNotFoundError(MissingEntityError):
    """Pool solicitada nao existe."""


class TokenNotFoundError(MissingEntityError):
    """Token da pool nao existe."""


class PoolAlreadyInitializedError(DomainError):
    """Pool ja foi inicializada."""


class InvalidTickError(DomainError):
    """Tick fora do intervalo suportado."""


class PositionLiquidityUnderflowError(DomainError):
    """Liquidez da posicao ficaria negativa."""


class UnsupportedEventError(DomainError):
    """Tipo de evento sem handler registrado."""


class IntervalPeriodError(DomainError):
    """Periodo de intervalo invalido."""


class BatchRejectedError(DomainError):
    """Lote descartado por erro fatal em um dos eventos."""

    def __init__(self, *, index: int, kind: str, block_number: int, log_index: int, reason: str):
        super().__init__(
            f"Event {index} ({kind} block={block_number} log_index={log_index}) rejected: {reason}"
        )
        self.index = index
        self.kind = kind
        self.block_number = block_number
        self.log_index = log_index
        self.reason = reason
