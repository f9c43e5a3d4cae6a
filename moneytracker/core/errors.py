# moneytracker/core/errors.py


class MoneyTrackerError(Exception):
    """Erro base do MoneyTracker."""


class ValidationError(MoneyTrackerError):
    """Dado inválido rejeitado antes de chegar ao banco (valor, categoria, data...).

    A mensagem é pensada para ser mostrada diretamente ao usuário.
    """


class NotFoundError(MoneyTrackerError):
    """Transação ou meta inexistente quando deveria existir."""


class TransientFetchError(MoneyTrackerError):
    """Supabase indisponível ou recusou a operação. Recuperação: atualizar manualmente."""
