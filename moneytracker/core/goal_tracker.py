# moneytracker/core/goal_tracker.py
import datetime
import math
from typing import Any, Dict, Iterable, Optional, Union

from moneytracker.core.errors import ValidationError
from moneytracker.core.models import INCOME

DateLike = Union[str, datetime.date, datetime.datetime, None]


def _to_datetime(value: DateLike) -> Optional[datetime.datetime]:
    """Converte data/datetime/texto ISO em datetime ingênuo (com fuso, convertido para UTC)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        parsed = datetime.datetime(value.year, value.month, value.day)
    else:
        parsed = datetime.datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.timezone.utc)
    return parsed.replace(tzinfo=None)


def _as_amount(value: Any) -> float:
    """Valor numérico da transação; ausente, inválido ou NaN conta como 0."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(amount) else amount


def compute_progress(goal: Optional[Dict[str, Any]], current_amount: Optional[float] = None) -> Optional[float]:
    """Percentual atingido da meta, sem limitar a 100 (acima de 100 indica que passou da meta).

    Sem meta, ou com alvo zerado, não há progresso a calcular e retorna None.
    """
    if not goal:
        return None
    target = float(goal.get("target_amount") or 0)
    if target <= 0:
        return None
    if current_amount is None:
        current_amount = goal.get("current_amount") or 0
    return float(current_amount) / target * 100


def clamp_progress(percentage: Optional[float]) -> float:
    """Valor usado na barra de progresso, sempre entre 0 e 100."""
    if percentage is None:
        return 0.0
    return max(0.0, min(float(percentage), 100.0))


def compute_deadline_status(target_date: DateLike, today: DateLike = None) -> Dict[str, Any]:
    """Dias restantes até a data alvo e se ela já passou.

    `today` é normalizado para meia-noite. Fração de dia restante conta como
    um dia inteiro.
    """
    target = _to_datetime(target_date)
    if target is None:
        return {"days_remaining": None, "is_overdue": False}

    now = _to_datetime(today) or datetime.datetime.now()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    days_remaining = math.ceil((target - midnight) / datetime.timedelta(days=1))
    return {"days_remaining": days_remaining, "is_overdue": days_remaining < 0}


def compute_required_daily_pace(
    target_amount: float, current_amount: float, days_remaining: Optional[int]
) -> Optional[int]:
    """Quanto é preciso guardar por dia para chegar na meta a tempo."""
    if days_remaining is None or days_remaining <= 0:
        return None
    return math.ceil((float(target_amount) - float(current_amount or 0)) / days_remaining)


def apply_income(goal: Dict[str, Any], amount: float) -> Dict[str, Any]:
    """Retorna uma cópia da meta com o ganho somado ao valor atual.

    Deve ser aplicado exatamente uma vez por ganho registrado.
    """
    if amount is None or float(amount) <= 0:
        raise ValidationError("O valor do ganho deve ser maior que zero.")
    updated = dict(goal)
    updated["current_amount"] = float(goal.get("current_amount") or 0) + float(amount)
    return updated


def reset_current_amount(goal: Dict[str, Any]) -> Dict[str, Any]:
    """Retorna uma cópia da meta com o valor atual zerado."""
    updated = dict(goal)
    updated["current_amount"] = 0.0
    return updated


def compute_expected_current_amount(
    transactions: Iterable[Dict[str, Any]], reset_at: DateLike = None
) -> float:
    """Recalcula o valor guardado a partir do histórico de ganhos.

    Só contam os ganhos criados depois do último reset (todos, se nunca houve reset).
    """
    cutoff = _to_datetime(reset_at)
    total = 0.0
    for t in transactions:
        if t.get("type") != INCOME:
            continue
        if cutoff is not None:
            try:
                created_at = _to_datetime(t.get("created_at"))
            except (TypeError, ValueError):
                continue
            if created_at is None or created_at <= cutoff:
                continue
        total += _as_amount(t.get("amount"))
    return total


def compute_drift(goal: Dict[str, Any], transactions: Iterable[Dict[str, Any]]) -> float:
    """Diferença entre o valor recalculado e o valor mantido na meta."""
    expected = compute_expected_current_amount(transactions, goal.get("reset_at"))
    return expected - float(goal.get("current_amount") or 0)


def goal_overview(goal: Optional[Dict[str, Any]], today: DateLike = None) -> Optional[Dict[str, Any]]:
    """Reúne os números da meta exibidos no painel."""
    if not goal:
        return None

    target_amount = float(goal.get("target_amount") or 0)
    current_amount = float(goal.get("current_amount") or 0)
    progress = compute_progress(goal, current_amount)
    deadline = compute_deadline_status(goal.get("target_date"), today)

    daily_pace = None
    if not deadline["is_overdue"]:
        daily_pace = compute_required_daily_pace(target_amount, current_amount, deadline["days_remaining"])

    return {
        "current_amount": current_amount,
        "target_amount": target_amount,
        "target_date": goal.get("target_date"),
        "progress": progress,
        "progress_bar": clamp_progress(progress),
        "days_remaining": deadline["days_remaining"],
        "is_overdue": deadline["is_overdue"],
        "daily_pace": daily_pace,
        "achieved": progress is not None and progress >= 100,
    }
