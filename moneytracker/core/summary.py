# moneytracker/core/summary.py
import asyncio
import datetime
import sys
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd
from supabase import Client

from moneytracker.config import GOAL_KEY, RECENT_TRANSACTIONS_LIMIT
from moneytracker.core import aggregator, db, goal_tracker
from moneytracker.core.errors import TransientFetchError, ValidationError
from moneytracker.core.models import ALL_TIME, LAST_MONTH, PERIOD_ALIASES, PERIODS, THIS_MONTH


def _today(today: Union[datetime.date, datetime.datetime, None]) -> datetime.date:
    if today is None:
        return datetime.date.today()
    if isinstance(today, datetime.datetime):
        return today.date()
    return today


def resolve_period(value: Optional[str]) -> str:
    """Aceita o nome do período ou um apelido do bot ('mes', 'anterior', 'tudo')."""
    if not value:
        return THIS_MONTH
    normalized = value.strip().lower()
    period = PERIOD_ALIASES.get(normalized, normalized)
    if period not in PERIODS:
        raise ValidationError(f"Período inválido: '{value}'. Use mes, anterior ou tudo.")
    return period


def month_bounds(today: Union[datetime.date, datetime.datetime, None] = None) -> Tuple[datetime.date, datetime.date]:
    """Primeiro e último dia do mês corrente."""
    first_day = _today(today).replace(day=1)
    next_month = (first_day + datetime.timedelta(days=32)).replace(day=1)
    return first_day, next_month - datetime.timedelta(days=1)


def fetch_window(period: str, today: Union[datetime.date, datetime.datetime, None] = None) -> Dict[str, Optional[datetime.date]]:
    """Intervalo de datas (inclusivo) que filtra a busca de um período.

    'this_month' não tem fim, 'all' não tem limites.
    """
    first_day, _ = month_bounds(today)
    if period == THIS_MONTH:
        return {"date_from": first_day, "date_to": None}
    if period == LAST_MONTH:
        last_month_end = first_day - datetime.timedelta(days=1)
        return {"date_from": last_month_end.replace(day=1), "date_to": last_month_end}
    if period == ALL_TIME:
        return {"date_from": None, "date_to": None}
    raise ValidationError(f"Período inválido: '{period}'.")


def monthly_summary(
    transactions: Iterable[Dict[str, Any]],
    month_start: Union[str, datetime.date],
    month_end: Union[str, datetime.date],
) -> Tuple[float, float]:
    """(ganhos, gastos) das transações entre as duas datas, inclusive."""
    transactions = list(transactions or [])
    if not transactions:
        return 0.0, 0.0

    dates = pd.to_datetime(pd.Series([t.get("date") for t in transactions]), errors="coerce", format="ISO8601")
    in_range = (dates >= pd.Timestamp(month_start)) & (dates <= pd.Timestamp(month_end))
    selected = [t for t, keep in zip(transactions, in_range) if keep]
    return aggregator.compute_totals(selected)


async def _section(name: str, errors: List[str], default: Any, func, *args, **kwargs) -> Any:
    """Busca uma seção do painel em outra thread; em falha, registra e devolve o placeholder."""
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except TransientFetchError as e:
        print(f"ERROR: Seção '{name}' indisponível: {e}", file=sys.stderr)
        errors.append(name)
        return default


async def build_dashboard(
    supabase_client: Client,
    today: Union[datetime.date, datetime.datetime, None] = None,
    recent_limit: int = RECENT_TRANSACTIONS_LIMIT,
    goal_key: str = GOAL_KEY,
) -> Dict[str, Any]:
    """Monta o painel principal: meta, resumo do mês e transações recentes.

    As três buscas rodam em paralelo. Uma seção que falhar aparece vazia sem
    derrubar as outras; o nome dela fica em 'errors'.
    """
    first_day, last_day = month_bounds(today)
    errors: List[str] = []

    goal, month_transactions, recent = await asyncio.gather(
        _section("goal", errors, None, db.get_or_create_goal, supabase_client, goal_key),
        _section("month", errors, None, db.list_transactions, supabase_client,
                 date_from=first_day, date_to=last_day, ordered=False),
        _section("recent", errors, [], db.list_transactions, supabase_client, limit=recent_limit),
    )

    income, expense = (0.0, 0.0)
    if month_transactions is not None:
        income, expense = monthly_summary(month_transactions, first_day, last_day)

    return {
        "goal": goal_tracker.goal_overview(goal, today),
        "month": {
            "start": first_day,
            "end": last_day,
            "income": income,
            "expense": expense,
            "balance": income - expense,
        },
        "recent_transactions": recent,
        "errors": errors,
    }


async def build_analytics(
    supabase_client: Client,
    period: str = THIS_MONTH,
    today: Union[datetime.date, datetime.datetime, None] = None,
) -> Dict[str, Any]:
    """Totais e gastos por categoria do período, mais a tendência dos últimos meses.

    A tendência mensal usa todo o histórico, não só o período escolhido.
    """
    window = fetch_window(period, today)
    errors: List[str] = []

    window_transactions, history = await asyncio.gather(
        _section("period", errors, [], db.list_transactions, supabase_client,
                 date_from=window["date_from"], date_to=window["date_to"], ordered=False),
        _section("history", errors, [], db.list_transactions, supabase_client, ordered=False),
    )

    total_income, total_expense = aggregator.compute_totals(window_transactions)
    return {
        "period": period,
        "window": window,
        "total_income": total_income,
        "total_expense": total_expense,
        "category_totals": aggregator.compute_category_totals(window_transactions),
        "monthly_totals": aggregator.compute_monthly_totals(history),
        "errors": errors,
    }


class DashboardCache:
    """Guarda o último painel calculado.

    Qualquer aviso de mudança (tempo real ou escrita local) só marca o painel
    como desatualizado; o próximo `get` recalcula. Sem assinatura de tempo
    real ativa, todo `get` recalcula.
    """

    def __init__(self, supabase_client: Client, goal_key: str = GOAL_KEY):
        self.supabase_client = supabase_client
        self.goal_key = goal_key
        self.live = False
        self._snapshot: Optional[Dict[str, Any]] = None
        self._stale = True
        self._built_on: Optional[datetime.date] = None

    def invalidate(self, payload: Any = None) -> None:
        self._stale = True

    @property
    def stale(self) -> bool:
        # Prazo e mês dependem do dia atual
        return (
            self._stale
            or not self.live
            or self._snapshot is None
            or self._built_on != datetime.date.today()
        )

    async def get(self, today: Union[datetime.date, datetime.datetime, None] = None) -> Dict[str, Any]:
        if self.stale or today is not None:
            self._stale = False
            self._built_on = _today(today)
            snapshot = await build_dashboard(self.supabase_client, today=today, goal_key=self.goal_key)
            # Seções com erro não ficam em cache
            if snapshot["errors"]:
                self._stale = True
            self._snapshot = snapshot
        return self._snapshot
