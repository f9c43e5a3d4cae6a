# moneytracker/core/aggregator.py
import datetime
from typing import Any, Dict, Iterable, List, Tuple, Union

import pandas as pd

from moneytracker.core.models import EXPENSE, INCOME, MONTHLY_WINDOW, UNCATEGORIZED

TRANSACTION_COLUMNS = ["type", "amount", "category", "date"]


def transactions_to_frame(transactions: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """Monta um DataFrame com as colunas usadas nas agregações.

    Valores ausentes ou não numéricos em 'amount' viram 0, nunca NaN.
    """
    df = pd.DataFrame(list(transactions or []), columns=TRANSACTION_COLUMNS)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0).astype(float)
    return df


def month_key(value: Union[str, datetime.date, datetime.datetime]) -> str:
    """Chave 'AAAA-MM' de uma data. Ex: 2024-03-15 -> '2024-03'."""
    return pd.Timestamp(value).strftime("%Y-%m")


def compute_category_totals(transactions: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Soma os gastos por categoria, do maior para o menor."""
    df = transactions_to_frame(transactions)
    expenses = df[df["type"] == EXPENSE]
    if expenses.empty:
        return []
    # Sem categoria entra em "Outros"
    category = expenses["category"].fillna("").astype(str)
    expenses = expenses.assign(category=category.where(category.str.strip() != "", UNCATEGORIZED))

    # sort=False mantém a ordem de aparição; o sort estável preserva os empates
    by_category = (
        expenses.groupby("category", sort=False)["amount"]
        .sum()
        .sort_values(ascending=False, kind="stable")
    )
    return [{"name": name, "value": float(value)} for name, value in by_category.items()]


def compute_monthly_totals(
    transactions: Iterable[Dict[str, Any]], window: int = MONTHLY_WINDOW
) -> List[Dict[str, Any]]:
    """Ganhos e gastos por mês, em ordem cronológica, apenas os últimos `window` meses."""
    df = transactions_to_frame(transactions)
    dates = pd.to_datetime(df["date"], errors="coerce", format="ISO8601")
    df = df[dates.notna()]
    if df.empty:
        return []

    df = df.assign(
        month=dates[dates.notna()].dt.strftime("%Y-%m"),
        income=df["amount"].where(df["type"] == INCOME, 0.0),
        expense=df["amount"].where(df["type"] == EXPENSE, 0.0),
    )
    # 'AAAA-MM' tem largura fixa, então a ordem de texto é a ordem cronológica
    monthly = df.groupby("month")[["income", "expense"]].sum().sort_index()
    monthly = monthly.tail(window)

    return [
        {"month": month, "income": float(row["income"]), "expense": float(row["expense"])}
        for month, row in monthly.iterrows()
    ]


def compute_totals(transactions: Iterable[Dict[str, Any]]) -> Tuple[float, float]:
    """Retorna (total de ganhos, total de gastos)."""
    df = transactions_to_frame(transactions)
    total_income = df.loc[df["type"] == INCOME, "amount"].sum()
    total_expense = df.loc[df["type"] == EXPENSE, "amount"].sum()
    return float(total_income), float(total_expense)
