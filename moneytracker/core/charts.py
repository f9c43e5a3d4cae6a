# moneytracker/core/charts.py
import io
from typing import Any, Dict, List, Union

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from moneytracker.utils.text_utils import format_month_label

# Configurações globais para os gráficos (cores, fontes, etc.)
plt.style.use('seaborn-v0_8-darkgrid')
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['legend.fontsize'] = 10

COLORS = {
    'Ganhos': '#10b981',
    'Gastos': '#ef4444',
    'Fatias': ['#3b82f6', '#10b981', '#f59e0b', '#ef4444', '#8b5cf6', '#ec4899', '#06b6d4'],
}


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close(fig)
    return buf


def generate_category_chart(category_totals: List[Dict[str, Any]]) -> Union[io.BytesIO, None]:
    """Gera o gráfico de pizza dos gastos por categoria."""
    if not category_totals:
        return None

    names = [str(item['name']) for item in category_totals]
    values = [item['value'] for item in category_totals]
    total = sum(values)
    if total <= 0:
        return None

    colors = [COLORS['Fatias'][i % len(COLORS['Fatias'])] for i in range(len(values))]

    fig, ax = plt.subplots(figsize=(10, 7))
    wedges, _, _ = ax.pie(
        values,
        colors=colors,
        startangle=90,
        autopct=lambda p: f'{p:.0f}%',
        pctdistance=0.8,
    )
    ax.set_title('Gastos por Categoria', fontsize=16, fontweight='bold')
    ax.axis('equal')

    labels = [f"{name}: R${value:,.2f}" for name, value in zip(names, values)]
    ax.legend(wedges, labels, title="Categoria", loc="center left", bbox_to_anchor=(1, 0, 0.5, 1))
    fig.tight_layout()
    return _to_png(fig)


def generate_monthly_chart(monthly_totals: List[Dict[str, Any]]) -> Union[io.BytesIO, None]:
    """Gera o gráfico de barras de ganhos vs. gastos dos últimos meses."""
    if not monthly_totals:
        return None

    labels = [format_month_label(item['month']) for item in monthly_totals]
    incomes = [item['income'] for item in monthly_totals]
    expenses = [item['expense'] for item in monthly_totals]

    positions = range(len(labels))
    width = 0.4

    fig, ax = plt.subplots(figsize=(12, 7))
    income_bars = ax.bar([p - width / 2 for p in positions], incomes, width, label='Ganhos', color=COLORS['Ganhos'])
    expense_bars = ax.bar([p + width / 2 for p in positions], expenses, width, label='Gastos', color=COLORS['Gastos'])

    ax.set_title('Ganhos vs. Gastos por Mês', fontsize=16, fontweight='bold')
    ax.set_ylabel('Valor (R$)')
    ax.set_xlabel('Mês/Ano')
    ax.set_xticks(list(positions))
    ax.set_xticklabels(labels, rotation=45, ha='right')
    ax.grid(axis='y', linestyle='--', alpha=0.7)

    ax.bar_label(income_bars, fmt='R$%.2f', fontsize=8, padding=3)
    ax.bar_label(expense_bars, fmt='R$%.2f', fontsize=8, padding=3)
    ax.yaxis.set_major_formatter(mticker.FormatStrFormatter('R$%.2f'))
    ax.legend(title='Tipo de Transação')

    fig.tight_layout()
    return _to_png(fig)
