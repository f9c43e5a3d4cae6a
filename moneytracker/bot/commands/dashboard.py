from typing import Any, Dict

from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from moneytracker.core.models import INCOME
from moneytracker.utils.text_utils import format_currency, progress_bar, short_id


def format_goal(goal: Dict[str, Any]) -> str:
    """Bloco da meta de economia no /resumo."""
    lines = [
        "🎯 *Meta de Economia*",
        f"Guardado: *{format_currency(goal['current_amount'])}*",
        f"Meta: {format_currency(goal['target_amount'])}",
    ]
    if goal["target_date"]:
        lines.append(f"Data alvo: {goal['target_date']}")

    days = goal["days_remaining"]
    if days is not None:
        if goal["is_overdue"]:
            lines.append(f"⚠️ Prazo encerrado há {abs(days)} dia(s)")
        else:
            lines.append(f"Faltam {days} dia(s)")
        if goal["daily_pace"] is not None:
            lines.append(f"É preciso guardar {format_currency(goal['daily_pace'])} por dia")

    progress = goal["progress"] or 0.0
    lines.append(f"{progress_bar(goal['progress_bar'])} {progress:.1f}%")
    if goal["achieved"]:
        lines.append("🎉 Parabéns, meta atingida!")
    return "\n".join(lines)


def format_dashboard(dashboard: Dict[str, Any]) -> str:
    """Monta o texto do /resumo a partir do painel calculado."""
    errors = dashboard.get("errors", [])
    sections = []

    if dashboard["goal"]:
        sections.append(format_goal(dashboard["goal"]))
    else:
        sections.append("🎯 *Meta de Economia*\nNão foi possível carregar a meta agora.")

    month = dashboard["month"]
    if "month" in errors:
        sections.append("📅 *Este mês*\nNão foi possível carregar os valores do mês agora.")
    else:
        sections.append(
            "📅 *Este mês*\n"
            f"Ganhos: {format_currency(month['income'])}\n"
            f"Gastos: {format_currency(month['expense'])}\n"
            f"Saldo: *{format_currency(month['balance'])}*"
        )

    recent = dashboard["recent_transactions"]
    if "recent" in errors:
        sections.append("📋 *Últimas transações*\nNão foi possível carregar as transações agora.")
    elif not recent:
        sections.append("📋 *Últimas transações*\nNenhuma transação ainda. Use /receita ou /despesa para começar.")
    else:
        lines = ["📋 *Últimas transações*"]
        for t in recent:
            sign = "+" if t.get("type") == INCOME else "-"
            memo = f" ({escape_markdown(t['memo'])})" if t.get("memo") else ""
            lines.append(
                f"`{short_id(t.get('id'))}` {t.get('date')} {escape_markdown(str(t.get('category')))}{memo} "
                f"{sign}{format_currency(t.get('amount'))}"
            )
        sections.append("\n".join(lines))

    return "\n\n".join(sections)


async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia o painel principal: meta, resumo do mês e últimas transações."""
    cache = context.bot_data["dashboard_cache"]
    dashboard = await cache.get()
    await update.message.reply_text(format_dashboard(dashboard), parse_mode="Markdown")
