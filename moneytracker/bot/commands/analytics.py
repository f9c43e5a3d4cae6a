from typing import Any, Dict, Optional

from telegram import Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from moneytracker.core import charts, summary
from moneytracker.core.errors import ValidationError
from moneytracker.core.models import ALL_TIME, LAST_MONTH, THIS_MONTH
from moneytracker.utils.text_utils import format_currency

PERIOD_TITLES = {
    THIS_MONTH: "Este mês",
    LAST_MONTH: "Mês passado",
    ALL_TIME: "Todo o período",
}


def format_analytics(analytics: Dict[str, Any]) -> str:
    """Texto da /analise: totais do período e gastos por categoria."""
    lines = [
        f"📊 *Análise: {PERIOD_TITLES[analytics['period']]}*",
        f"Total de ganhos: {format_currency(analytics['total_income'])}",
        f"Total de gastos: {format_currency(analytics['total_expense'])}",
    ]
    if "period" in analytics.get("errors", []):
        lines.append("\nNão foi possível carregar as transações do período agora.")
        return "\n".join(lines)

    lines.append("\n*Gastos por categoria:*")
    if not analytics["category_totals"]:
        lines.append("Nenhum gasto no período.")
    for item in analytics["category_totals"]:
        lines.append(f"- {escape_markdown(str(item['name']))}: {format_currency(item['value'])}")
    return "\n".join(lines)


async def send_analytics(update: Update, context: ContextTypes.DEFAULT_TYPE, period: Optional[str] = None) -> None:
    """Calcula e envia a análise do período, com os gráficos."""
    supabase_client = context.bot_data["supabase_client"]
    try:
        period = summary.resolve_period(period)
    except ValidationError as e:
        await update.message.reply_text(str(e))
        return

    await update.message.reply_text("Gerando sua análise, por favor aguarde...")
    analytics = await summary.build_analytics(supabase_client, period)
    await update.message.reply_text(format_analytics(analytics), parse_mode="Markdown")

    chart_buffer = charts.generate_category_chart(analytics["category_totals"])
    if chart_buffer:
        chart_buffer.name = "gastos_por_categoria.png"
        await update.message.reply_photo(photo=chart_buffer, caption="Gastos por categoria")

    if "history" in analytics["errors"]:
        await update.message.reply_text("Não foi possível carregar o histórico mensal agora.")
        return
    chart_buffer = charts.generate_monthly_chart(analytics["monthly_totals"])
    if chart_buffer:
        chart_buffer.name = "ganhos_vs_gastos.png"
        await update.message.reply_photo(photo=chart_buffer, caption="Ganhos vs. gastos dos últimos meses")
    else:
        await update.message.reply_text(
            "Ainda não tenho dados suficientes para gerar a tendência mensal. Registre alguns ganhos e gastos primeiro!"
        )


async def analytics_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/analise [mes|anterior|tudo]"""
    period = context.args[0] if context.args else None
    await send_analytics(update, context, period)
