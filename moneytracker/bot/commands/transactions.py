import datetime
import re
from typing import Any, Dict, List, Optional

from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes, ConversationHandler

from moneytracker.bot.handlers.aux import register_transaction
from moneytracker.bot.handlers.states import ASKING_DELETE_CONFIRMATION
from moneytracker.core import db
from moneytracker.core.errors import NotFoundError, TransientFetchError, ValidationError
from moneytracker.core.models import EXPENSE, EXPENSE_CATEGORIES, INCOME, INCOME_CATEGORIES
from moneytracker.utils.text_utils import format_currency, parse_amount

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_transaction_args(
    kind: str, args: List[str], today: Optional[datetime.date] = None
) -> Optional[Dict[str, Any]]:
    """Interpreta `[valor] [categoria] [AAAA-MM-DD] [memo...]`.

    A categoria pode ter mais de uma palavra quando vem antes da data
    (ex: `/receita 500 Renda Extra 2024-03-01 freela`) ou quando é uma das
    categorias sugeridas. Retorna None se faltar valor ou categoria.
    """
    if len(args) < 2:
        return None

    amount = parse_amount(args[0])
    rest = list(args[1:])
    date_index = next((i for i, token in enumerate(rest) if DATE_PATTERN.match(token)), None)

    if date_index is not None:
        category = " ".join(rest[:date_index])
        date = rest[date_index]
        memo = " ".join(rest[date_index + 1:])
    else:
        known = INCOME_CATEGORIES if kind == INCOME else EXPENSE_CATEGORIES
        size = next(
            (n for n in range(len(rest), 0, -1) if " ".join(rest[:n]) in known),
            1,
        )
        category = " ".join(rest[:size])
        date = (today or datetime.date.today()).isoformat()
        memo = " ".join(rest[size:])

    if not category:
        return None
    return {"type": kind, "amount": amount, "category": category, "date": date, "memo": memo or None}


async def _add_transaction(update: Update, context: ContextTypes.DEFAULT_TYPE, kind: str) -> None:
    command = "receita" if kind == INCOME else "despesa"
    transaction_info = parse_transaction_args(kind, context.args or [])
    if not transaction_info:
        await update.message.reply_text(
            f"Uso: `/{command} [valor] [categoria] [AAAA-MM-DD opcional] [memo opcional]`\n"
            f"Ex: `/{command} 50 {'Salário' if kind == INCOME else 'Alimentação'}`"
        )
        return
    await register_transaction(update, context, transaction_info)


async def income_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Registra um ganho: /receita [valor] [categoria] ..."""
    await _add_transaction(update, context, INCOME)


async def expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Registra um gasto: /despesa [valor] [categoria] ..."""
    await _add_transaction(update, context, EXPENSE)


async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Mostra a transação pelo id curto do /resumo e pede confirmação antes de excluir."""
    supabase_client = context.bot_data["supabase_client"]
    if not context.args:
        await update.message.reply_text("Uso: `/excluir [id]`\nO id aparece no `/resumo`.")
        return ConversationHandler.END

    try:
        transaction = db.find_transaction_by_prefix(supabase_client, context.args[0])
    except (ValidationError, NotFoundError) as e:
        await update.message.reply_text(f"⚠️ {e}")
        return ConversationHandler.END
    except TransientFetchError as e:
        await update.message.reply_text(f"❌ {e}")
        return ConversationHandler.END

    context.user_data["pending_deletion"] = transaction
    label = "ganho" if transaction.get("type") == INCOME else "gasto"
    keyboard = [["Sim ✅", "Não ❌"]]
    reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text(
        f"Excluir o {label} de {format_currency(transaction.get('amount'))} em "
        f"'{transaction.get('category')}' ({transaction.get('date')})? 🗑️",
        reply_markup=reply_markup,
    )
    return ASKING_DELETE_CONFIRMATION


async def categories_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lista as categorias sugeridas para ganhos e gastos."""
    await update.message.reply_text(
        "*Categorias de Ganhos:*\n"
        + "\n".join(f"- {name}" for name in INCOME_CATEGORIES)
        + "\n\n*Categorias de Gastos:*\n"
        + "\n".join(f"- {name}" for name in EXPENSE_CATEGORIES)
        + "\n\nVocê também pode usar qualquer outro nome de categoria.",
        parse_mode="Markdown",
    )
