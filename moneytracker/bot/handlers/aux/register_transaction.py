from typing import Any, Dict

from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes

from moneytracker.core import db
from moneytracker.core.errors import TransientFetchError, ValidationError
from moneytracker.core.models import INCOME
from moneytracker.utils.text_utils import format_currency


async def register_transaction(
    update: Update, context: ContextTypes.DEFAULT_TYPE, transaction_info: Dict[str, Any]
) -> bool:
    """Registra um ganho ou gasto no banco e envia a confirmação.

    Ganhos também somam no valor guardado da meta.
    """
    supabase_client = context.bot_data["supabase_client"]
    kind = transaction_info.get("type")

    try:
        transaction = db.record_transaction(
            supabase_client,
            kind,
            transaction_info.get("amount"),
            transaction_info.get("category"),
            transaction_info.get("date"),
            transaction_info.get("memo"),
        )
    except ValidationError as e:
        await update.message.reply_text(f"⚠️ {e}", reply_markup=ReplyKeyboardRemove())
        return False
    except TransientFetchError as e:
        await update.message.reply_text(f"❌ {e} 😟", reply_markup=ReplyKeyboardRemove())
        return False
    finally:
        # Mesmo em falha parcial (ganho gravado, meta não) o painel precisa recalcular
        context.bot_data["dashboard_cache"].invalidate()

    label = "Ganho" if kind == INCOME else "Gasto"
    extra = " e somado à sua meta 🎯" if kind == INCOME else ""
    await update.message.reply_text(
        f"✅ {label} de {format_currency(transaction['amount'])} em '{transaction['category']}' "
        f"registrado{extra}! 🎉",
        reply_markup=ReplyKeyboardRemove(),
    )
    return True
