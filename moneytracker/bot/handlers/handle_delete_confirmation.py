from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from moneytracker.bot.handlers.handle_confirmation import NO_ANSWERS, YES_ANSWERS
from moneytracker.bot.handlers.states import ASKING_DELETE_CONFIRMATION
from moneytracker.core import db
from moneytracker.core.errors import NotFoundError, TransientFetchError
from moneytracker.core.models import INCOME
from moneytracker.utils.text_utils import format_currency


async def handle_delete_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Exclui a transação escolhida no /excluir depois do 'Sim' do usuário."""
    user_response = update.message.text.strip().lower()
    transaction = context.user_data.get("pending_deletion")

    if not transaction:
        await update.message.reply_text(
            "Ops! 😬 Não encontrei uma exclusão pendente. Use /excluir de novo.",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    if user_response in NO_ANSWERS:
        context.user_data.pop("pending_deletion", None)
        await update.message.reply_text("Ok, a transação foi mantida. 👍", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    if user_response not in YES_ANSWERS:
        keyboard = [["Sim ✅", "Não ❌"]]
        reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
        await update.message.reply_text("Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.", reply_markup=reply_markup)
        return ASKING_DELETE_CONFIRMATION

    context.user_data.pop("pending_deletion", None)
    supabase_client = context.bot_data["supabase_client"]
    try:
        db.delete_transaction(supabase_client, transaction["id"])
    except NotFoundError as e:
        await update.message.reply_text(f"⚠️ {e}", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END
    except TransientFetchError as e:
        await update.message.reply_text(f"❌ {e}", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    context.bot_data["dashboard_cache"].invalidate()
    message = (
        f"🗑️ Transação de {format_currency(transaction.get('amount'))} em "
        f"'{transaction.get('category')}' ({transaction.get('date')}) excluída."
    )
    if transaction.get("type") == INCOME:
        message += "\nO valor guardado da meta não muda sozinho; use /conciliar se quiser recalcular."
    await update.message.reply_text(message, reply_markup=ReplyKeyboardRemove())
    return ConversationHandler.END
