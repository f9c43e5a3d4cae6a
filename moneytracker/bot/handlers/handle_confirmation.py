from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from moneytracker.bot.handlers.aux import register_transaction
from moneytracker.bot.handlers.states import ASKING_CONFIRMATION

YES_ANSWERS = ("sim ✅", "sim", "s")
NO_ANSWERS = ("não ❌", "não", "nao", "n")


async def handle_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Lida com a confirmação (Sim/Não) da transação."""
    user_response = update.message.text.strip().lower()
    pending_transaction = context.user_data.get("pending_transaction")

    if not pending_transaction:
        await update.message.reply_text(
            "Ops! 😬 Não encontrei uma transação pendente para confirmar. 🔄",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    if user_response in YES_ANSWERS:
        await register_transaction(update, context, pending_transaction)
        context.user_data.pop("pending_transaction", None)
        return ConversationHandler.END

    if user_response in NO_ANSWERS:
        context.user_data.pop("pending_transaction", None)
        await update.message.reply_text(
            "Entendido! Transação descartada. 🗑️\n"
            "Envie a mensagem de novo com os dados corretos, ou use /receita e /despesa.",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    keyboard = [["Sim ✅", "Não ❌"]]
    reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text(
        "Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.",
        reply_markup=reply_markup,
    )
    return ASKING_CONFIRMATION
