from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from moneytracker.bot.handlers.handle_confirmation import NO_ANSWERS, YES_ANSWERS
from moneytracker.bot.handlers.states import ASKING_RESET_CONFIRMATION
from moneytracker.core import db
from moneytracker.core.errors import NotFoundError, TransientFetchError


async def handle_reset_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Zera o valor guardado da meta depois do 'Sim' do usuário."""
    user_response = update.message.text.strip().lower()

    if user_response in NO_ANSWERS:
        await update.message.reply_text("Ok, a meta não foi alterada. 👍", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    if user_response not in YES_ANSWERS:
        keyboard = [["Sim ✅", "Não ❌"]]
        reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
        await update.message.reply_text("Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.", reply_markup=reply_markup)
        return ASKING_RESET_CONFIRMATION

    supabase_client = context.bot_data["supabase_client"]
    try:
        db.reset_goal_current_amount(supabase_client)
    except (NotFoundError, TransientFetchError) as e:
        await update.message.reply_text(f"❌ {e}", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    context.bot_data["dashboard_cache"].invalidate()
    await update.message.reply_text(
        "🔄 Valor guardado da meta zerado. Os próximos ganhos voltam a somar a partir de agora.",
        reply_markup=ReplyKeyboardRemove(),
    )
    return ConversationHandler.END
