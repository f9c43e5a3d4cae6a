from typing import Any, Dict, Union

from telegram import Update
from telegram.ext import ContextTypes, ConversationHandler

from moneytracker.bot.commands.analytics import send_analytics
from moneytracker.bot.commands.dashboard import summary_command
from moneytracker.bot.handlers.aux import send_confirmation_message
from moneytracker.bot.handlers.states import ASKING_CONFIRMATION
from moneytracker.core.ai import (
    ANALYTICS_INTENT,
    SUMMARY_INTENT,
    TRANSACTION_INTENT,
    extract_transaction_info,
)
from moneytracker.core.models import TRANSACTION_KINDS


async def handle_initial_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> Union[int, None]:
    user_message = update.message.text
    chat_id = update.message.chat_id

    print(f"DEBUG: Mensagem recebida de {chat_id}: {user_message}")

    if not user_message:
        return ConversationHandler.END

    parsed_info: Union[Dict[str, Any], None] = extract_transaction_info(user_message)

    if not parsed_info:
        await update.message.reply_text(
            "😕 Desculpe, não consegui entender sua mensagem. "
            "Tente descrever claramente um gasto ou ganho (ex: 'gastei 30 no almoço'), "
            "ou peça o resumo ou a análise. Se precisar de ajuda, use /help. 💡"
        )
        return ConversationHandler.END

    intencao = parsed_info.get("intencao")

    if intencao == TRANSACTION_INTENT:
        if parsed_info.get("type") not in TRANSACTION_KINDS or not parsed_info.get("amount"):
            await update.message.reply_text(
                "🤔 Não consegui identificar se foi um ganho ou um gasto, ou qual foi o valor. "
                "Tente de novo, ou use /receita e /despesa."
            )
            return ConversationHandler.END

        context.user_data["pending_transaction"] = {
            "type": parsed_info["type"],
            "amount": parsed_info["amount"],
            "category": parsed_info["category"],
            "date": parsed_info["date"],
            "memo": parsed_info.get("memo"),
        }
        await send_confirmation_message(update, context, context.user_data["pending_transaction"])
        return ASKING_CONFIRMATION

    if intencao == SUMMARY_INTENT:
        await summary_command(update, context)
        return ConversationHandler.END

    if intencao == ANALYTICS_INTENT:
        await send_analytics(update, context, parsed_info.get("periodo"))
        return ConversationHandler.END

    await update.message.reply_text("🤔 Não entendi o que você quer fazer. Use /help para ver as opções. 💡")
    return ConversationHandler.END
