from typing import Any, Dict

from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from moneytracker.core.models import INCOME
from moneytracker.utils.text_utils import format_currency

CATEGORY_EMOJIS = {
    "salário": "💰",
    "renda extra": "💼",
    "mesada": "🎁",
    "alimentação": "🍔",
    "transporte": "🚌",
    "lazer": "🎮",
    "educação": "📚",
    "outros": "📦",
}


async def send_confirmation_message(
    update: Update, context: ContextTypes.DEFAULT_TYPE, transaction_info: Dict[str, Any]
) -> None:
    """Envia a mensagem de confirmação da transação ao usuário com emojis e formatação."""
    category = str(transaction_info.get("category") or "Outros")
    emoji = CATEGORY_EMOJIS.get(category.lower(), "📝")
    label = "ganho" if transaction_info.get("type") == INCOME else "gasto"

    message_text = (
        f"Confirma o *{label}*? {emoji}\n"
        f"💰 Valor: *{format_currency(transaction_info.get('amount'))}*\n"
        f"🏷️ Categoria: *{escape_markdown(category)}*\n"
        f"📅 Data: *{transaction_info.get('date')}*"
    )
    if transaction_info.get("memo"):
        message_text += f"\n📝 Memo: {escape_markdown(str(transaction_info['memo']))}"

    keyboard = [["Sim ✅", "Não ❌"]]
    reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text(
        f"{message_text}\n\n*Tudo certo?* 🤔", reply_markup=reply_markup, parse_mode="Markdown"
    )
