from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes

from moneytracker.bot.handlers.states import ASKING_RESET_CONFIRMATION
from moneytracker.core import db
from moneytracker.core.errors import NotFoundError, TransientFetchError, ValidationError
from moneytracker.utils.text_utils import format_currency, parse_amount


async def goal_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/meta [valor] [AAAA-MM-DD|-]: define o valor alvo e, opcionalmente, a data alvo."""
    supabase_client = context.bot_data["supabase_client"]
    if not context.args:
        await update.message.reply_text(
            "Uso: `/meta [valor] [AAAA-MM-DD opcional]`\n"
            "Ex: `/meta 5000 2025-12-31`. Use `-` no lugar da data para removê-la."
        )
        return

    fields = {"target_amount": parse_amount(context.args[0])}
    if len(context.args) > 1:
        fields["target_date"] = None if context.args[1] == "-" else context.args[1]

    try:
        goal = db.get_or_create_goal(supabase_client)
        goal = db.update_goal(supabase_client, goal["id"], fields)
    except (ValidationError, NotFoundError) as e:
        await update.message.reply_text(f"⚠️ {e}")
        return
    except TransientFetchError as e:
        await update.message.reply_text(f"❌ {e}")
        return

    context.bot_data["dashboard_cache"].invalidate()
    message = f"🎯 Meta definida: {format_currency(goal['target_amount'])}"
    if goal.get("target_date"):
        message += f" até {goal['target_date']}"
    await update.message.reply_text(message + ". Veja o progresso com /resumo.")


async def reset_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Pede confirmação antes de zerar o valor guardado da meta."""
    keyboard = [["Sim ✅", "Não ❌"]]
    reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text(
        "⚠️ Isso vai zerar o valor guardado da sua meta. As transações continuam registradas.\n"
        "Deseja continuar?",
        reply_markup=reply_markup,
    )
    return ASKING_RESET_CONFIRMATION


async def reconcile_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Recalcula o valor guardado a partir dos ganhos registrados desde o último reset."""
    supabase_client = context.bot_data["supabase_client"]
    try:
        result = db.reconcile_goal(supabase_client)
    except (ValidationError, TransientFetchError) as e:
        await update.message.reply_text(f"❌ {e}")
        return

    if result["drift"] == 0:
        await update.message.reply_text(
            f"✅ Tudo certo! O valor guardado ({format_currency(result['recorded'])}) bate com os ganhos registrados."
        )
        return

    context.bot_data["dashboard_cache"].invalidate()
    if result["corrected"]:
        await update.message.reply_text(
            f"🔧 Valor guardado corrigido de {format_currency(result['recorded'])} "
            f"para {format_currency(result['expected'])} (diferença de {format_currency(result['drift'])})."
        )
    else:
        await update.message.reply_text(
            f"⚠️ Encontrei uma diferença de {format_currency(result['drift'])}, mas a meta mudou durante a "
            "verificação. Tente /conciliar de novo."
        )

