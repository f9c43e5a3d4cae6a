# moneytracker/bot/bot_setup.py
import sys

from telegram.ext import Application, CommandHandler, ConversationHandler, MessageHandler, filters

from moneytracker.bot.commands import (
    analytics_command, cancel_command, categories_command, delete_command, expense_command,
    goal_command, help_command, income_command, reconcile_command, reset_command, start_command,
    summary_command,
)
from moneytracker.bot.handlers import (
    ASKING_CONFIRMATION, ASKING_DELETE_CONFIRMATION, ASKING_RESET_CONFIRMATION,
    handle_confirmation, handle_delete_confirmation, handle_initial_message, handle_reset_confirmation,
)
from moneytracker.core import db
from moneytracker.core.summary import DashboardCache


async def subscribe_dashboard_cache(application: Application) -> None:
    """Liga o cache do painel ao canal de tempo real da tabela 'transactions'.

    Se a assinatura falhar, o cache continua com `live = False` e o /resumo
    é recalculado a cada chamada.
    """
    cache: DashboardCache = application.bot_data["dashboard_cache"]
    try:
        async_client = await db.get_async_supabase_client()
        channel = await db.subscribe_to_transaction_changes(async_client, cache.invalidate)
    except Exception as e:
        print(f"ERROR: Não foi possível assinar as mudanças em tempo real: {e}", file=sys.stderr)
        return
    application.bot_data["realtime_channel"] = channel
    cache.live = True


def setup_bot(config: dict) -> Application:
    """
    Configura a aplicação do bot do Telegram (Handlers, Comandos, Conversas).
    Retorna o objeto Application configurado, pronto para webhook ou polling.
    """
    application = (
        Application.builder()
        .token(config["TELEGRAM_BOT_TOKEN"])
        .post_init(subscribe_dashboard_cache)
        .build()
    )

    # Handlers e comandos acessam o cliente e o cache pelo bot_data
    application.bot_data["supabase_client"] = config["SUPABASE_CLIENT"]
    application.bot_data["dashboard_cache"] = DashboardCache(config["SUPABASE_CLIENT"], config["GOAL_KEY"])

    # --- Comandos ---
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("resumo", summary_command))
    application.add_handler(CommandHandler("analise", analytics_command))
    application.add_handler(CommandHandler("receita", income_command))
    application.add_handler(CommandHandler("despesa", expense_command))
    application.add_handler(CommandHandler("categorias", categories_command))
    application.add_handler(CommandHandler("meta", goal_command))
    application.add_handler(CommandHandler("conciliar", reconcile_command))

    # --- Conversas ---
    # Mensagens livres: a IA interpreta e a transação espera o "Sim"
    transaction_conversation = ConversationHandler(
        entry_points=[MessageHandler(filters.TEXT & ~filters.COMMAND, handle_initial_message)],
        states={
            ASKING_CONFIRMATION: [
                MessageHandler(filters.TEXT & ~filters.COMMAND, handle_confirmation)
            ],
        },
        fallbacks=[CommandHandler("cancel", cancel_command)],
    )
    reset_conversation = ConversationHandler(
        entry_points=[CommandHandler("resetar", reset_command)],
        states={
            ASKING_RESET_CONFIRMATION: [
                MessageHandler(filters.TEXT & ~filters.COMMAND, handle_reset_confirmation)
            ],
        },
        fallbacks=[CommandHandler("cancel", cancel_command)],
    )
    delete_conversation = ConversationHandler(
        entry_points=[CommandHandler("excluir", delete_command)],
        states={
            ASKING_DELETE_CONFIRMATION: [
                MessageHandler(filters.TEXT & ~filters.COMMAND, handle_delete_confirmation)
            ],
        },
        fallbacks=[CommandHandler("cancel", cancel_command)],
    )
    # /resetar e /excluir precisam vir antes da conversa de texto livre
    application.add_handler(reset_conversation)
    application.add_handler(delete_conversation)
    application.add_handler(transaction_conversation)

    print("DEBUG: Bot Telegram configurado.")
    return application
