# moneytracker/main.py
import asyncio
import sys
import traceback
from typing import Optional

from flask import Flask, jsonify, request
from telegram import Update
from telegram.ext import Application

from moneytracker import config
from moneytracker.bot.bot_setup import setup_bot
from moneytracker.core.db import get_supabase_client


def build_application() -> Application:
    """Cria o cliente Supabase e a aplicação do python-telegram-bot."""
    supabase_client = get_supabase_client()
    print("DEBUG: Cliente Supabase inicializado.")

    bot_config = {
        "TELEGRAM_BOT_TOKEN": config.TELEGRAM_BOT_TOKEN,
        "SUPABASE_CLIENT": supabase_client,
        "GOAL_KEY": config.GOAL_KEY,
    }
    print(f"DEBUG: Configurações do bot criadas: {bot_config.keys()}")
    return setup_bot(bot_config)


def create_app(ptb_application: Optional[Application] = None) -> Flask:
    """Aplicação Flask que recebe os updates do Telegram por webhook.

    Uso com Gunicorn: `gunicorn 'moneytracker.main:create_app()'`.
    """
    try:
        if ptb_application is None:
            ptb_application = build_application()
            # Sem loop contínuo não há canal de tempo real: o cache recalcula a cada /resumo
            asyncio.run(ptb_application.initialize())
            print("DEBUG: python-telegram-bot Application inicializada com sucesso!")
    except Exception as e:
        print(f"ERROR: Erro crítico durante a inicialização: {e}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        raise

    flask_app = Flask(__name__)

    @flask_app.route(config.WEBHOOK_PATH, methods=["POST"])
    async def telegram_webhook():
        if not request.is_json:
            print("ERROR: Webhook received non-JSON request.", file=sys.stderr)
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        update_json = request.get_json()
        print(f"DEBUG: Webhook received update: {update_json.keys() if update_json else 'None'}")

        try:
            update = Update.de_json(update_json, ptb_application.bot)
            await ptb_application.process_update(update)
            return jsonify({"status": "ok"}), 200
        except Exception as e:
            print(f"ERROR: Failed to process Telegram update: {e}", file=sys.stderr)
            traceback.print_exc(file=sys.stderr)
            return jsonify({"status": "error", "message": "Failed to process update"}), 500

    @flask_app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"}), 200

    print("DEBUG: Aplicação Flask pronta para receber o webhook.")
    return flask_app


def main() -> None:
    """Execução local, sem webhook: o bot busca os updates por polling."""
    application = build_application()
    print("DEBUG: Iniciando o bot em modo polling.")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
