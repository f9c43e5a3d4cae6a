# moneytracker/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Configurações do Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
WEBHOOK_PATH = os.getenv("WEBHOOK_PATH", "/webhook")

# Configurações do Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Configurações do Gemini API
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

# Meta de economia (uma linha por chave na tabela 'goals')
GOAL_KEY = os.getenv("GOAL_KEY", "default")
DEFAULT_GOAL_TARGET = float(os.getenv("DEFAULT_GOAL_TARGET", "1000000"))

# Quantidade de transações recentes exibidas no /resumo
RECENT_TRANSACTIONS_LIMIT = int(os.getenv("RECENT_TRANSACTIONS_LIMIT", "20"))
