# moneytracker/core/models.py

# No código, as linhas vindas do Supabase circulam como dicionários Python.
# Este módulo documenta a forma esperada desses dicionários e guarda as
# constantes do domínio.
#
# Transação (tabela 'transactions'):
#   {"id": str, "type": "income" | "expense", "amount": float, "category": str,
#    "memo": str | None, "date": "AAAA-MM-DD", "created_at": str}
#
# Meta (tabela 'goals', uma linha por 'key'):
#   {"id": str, "key": str, "target_amount": float, "current_amount": float,
#    "target_date": "AAAA-MM-DD" | None, "reset_at": str | None}
#
# Derivados (nunca persistidos):
#   total por categoria -> {"name": str, "value": float}
#   total mensal        -> {"month": "AAAA-MM", "income": float, "expense": float}

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_KINDS = (INCOME, EXPENSE)

# Períodos aceitos pela análise
THIS_MONTH = "this_month"
LAST_MONTH = "last_month"
ALL_TIME = "all"
PERIODS = (THIS_MONTH, LAST_MONTH, ALL_TIME)

# Apelidos usados nos comandos do bot
PERIOD_ALIASES = {
    "mes": THIS_MONTH,
    "mês": THIS_MONTH,
    "este_mes": THIS_MONTH,
    "anterior": LAST_MONTH,
    "mes_passado": LAST_MONTH,
    "tudo": ALL_TIME,
    "total": ALL_TIME,
}

# Janela do gráfico de tendência mensal
MONTHLY_WINDOW = 6

# Categorias sugeridas na entrada de transações
INCOME_CATEGORIES = ["Salário", "Renda Extra", "Mesada", "Outros"]
EXPENSE_CATEGORIES = ["Alimentação", "Transporte", "Lazer", "Educação", "Outros"]

# Rótulo dos gastos sem categoria
UNCATEGORIZED = "Outros"
