from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /start é emitido."""
    await update.message.reply_text(
        "Olá! Sou o MoneyTracker, seu controle de finanças. Envie seus **gastos** (ex: 'gastei 50 no mercado') "
        "ou seus **ganhos** (ex: 'recebi 3000 de salário') e eu acompanho sua meta de economia.\n\n"
        "Comandos úteis:\n"
        "- `/resumo` para ver a meta, o mês atual e as últimas transações.\n"
        "- `/analise [mes|anterior|tudo]` para ver gastos por categoria e a tendência mensal.\n"
        "- `/receita [valor] [categoria]` e `/despesa [valor] [categoria]` para registrar.\n"
        "- `/meta [valor] [AAAA-MM-DD]` para definir sua meta.\n"
        "- `/help` para mais informações."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /help é emitido."""
    await update.message.reply_text(
        "**Como usar:**\n"
        "Para registrar, escreva normalmente:\n"
        "- `gastei 30 no almoço`\n"
        "- `uber 15 ontem`\n"
        "- `recebi 1000 de freelance`\n\n"
        "**Comandos de Registro:**\n"
        "- `/receita [valor] [categoria] [AAAA-MM-DD opcional] [memo opcional]`: Registra um ganho (soma na meta).\n"
        "- `/despesa [valor] [categoria] [AAAA-MM-DD opcional] [memo opcional]`: Registra um gasto.\n"
        "- `/excluir [id]`: Exclui uma transação (use o id curto mostrado no `/resumo`; pede confirmação).\n"
        "- `/categorias`: Lista as categorias sugeridas.\n\n"
        "**Comandos de Relatório:**\n"
        "- `/resumo`: Meta de economia, ganhos e gastos do mês e últimas transações.\n"
        "- `/analise [mes|anterior|tudo]`: Totais, gastos por categoria e ganhos vs. gastos dos últimos 6 meses.\n\n"
        "**Comandos da Meta:**\n"
        "- `/meta [valor] [AAAA-MM-DD opcional]`: Define o valor e a data alvo (use `-` para remover a data).\n"
        "- `/resetar`: Zera o valor guardado (pede confirmação).\n"
        "- `/conciliar`: Recalcula o valor guardado a partir dos ganhos registrados e corrige diferenças."
    )


async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Encerra qualquer conversa em andamento (confirmação de transação, exclusão ou reset)."""
    context.user_data.pop("pending_transaction", None)
    context.user_data.pop("pending_deletion", None)
    await update.message.reply_text("Operação cancelada. 👍", reply_markup=ReplyKeyboardRemove())
    return ConversationHandler.END
