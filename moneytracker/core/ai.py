# moneytracker/core/ai.py
import datetime
import json
import sys
from typing import Any, Dict, Union

# Importações para Gemini
import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from moneytracker.config import GEMINI_MODEL, GOOGLE_API_KEY
from moneytracker.core.models import EXPENSE, EXPENSE_CATEGORIES, INCOME, INCOME_CATEGORIES, PERIODS
from moneytracker.utils.text_utils import parse_amount

genai.configure(api_key=GOOGLE_API_KEY)

safety_settings = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
}

TRANSACTION_INTENT = "transacao"
SUMMARY_INTENT = "mostrar_resumo"
ANALYTICS_INTENT = "mostrar_analise"


def ask_gemini(prompt: str, model: str = GEMINI_MODEL) -> Union[str, None]:
    """Envia um prompt para o modelo Gemini. Retorna None se não houver resposta."""
    try:
        model_instance = genai.GenerativeModel(model_name=model, safety_settings=safety_settings)
        response = model_instance.generate_content(prompt)

        if not response.parts:
            print(f"DEBUG Gemini: Resposta vazia ou bloqueada. Raw: {response}")
            return None

        return response.text.strip()
    except Exception as e:
        print(f"ERROR: Erro ao conectar com Gemini: {e}", file=sys.stderr)
        return None


def _extract_json(response_text: str) -> Union[Dict[str, Any], None]:
    json_start = response_text.find("{")
    json_end = response_text.rfind("}")
    if json_start == -1 or json_end == -1:
        return None

    json_str = response_text[json_start : json_end + 1]
    json_str = "\n".join(line for line in json_str.split("\n") if not line.strip().startswith("//"))
    return json.loads(json_str)


def extract_transaction_info(text: str, today: Union[datetime.date, None] = None) -> Union[Dict[str, Any], None]:
    """
    Interpreta a mensagem do usuário: registrar uma transação (ganho ou gasto),
    mostrar o resumo ou mostrar a análise de um período.
    """
    today = today or datetime.date.today()
    today_str = today.strftime("%Y-%m-%d")
    yesterday_str = (today - datetime.timedelta(days=1)).strftime("%Y-%m-%d")

    prompt = f"""
    Sua única tarefa é extrair informações da mensagem do usuário e retornar APENAS um objeto JSON.
    Não adicione nenhum texto explicativo, comentários ou formatação extra.

    Identifique a intenção:
    - Registrar uma transação (ganho ou gasto)
    - Mostrar o resumo (meta de economia, mês atual, últimas transações)
    - Mostrar a análise (gastos por categoria e tendência mensal)

    Formato JSON:
    - Para "{TRANSACTION_INTENT}": {{"intencao": "{TRANSACTION_INTENT}", "tipo": "{INCOME}" ou "{EXPENSE}", "valor": float, "categoria": "...", "memo": "..." (ou null), "data": "AAAA-MM-DD"}}
    - Para "{SUMMARY_INTENT}": {{"intencao": "{SUMMARY_INTENT}"}}
    - Para "{ANALYTICS_INTENT}": {{"intencao": "{ANALYTICS_INTENT}", "periodo": um de {', '.join(PERIODS)}}}

    Detalhes de extração:
    - A **data** deve estar sempre no formato **AAAA-MM-DD**. Se não for mencionada, use a data de **hoje** ({today_str}).
    - O valor deve ser um número float positivo.
    - Para ganhos, a categoria deve ser uma das seguintes: {', '.join(INCOME_CATEGORIES)}.
    - Para gastos, a categoria deve ser uma das seguintes: {', '.join(EXPENSE_CATEGORIES)}.
    - Se nenhuma categoria se encaixar, use "Outros".

    ---
    Exemplos:
    Usuário: gastei 50 reais no mercado
    Resposta: {{"intencao": "{TRANSACTION_INTENT}", "tipo": "{EXPENSE}", "valor": 50.0, "categoria": "Alimentação", "memo": "Mercado", "data": "{today_str}"}}

    Usuário: recebi meu salário de 3000 ontem
    Resposta: {{"intencao": "{TRANSACTION_INTENT}", "tipo": "{INCOME}", "valor": 3000.0, "categoria": "Salário", "memo": null, "data": "{yesterday_str}"}}

    Usuário: quanto falta para a minha meta?
    Resposta: {{"intencao": "{SUMMARY_INTENT}"}}

    Usuário: gastos por categoria do mês passado
    Resposta: {{"intencao": "{ANALYTICS_INTENT}", "periodo": "last_month"}}

    ---
    Mensagem do Usuário: {text}
    ---
    JSON de Saída:
    """
    response_text = ask_gemini(prompt)
    print(f"DEBUG Gemini response raw: {response_text}")
    if not response_text:
        return None

    try:
        data = _extract_json(response_text)
    except (json.JSONDecodeError, ValueError) as e:
        print(f"ERROR: Erro ao decodificar JSON do Gemini: {e}. Resposta bruta: {response_text}", file=sys.stderr)
        return None
    if not data:
        return None

    if data.get("intencao") == TRANSACTION_INTENT:
        return {
            "intencao": TRANSACTION_INTENT,
            "type": data.get("tipo"),
            "amount": parse_amount(data.get("valor")),
            "category": data.get("categoria") or "Outros",
            "memo": data.get("memo"),
            "date": data.get("data") or today_str,
        }
    return data
