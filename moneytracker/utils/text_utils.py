# moneytracker/utils/text_utils.py
import re
from typing import Optional, Union


def parse_amount(text: Union[str, float, int, None]) -> Optional[float]:
    """Converte o valor digitado pelo usuário em float.

    Ex: "50" -> 50.0, "50,5" -> 50.5, "R$ 1.234,56" -> 1234.56, "1.500" -> 1500.0,
    "12.5" -> 12.5
    Retorna None se não houver número.
    """
    if text is None:
        return None
    if isinstance(text, (int, float)):
        return float(text)

    cleaned = re.sub(r'[^0-9,.\-]', '', text)
    if not cleaned or not re.search(r'\d', cleaned):
        return None

    if ',' in cleaned:
        # Formato brasileiro: ponto separa milhar, vírgula separa decimais
        cleaned = cleaned.replace('.', '').replace(',', '.')
    elif re.fullmatch(r'-?\d{1,3}(\.\d{3})+', cleaned):
        # "1.500" é mil e quinhentos
        cleaned = cleaned.replace('.', '')

    try:
        return float(cleaned)
    except ValueError:
        return None


def format_currency(value: Union[float, int, None]) -> str:
    """Ex: 1234.5 -> "R$1.234,50", -80 -> "-R$80,00"."""
    value = float(value or 0)
    text = f"{abs(value):,.2f}".replace(',', '_').replace('.', ',').replace('_', '.')
    return f"-R${text}" if value < 0 else f"R${text}"


def format_month_label(month_key: str) -> str:
    """Ex: "2024-03" -> "03/2024"."""
    year, _, month = month_key.partition('-')
    return f"{month}/{year}" if month else month_key


def progress_bar(percentage: Union[float, None], width: int = 20) -> str:
    """Barra de texto para o progresso da meta, limitada a 0..100%."""
    percentage = max(0.0, min(float(percentage or 0), 100.0))
    filled = int(round(percentage / 100 * width))
    return "▓" * filled + "░" * (width - filled)


def short_id(transaction_id: Union[str, None], length: int = 8) -> str:
    """Os primeiros caracteres do id, usados no /excluir."""
    return str(transaction_id or "")[:length]
