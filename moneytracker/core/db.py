# moneytracker/core/db.py
import datetime
import sys
from typing import Any, Callable, Dict, List, Optional, Union

from postgrest.exceptions import APIError
from supabase import AsyncClient, Client, acreate_client, create_client

from moneytracker.config import DEFAULT_GOAL_TARGET, GOAL_KEY, SUPABASE_KEY, SUPABASE_URL
from moneytracker.core import goal_tracker
from moneytracker.core.errors import NotFoundError, TransientFetchError, ValidationError
from moneytracker.core.models import INCOME, TRANSACTION_KINDS

UNIQUE_VIOLATION = "23505"


def get_supabase_client() -> Client:
    """Retorna uma instância do cliente Supabase."""
    return create_client(SUPABASE_URL, SUPABASE_KEY)


async def get_async_supabase_client() -> AsyncClient:
    """Cliente assíncrono, necessário para o canal de tempo real."""
    return await acreate_client(SUPABASE_URL, SUPABASE_KEY)


def _fail(action: str, e: Exception) -> TransientFetchError:
    print(f"ERROR: Erro ao {action} no Supabase: {e}", file=sys.stderr)
    return TransientFetchError(f"Não foi possível {action}. Tente novamente mais tarde.")


def _as_iso_date(value: Union[str, datetime.date, None], field: str) -> str:
    if not value:
        raise ValidationError(f"Informe a {field}.")
    if isinstance(value, datetime.datetime):
        value = value.date()
    if isinstance(value, datetime.date):
        return value.isoformat()
    try:
        return datetime.date.fromisoformat(str(value)[:10]).isoformat()
    except ValueError:
        raise ValidationError(f"Data inválida: '{value}'. Use o formato AAAA-MM-DD.")


def _as_positive_amount(value: Any, message: str) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if amount != amount or amount <= 0:  # NaN ou não positivo
        raise ValidationError(message)
    return amount


# --- Funções para Transações ---
def list_transactions(
    supabase_client: Client,
    date_from: Union[str, datetime.date, None] = None,
    date_to: Union[str, datetime.date, None] = None,
    kind: Optional[str] = None,
    limit: Optional[int] = None,
    ordered: bool = True,
) -> List[Dict[str, Any]]:
    """Obtém as transações, filtradas por período e tipo.

    Ordem: data mais recente primeiro e, no mesmo dia, a criada por último.
    """
    if kind is not None and kind not in TRANSACTION_KINDS:
        raise ValidationError(f"Tipo de transação inválido: '{kind}'.")

    query = supabase_client.table("transactions").select("*")
    if date_from:
        query = query.gte("date", _as_iso_date(date_from, "data inicial"))
    if date_to:
        query = query.lte("date", _as_iso_date(date_to, "data final"))
    if kind:
        query = query.eq("type", kind)
    if ordered:
        query = query.order("date", desc=True).order("created_at", desc=True)
    if limit:
        query = query.limit(limit)

    try:
        response = query.execute()
    except Exception as e:
        raise _fail("obter transações", e) from e
    return response.data or []


def insert_transaction(
    supabase_client: Client,
    kind: str,
    amount: Any,
    category: str,
    date: Union[str, datetime.date],
    memo: Optional[str] = None,
) -> Dict[str, Any]:
    """Valida e adiciona uma nova transação. Retorna a linha criada."""
    if kind not in TRANSACTION_KINDS:
        raise ValidationError(f"Tipo de transação inválido: '{kind}'.")
    value = _as_positive_amount(amount, "Informe um valor válido, maior que zero.")
    if not category or not str(category).strip():
        raise ValidationError("Informe a categoria.")
    iso_date = _as_iso_date(date, "data")

    try:
        response = supabase_client.table("transactions").insert({
            "type": kind,
            "amount": value,
            "category": str(category).strip(),
            "memo": memo or None,
            "date": iso_date,
        }).execute()
    except Exception as e:
        raise _fail("adicionar transação", e) from e
    return response.data[0]


def delete_transaction(supabase_client: Client, transaction_id: str) -> Dict[str, Any]:
    """Remove uma transação pelo id. Levanta NotFoundError se o id não existir."""
    try:
        response = supabase_client.table("transactions").delete().eq("id", transaction_id).execute()
    except Exception as e:
        raise _fail("excluir transação", e) from e
    if not response.data:
        raise NotFoundError(f"Transação '{transaction_id}' não encontrada.")
    return response.data[0]


def find_transaction_by_prefix(supabase_client: Client, prefix: str, limit: int = 200) -> Dict[str, Any]:
    """Encontra uma transação recente pelo início do id (os ids curtos exibidos no /resumo)."""
    prefix = (prefix or "").strip().lower()
    if not prefix:
        raise ValidationError("Informe o id da transação.")
    matches = [
        t for t in list_transactions(supabase_client, limit=limit)
        if str(t.get("id", "")).lower().startswith(prefix)
    ]
    if not matches:
        raise NotFoundError(f"Transação '{prefix}' não encontrada.")
    if len(matches) > 1:
        raise ValidationError(f"Mais de uma transação começa com '{prefix}'. Use mais caracteres do id.")
    return matches[0]


# --- Funções para a Meta ---
def get_goal(supabase_client: Client, key: str = GOAL_KEY) -> Union[Dict[str, Any], None]:
    """Obtém a meta pela chave, ou None se ainda não existir."""
    try:
        response = supabase_client.table("goals").select("*").eq("key", key).limit(1).execute()
    except Exception as e:
        raise _fail("obter a meta", e) from e
    return response.data[0] if response.data else None


def create_goal(
    supabase_client: Client,
    target_amount: Any,
    current_amount: float = 0,
    key: str = GOAL_KEY,
) -> Dict[str, Any]:
    """Cria a meta da chave informada."""
    target = _as_positive_amount(target_amount, "Informe um valor de meta válido, maior que zero.")
    if current_amount is None or float(current_amount) < 0:
        raise ValidationError("O valor atual da meta não pode ser negativo.")

    response = supabase_client.table("goals").insert({
        "key": key,
        "target_amount": target,
        "current_amount": float(current_amount),
    }).execute()
    return response.data[0]


def update_goal(supabase_client: Client, goal_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Atualiza campos da meta (valor alvo, data alvo...)."""
    changes = dict(fields)
    if "target_amount" in changes:
        changes["target_amount"] = _as_positive_amount(
            changes["target_amount"], "Informe um valor de meta válido, maior que zero."
        )
    if "target_date" in changes and changes["target_date"] is not None:
        changes["target_date"] = _as_iso_date(changes["target_date"], "data alvo")
    if "current_amount" in changes and float(changes["current_amount"]) < 0:
        raise ValidationError("O valor atual da meta não pode ser negativo.")

    try:
        response = supabase_client.table("goals").update(changes).eq("id", goal_id).execute()
    except Exception as e:
        raise _fail("atualizar a meta", e) from e
    if not response.data:
        raise NotFoundError(f"Meta '{goal_id}' não encontrada.")
    return response.data[0]


def get_or_create_goal(
    supabase_client: Client,
    key: str = GOAL_KEY,
    default_target: float = DEFAULT_GOAL_TARGET,
) -> Dict[str, Any]:
    """Obtém a meta da chave, criando-a com o valor padrão na primeira leitura."""
    goal = get_goal(supabase_client, key)
    if goal:
        return goal

    print(f"DEBUG: Meta '{key}' não existe, criando com alvo {default_target}.")
    try:
        return create_goal(supabase_client, default_target, 0, key)
    except APIError as e:
        # Outro processo criou a meta ao mesmo tempo (chave única)
        if getattr(e, "code", None) == UNIQUE_VIOLATION:
            goal = get_goal(supabase_client, key)
            if goal:
                return goal
        raise _fail("criar a meta", e) from e
    except ValidationError:
        raise
    except Exception as e:
        raise _fail("criar a meta", e) from e


def _compare_and_set_current_amount(
    supabase_client: Client, goal: Dict[str, Any], new_amount: float, extra: Optional[Dict[str, Any]] = None
) -> Union[Dict[str, Any], None]:
    """Grava o novo valor só se o valor atual no banco ainda for o que foi lido."""
    changes = {"current_amount": new_amount}
    changes.update(extra or {})
    try:
        response = (
            supabase_client.table("goals")
            .update(changes)
            .eq("id", goal["id"])
            .eq("current_amount", goal.get("current_amount") or 0)
            .execute()
        )
    except Exception as e:
        raise _fail("atualizar o valor da meta", e) from e
    return response.data[0] if response.data else None


def increment_goal_current_amount(
    supabase_client: Client, amount: float, key: str = GOAL_KEY, max_attempts: int = 5
) -> Dict[str, Any]:
    """Soma um ganho ao valor atual da meta com compare-and-swap."""
    for attempt in range(1, max_attempts + 1):
        goal = get_or_create_goal(supabase_client, key)
        updated = goal_tracker.apply_income(goal, amount)
        saved = _compare_and_set_current_amount(supabase_client, goal, updated["current_amount"])
        if saved:
            return saved
        print(f"DEBUG: Conflito ao atualizar a meta '{key}' (tentativa {attempt}/{max_attempts}).")

    print(f"ERROR: Não foi possível somar {amount} à meta '{key}' após {max_attempts} tentativas.", file=sys.stderr)
    raise TransientFetchError("A meta foi alterada por outra operação. Tente novamente.")


def reset_goal_current_amount(supabase_client: Client, key: str = GOAL_KEY) -> Dict[str, Any]:
    """Zera o valor atual da meta e registra o momento do reset."""
    goal = get_or_create_goal(supabase_client, key)
    reset = goal_tracker.reset_current_amount(goal)
    return update_goal(supabase_client, goal["id"], {
        "current_amount": reset["current_amount"],
        "reset_at": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    })


def record_transaction(
    supabase_client: Client,
    kind: str,
    amount: Any,
    category: str,
    date: Union[str, datetime.date],
    memo: Optional[str] = None,
    key: str = GOAL_KEY,
) -> Dict[str, Any]:
    """Registra a transação e, se for ganho, soma uma única vez à meta."""
    transaction = insert_transaction(supabase_client, kind, amount, category, date, memo)
    if kind == INCOME:
        try:
            increment_goal_current_amount(supabase_client, transaction["amount"], key)
        except TransientFetchError as e:
            # A transação já foi gravada; o /conciliar corrige a diferença depois
            print(
                f"ERROR: Ganho {transaction.get('id')} gravado sem atualizar a meta '{key}'.",
                file=sys.stderr,
            )
            raise TransientFetchError(
                "A transação foi registrada, mas a meta não foi atualizada. Use /conciliar para corrigir."
            ) from e
    return transaction


def reconcile_goal(supabase_client: Client, key: str = GOAL_KEY, apply: bool = True) -> Dict[str, Any]:
    """Compara o valor mantido na meta com o histórico de ganhos e corrige a diferença."""
    goal = get_or_create_goal(supabase_client, key)
    incomes = list_transactions(supabase_client, kind=INCOME, ordered=False)

    recorded = float(goal.get("current_amount") or 0)
    expected = goal_tracker.compute_expected_current_amount(incomes, goal.get("reset_at"))
    drift = goal_tracker.compute_drift(goal, incomes)

    corrected = False
    if apply and drift != 0:
        corrected = _compare_and_set_current_amount(supabase_client, goal, expected) is not None
        if not corrected:
            print(f"DEBUG: Meta '{key}' mudou durante a conciliação, nada foi corrigido.")

    return {"expected": expected, "recorded": recorded, "drift": drift, "corrected": corrected}


# --- Tempo real ---
async def subscribe_to_transaction_changes(
    async_client: AsyncClient, callback: Callable[[Dict[str, Any]], Any]
):
    """Assina inserções, alterações e exclusões na tabela 'transactions'.

    O callback pode ser chamado mais vezes do que houve mudanças; trate como
    um aviso para recalcular, sem depender do conteúdo.
    """
    channel = async_client.channel("transactions-changes")
    channel.on_postgres_changes("*", schema="public", table="transactions", callback=callback)
    await channel.subscribe()
    print("DEBUG: Inscrito nas mudanças da tabela 'transactions'.")
    return channel
