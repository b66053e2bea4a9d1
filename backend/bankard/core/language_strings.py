"""Language Strings — centralized locale-specific user-facing error texts.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - Every ErrorKind has an entry for every Locale
    - Texts never include transport payloads, status codes or stack traces

Design Decisions:
    - pt-BR is the product language; en exists for diagnostics and tests
    - Per-operation fallbacks mirror the wording the repositories used when wrapping
      unexpected failures ("could not load the cards", "could not load the balance")
"""

from bankard.core.domain_types import Locale, Operation

DEFAULT_LOCALE = Locale.PT_BR


# --- Taxonomy messages --------------------------------------------------------

_NOT_FOUND: dict[Locale, str] = {
    Locale.PT_BR: "{resource} não encontrado(a). Verifique os dados e tente novamente.",
    Locale.EN: "{resource} not found. Check the data and try again.",
}

_STATIC: dict[str, dict[Locale, str]] = {
    "unauthorized": {
        Locale.PT_BR: "Sessão expirada. Por favor, faça login novamente.",
        Locale.EN: "Session expired. Please log in again.",
    },
    "forbidden": {
        Locale.PT_BR: "Você não tem permissão para realizar esta ação.",
        Locale.EN: "You are not allowed to perform this action.",
    },
    "bad_request": {
        Locale.PT_BR: "Dados inválidos. Verifique as informações e tente novamente.",
        Locale.EN: "Invalid data. Check the information and try again.",
    },
    "server_error": {
        Locale.PT_BR: "Erro no servidor. Tente novamente mais tarde.",
        Locale.EN: "Server error. Try again later.",
    },
    "network_error": {
        Locale.PT_BR: "Erro de conexão. Verifique sua internet e tente novamente.",
        Locale.EN: "Connection error. Check your internet and try again.",
    },
    "timeout": {
        Locale.PT_BR: "A requisição demorou muito para responder. Tente novamente.",
        Locale.EN: "The request took too long to respond. Try again.",
    },
    "unexpected": {
        Locale.PT_BR: "Ocorreu um erro inesperado. Tente novamente.",
        Locale.EN: "An unexpected error occurred. Try again.",
    },
    "storage": {
        Locale.PT_BR: "Não foi possível salvar os dados localmente.",
        Locale.EN: "Could not save data locally.",
    },
}

_DEFAULT_RESOURCE: dict[Locale, str] = {
    Locale.PT_BR: "Recurso",
    Locale.EN: "Resource",
}


# --- Per-operation fallbacks (wrapping non-taxonomy failures) ------------------

_OPERATION_FALLBACK: dict[Operation, dict[Locale, str]] = {
    Operation.AUTHENTICATE: {
        Locale.PT_BR: "Erro ao fazer login. Verifique suas credenciais.",
        Locale.EN: "Login failed. Check your credentials.",
    },
    Operation.LIST_INSTRUMENTS_BY_HOLDER: {
        Locale.PT_BR: "Não foi possível carregar os cartões. Tente novamente.",
        Locale.EN: "Could not load the cards. Try again.",
    },
    Operation.GET_INSTRUMENT: {
        Locale.PT_BR: "Não foi possível carregar os detalhes do cartão.",
        Locale.EN: "Could not load the card details.",
    },
    Operation.BLOCK_INSTRUMENT: {
        Locale.PT_BR: "Não foi possível bloquear o cartão. Tente novamente.",
        Locale.EN: "Could not block the card. Try again.",
    },
    Operation.UNBLOCK_INSTRUMENT: {
        Locale.PT_BR: "Não foi possível desbloquear o cartão. Tente novamente.",
        Locale.EN: "Could not unblock the card. Try again.",
    },
    Operation.ACTIVATE_INSTRUMENT: {
        Locale.PT_BR: "Não foi possível ativar o cartão. Tente novamente.",
        Locale.EN: "Could not activate the card. Try again.",
    },
    Operation.GET_ACCOUNT_BALANCE: {
        Locale.PT_BR: "Não foi possível carregar o saldo. Tente novamente.",
        Locale.EN: "Could not load the balance. Try again.",
    },
    Operation.LIST_ACCOUNTS: {
        Locale.PT_BR: "Não foi possível carregar as contas. Tente novamente.",
        Locale.EN: "Could not load the accounts. Try again.",
    },
    Operation.GET_ACCOUNT_AVAILABLES: {
        Locale.PT_BR: "Não foi possível carregar os saldos disponíveis.",
        Locale.EN: "Could not load the available balances.",
    },
    Operation.GET_STATEMENT: {
        Locale.PT_BR: "Não foi possível carregar o extrato. Tente novamente.",
        Locale.EN: "Could not load the statement. Try again.",
    },
}


def get_error_message(key: str, locale: Locale = DEFAULT_LOCALE) -> str:
    """Return the static user-facing text for a taxonomy key."""
    return _STATIC[key][locale]


def format_not_found(resource: str | None, locale: Locale = DEFAULT_LOCALE) -> str:
    return _NOT_FOUND[locale].format(resource=resource or _DEFAULT_RESOURCE[locale])


def get_operation_fallback(
    operation: Operation | None, locale: Locale = DEFAULT_LOCALE,
) -> str:
    """Fallback text used when an operation fails with a non-taxonomy error."""
    if operation is None:
        return _STATIC["unexpected"][locale]
    return _OPERATION_FALLBACK[operation][locale]
