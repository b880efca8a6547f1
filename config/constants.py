"""Immutable constants for the football scoreboard bot."""

# Timezone used for day boundaries when REFERENCE_TIMEZONE is not set
TIMEZONE = "Europe/Lisbon"

# Provider used when PROVIDER is not set
DEFAULT_PROVIDER = "football-data"

# Default leagues per provider (display name -> provider league id)
DEFAULT_LEAGUES = {
    "football-data": {
        "Premier League": "PL",
        "Bundesliga": "BL1",
        "La Liga": "PD",
        "Champions League": "CL",
        "Brasileirão": "BSA",
    },
    "api-football": {
        "Premier League": "39",
        "Bundesliga": "78",
        "La Liga": "140",
        "Champions League": "2",
        "Liga Portugal": "94",
    },
}

# Cache and polling (seconds)
CACHE_DURATION = 120
BASE_INTERVAL = 5 * 60
FAST_INTERVAL = 60
IMMINENT_WINDOW = 3 * 60
KICKOFF_DEBOUNCE = 30

# HTTP
REQUEST_TIMEOUT = 10.0
MAX_RETRIES = 3
RETRY_DELAY = 1.0

# Slash command cooldown for manual refresh (seconds)
REFRESH_COOLDOWN = 30

# Daily restart of the polling loop, reference timezone
ROLLOVER_HOUR = 0
ROLLOVER_MINUTE = 1
# Late rollover still runs within this grace; a busy one retries after the delay
ROLLOVER_MISFIRE_GRACE = 600
ROLLOVER_RETRY_DELAY = 30

# Scoreboard labels
STATUS_LABELS = {
    "LIVE": "🔴 AO VIVO",
    "HALFTIME": "⏸️ INT",
    "FULLTIME": "FIM",
    "POSTPONED": "ADIADO",
    "CANCELLED": "CANCELADO",
    "SUSPENDED": "SUSPENSO",
}
UNKNOWN_SCORE = "-"

# Error messages
ERROR_SCOREBOARD = "❌ Erro ao obter os jogos de hoje."
ERROR_REFRESH = "❌ Erro ao actualizar os jogos."
ERROR_MISSING_API_KEY = (
    "❌ Chave da API em falta. Define `FOOTBALLDATA_KEY` no ficheiro .env."
)

# Scoreboard messages
SCOREBOARD_TITLE = "⚽ **Jogos de hoje** ({day})"
SCOREBOARD_EMPTY = "😴 Não há jogos hoje nas competições seguidas."
SCOREBOARD_LOADING = "⏳ A carregar jogos..."
SCOREBOARD_UPDATED = "🕐 Última actualização: {time}"
SCOREBOARD_STALE = (
    "⚠️ Limite de pedidos da API atingido, a mostrar os últimos dados."
)

# Refresh command messages
SUCCESS_REFRESHED = "🔄 Jogos actualizados."
REFRESH_IN_PROGRESS = "⏳ Já está a decorrer uma actualização."
REFRESH_RATE_LIMITED = "⏳ Actualização pedida há pouco. Tenta mais tarde."

# Discord hard limit on message length
DISCORD_MESSAGE_LIMIT = 2000
