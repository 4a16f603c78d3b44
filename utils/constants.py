APP_NAME = "Controle Fácil"
APP_WIDTH = 1200
APP_HEIGHT = 760
DB_FILE = "controle_facil.db"
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

TRANSACTION_TYPES = ("income", "expense")
TYPE_LABELS = {"income": "Income", "expense": "Expense"}
RECURRING_INTERVALS = ("weekly", "monthly", "yearly")

INSTALLMENT_MIN = 2
INSTALLMENT_MAX = 60
UPCOMING_BILL_DAYS = 7
RECENT_REPORT_ROWS = 10
MIN_PASSWORD_LENGTH = 6

THEMES = ("light", "dark", "system")
CURRENCIES = {
    "BRL": "R$",
    "USD": "$",
    "EUR": "€",
}
DEFAULT_THEME = "system"
DEFAULT_CURRENCY = "BRL"

UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#6366F1"
DEFAULT_CATEGORY_COLOR = "#6366F1"

PRESET_COLORS = [
    "#EF4444", "#F97316", "#F59E0B", "#EAB308",
    "#84CC16", "#22C55E", "#10B981", "#14B8A6",
    "#06B6D4", "#0EA5E9", "#3B82F6", "#6366F1",
    "#8B5CF6", "#A855F7", "#D946EF", "#EC4899",
]

DEFAULT_CATEGORIES = [
    {"name": "Salary",         "type": "income",  "color": "#22C55E"},
    {"name": "Freelance",      "type": "income",  "color": "#84CC16"},
    {"name": "Investments",    "type": "income",  "color": "#14B8A6"},
    {"name": "Food & Dining",  "type": "expense", "color": "#F97316"},
    {"name": "Housing",        "type": "expense", "color": "#EF4444"},
    {"name": "Utilities",      "type": "expense", "color": "#A855F7"},
    {"name": "Transport",      "type": "expense", "color": "#3B82F6"},
    {"name": "Healthcare",     "type": "expense", "color": "#06B6D4"},
    {"name": "Entertainment",  "type": "expense", "color": "#EC4899"},
]

INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"
WARNING_COLOR = "#FF9800"
INFO_COLOR = "#2196F3"
