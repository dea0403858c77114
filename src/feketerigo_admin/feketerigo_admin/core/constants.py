"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

INVOICE_CATEGORIES = (
    "Bérleti díjak",
    "Közüzemi díjak",
    "Szolgáltatások",
    "Étkeztetés költségei",
    "Személyi jellegű kifizetések",
    "Anyagköltség",
    "Tárgyi eszközök",
    "Felújítás, beruházások",
    "Egyéb",
)
OTHER_CATEGORY = "Egyéb"
AI_CATEGORY_SUFFIX = " (AI)"

INVOICES_BUCKET = "invoices"
PAYROLL_BUCKET = "payroll"
TAX_BUCKET = "tax"

DEFAULT_SIGNED_URL_TTL = 3600
NOTICE_DISMISS_MS = 4000

BACKUP_WINDOW_DAYS = 14
BACKUP_HISTORY_LIMIT = 10

DEFAULT_CAMPUS = "Feketerigó"
