# boutique.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe), sécurité cookies, CORS/hosts
- Choix des adaptateurs: coffre à cartes (supabase|file) et autorisateur de paiement (demo|stripe)
- Paramètres métier du checkout (employé par défaut, années d'expiration proposées)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

# Supabase: URL et clés (anon/service)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Cookies / session
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")
SESSION_SECRET_KEY = _clean_env(os.getenv("SESSION_SECRET_KEY") or "replace_me_with_a_long_random_secret")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Stripe: clé secrète et devise des paiements
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_CURRENCY = _clean_env(os.getenv("STRIPE_CURRENCY") or "eur").lower()

# Autorisateur de paiement: "demo" (code d'approbation local) ou "stripe"
PAYMENT_AUTHORIZER = _clean_env(os.getenv("PAYMENT_AUTHORIZER") or "demo").lower()

# Coffre à cartes: "supabase" (table stored_credit_cards) ou "file" (document JSON)
CARD_VAULT_BACKEND = _clean_env(os.getenv("CARD_VAULT_BACKEND") or "supabase").lower()
CARD_VAULT_PATH = Path(_clean_env(os.getenv("CARD_VAULT_PATH") or str(BASE_DIR / "var" / "stored_credit_cards.json")))
# Clé Fernet (urlsafe base64, 32 octets) chiffrant les numéros de carte au repos
CARD_VAULT_KEY = _clean_env(os.getenv("CARD_VAULT_KEY") or "")

# Checkout
CHECKOUT_EMPLOYEE_ID = int(os.getenv("CHECKOUT_EMPLOYEE_ID", "1"))
EXPIRATION_YEARS_AHEAD = int(os.getenv("EXPIRATION_YEARS_AHEAD", "5"))
