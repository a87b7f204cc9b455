import os
from dotenv import load_dotenv

# Load .env so settings are available even when running via Streamlit
load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(__file__))

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{os.path.join(BASE_DIR, 'data', 'intake.db')}",
)

# External enrollment portal opened after "Proceed to Enrollment"
ENROLLMENT_PORTAL_URL = os.getenv("ENROLLMENT_PORTAL_URL", "https://portal.copays.org/#/register")

# Seconds the pricing card stays on screen before moving to program enrollment
PRICING_DISPLAY_SECONDS = float(os.getenv("PRICING_DISPLAY_SECONDS", "2"))

# Seconds between a successful enrollment and the automatic logout
ENROLL_LOGOUT_SECONDS = float(os.getenv("ENROLL_LOGOUT_SECONDS", "1"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
