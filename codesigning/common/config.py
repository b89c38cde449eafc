import os

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

KEY_SIZE = int(os.getenv("CODESIGN_KEY_SIZE", "2048"))
PUBLIC_EXPONENT = 65537

ROOT_VALIDITY_YEARS = int(os.getenv("CODESIGN_ROOT_VALIDITY_YEARS", "20"))
INTERMEDIATE_VALIDITY_YEARS = int(os.getenv("CODESIGN_INTERMEDIATE_VALIDITY_YEARS", "2"))

# development leaf: 30 days forward, 5 days backdated for clock skew at the callsite
LEAF_VALIDITY_DAYS = int(os.getenv("CODESIGN_LEAF_VALIDITY_DAYS", "30"))
LEAF_BACKDATE_DAYS = int(os.getenv("CODESIGN_LEAF_BACKDATE_DAYS", "5"))

SERIAL_NUMBER_BYTES = 9

OUT_DIR = os.getenv("CODESIGN_OUT_DIR", "keys")
LOG_LEVEL = os.getenv("CODESIGN_LOG_LEVEL", "INFO")

ROOT_SUBJECT = [
    ("commonName", "Expo Root Certificate"),
    ("countryName", "US"),
    ("ST", "California"),
    ("localityName", "Palo Alto"),
    ("organizationName", "Expo"),
    ("OU", "Engineering"),
]
INTERMEDIATE_SUBJECT = [("commonName", "Expo Go Certificate")] + ROOT_SUBJECT[1:]
