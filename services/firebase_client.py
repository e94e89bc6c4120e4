import logging
import os

import firebase_admin
from dotenv import load_dotenv
from firebase_admin import credentials, firestore

# Load the .env file
load_dotenv()

logger = logging.getLogger(__name__)

_db = None


def _credentials_from_env() -> dict:
    private_key = os.getenv("FIREBASE_PRIVATE_KEY")
    if not private_key:
        raise RuntimeError("FIREBASE_PRIVATE_KEY is not set; cannot use the Firestore store")

    return {
        "type": os.getenv("FIREBASE_TYPE"),
        "project_id": os.getenv("FIREBASE_PROJECT_ID"),
        "private_key_id": os.getenv("FIREBASE_PRIVATE_KEY_ID"),
        "private_key": private_key.replace("\\n", "\n"),
        "client_email": os.getenv("FIREBASE_CLIENT_EMAIL"),
        "client_id": os.getenv("FIREBASE_CLIENT_ID"),
        "auth_uri": os.getenv("FIREBASE_AUTH_URI"),
        "token_uri": os.getenv("FIREBASE_TOKEN_URI"),
        "auth_provider_x509_cert_url": os.getenv("FIREBASE_AUTH_PROVIDER_X509_CERT_URL"),
        "client_x509_cert_url": os.getenv("FIREBASE_CLIENT_X509_CERT_URL"),
        "universe_domain": os.getenv("FIREBASE_UNIVERSE_DOMAIN"),
    }


# Firestore client, initialized on first use
def get_db():
    global _db
    if _db is not None:
        return _db

    if not firebase_admin._apps:
        try:
            cred = credentials.Certificate(_credentials_from_env())
            firebase_admin.initialize_app(cred)
            logger.info("Firebase connection established.")
        except Exception:
            logger.exception("Error connecting to Firebase")
            raise

    _db = firestore.client()
    return _db
