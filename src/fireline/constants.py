APP_NAME = "fireline"

DEFAULT_IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1"
DEFAULT_STORAGE_URL = "https://firebasestorage.googleapis.com/v0"
