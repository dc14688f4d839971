import os


class Settings:
    def __init__(self):
        # --- Database ---
        self.DB_USER = os.getenv("DB_USER", "endurance")
        self.DB_PASS = os.getenv("DB_PASS", "")
        self.DB_HOST = os.getenv("DB_HOST", "localhost")
        self.DB_PORT = os.getenv("DB_PORT", "5432")
        self.DB_NAME = os.getenv("DB_NAME", "endurance")
        self.DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

        # --- Event bus ---
        self.MARKET_DATA_SUBJECT = os.getenv("MARKET_DATA_SUBJECT", "market_data.events")
        self.DLQ_SUBJECT = os.getenv("DLQ_SUBJECT", "market_data.dlq")

        # --- Telegram ---
        self.TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
        self.TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID", "")

        # --- Runtime ---
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.TRADING_CONFIG = os.getenv("TRADING_CONFIG", "")

    @property
    def DATABASE_URL(self):
        """Generate the database URL (an explicit DATABASE_URL wins)."""
        explicit = os.getenv("DATABASE_URL")
        if explicit:
            return explicit
        if self.DB_PASS:
            return f"postgresql://{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        else:
            return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

settings = Settings()
