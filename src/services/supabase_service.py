"""
Сервис для работы с Supabase
"""
from supabase import create_client, Client
from typing import Optional
import logging
import os

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "app_settings"


class SupabaseService:
    """Подключение к Supabase и чтение настроек приложения"""

    def __init__(self, url: str, key: str, client: Optional[Client] = None):
        self.client: Client = client or create_client(url, key)
        logger.info("Supabase клиент инициализирован")

    def get_secret(self, secret_name: str) -> Optional[str]:
        """
        Получить секрет: сначала переменная окружения, затем таблица app_settings

        Ошибка чтения таблицы не фатальна, вызывающий код сам решает,
        что делать при отсутствии секрета.
        """
        value = os.getenv(secret_name)
        if value:
            return value

        try:
            result = self.client.table(SETTINGS_TABLE).select("value").eq("key", secret_name).execute()
        except Exception as e:
            logger.error(f"Ошибка получения секрета {secret_name}: {e}")
            return None

        if result.data:
            logger.info(f"Секрет {secret_name} получен из {SETTINGS_TABLE}")
            return result.data[0]["value"]
        return None

    def get_client(self) -> Client:
        """Получить клиент Supabase"""
        return self.client
