from dotenv import load_dotenv
import os

# Загружаем переменные из .env
load_dotenv()

# База данных
DB_FILE = os.getenv("DB_FILE", "juwelier.db")

# Логирование
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "")

# CORS
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# Пагинация
DEFAULT_LIMIT = int(os.getenv("DEFAULT_LIMIT", "10"))

API_TITLE = os.getenv("API_TITLE", "Juwelier API")

# Сервер
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3000"))
