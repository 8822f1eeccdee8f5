import uvicorn
from fastapi import FastAPI
from config import API_TITLE, HOST, PORT
from logger import logger
from database import init_db
from middleware import setup_middleware
from products import router as products_router
from categories import router as categories_router


app = FastAPI(title=API_TITLE)
setup_middleware(app)


@app.on_event("startup")
def startup_event():
    logger.info("Startup event triggered.")
    init_db()


@app.get("/api")
def api_status():
    return {"message": "API is working!"}


# Подключаем маршруты API
app.include_router(products_router)
app.include_router(categories_router)
logger.info("FastAPI server started.")


if __name__ == "__main__":
    uvicorn.run("main:app", host=HOST, port=PORT)
